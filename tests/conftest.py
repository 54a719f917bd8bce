"""Pytest configuration and shared fixtures."""

import pytest

from app.adapters.memory.repositories import (
    InMemoryAssignmentRepository,
    InMemoryRuleRepository,
    InMemoryTeamMemberRepository,
    InMemoryVersionRepository,
)
from app.application.services.team_assignment import TeamAssignmentService
from app.application.services.version_control import VersionControlService


@pytest.fixture
def version_service():
    return VersionControlService(InMemoryVersionRepository())


@pytest.fixture
def team_service():
    return TeamAssignmentService(
        member_repo=InMemoryTeamMemberRepository(),
        assignment_repo=InMemoryAssignmentRepository(),
        rule_repo=InMemoryRuleRepository(),
    )


@pytest.fixture
def sample_snapshot():
    return {
        "carrier": "FedEx",
        "trackingNumber": "794644790132",
        "claimedAmount": 249.99,
        "status": "DRAFT",
        "priority": "HIGH",
    }
