"""FastAPI dependency injection — wires in-memory stores into services."""

from __future__ import annotations

from app.adapters.memory.repositories import (
    InMemoryAssignmentRepository,
    InMemoryRuleRepository,
    InMemoryTeamMemberRepository,
    InMemoryVersionRepository,
)
from app.application.services.team_assignment import TeamAssignmentService
from app.application.services.version_control import VersionControlService
from app.config import settings

# One store per process; state is lost on restart.
_version_service = VersionControlService(InMemoryVersionRepository())
_team_service = TeamAssignmentService(
    member_repo=InMemoryTeamMemberRepository(),
    assignment_repo=InMemoryAssignmentRepository(),
    rule_repo=InMemoryRuleRepository(),
    missing_field_policy=settings.missing_field_policy,
)


def get_version_service() -> VersionControlService:
    return _version_service


def get_team_service() -> TeamAssignmentService:
    return _team_service
