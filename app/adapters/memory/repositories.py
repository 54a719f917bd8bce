"""In-memory repository implementations.

State lives on the repository instances, not on the module, so each process
(or each test) builds its own store. Nothing here is durable.
"""

from __future__ import annotations

from app.application.ports.assignment_repo import AssignmentRepository
from app.application.ports.rule_repo import RuleRepository
from app.application.ports.team_member_repo import TeamMemberRepository
from app.application.ports.version_repo import VersionRepository
from app.domain.entities.assignment import Assignment
from app.domain.entities.assignment_rule import AssignmentRule
from app.domain.entities.case_version import CaseVersion
from app.domain.entities.team_member import TeamMember
from app.domain.policies.rule_matching import sort_rules


class InMemoryVersionRepository(VersionRepository):
    def __init__(self):
        self._versions: dict[int, list[CaseVersion]] = {}
        self._current: dict[int, int] = {}

    def append(self, version: CaseVersion) -> CaseVersion:
        self._versions.setdefault(version.case_id, []).append(version)
        self._current[version.case_id] = version.version
        return version

    def get_history(self, case_id: int) -> list[CaseVersion]:
        return list(self._versions.get(case_id, []))

    def get_current_version(self, case_id: int) -> int:
        return self._current.get(case_id, 0)

    def replace_history(self, case_id: int, versions: list[CaseVersion], current_version: int) -> None:
        self._versions[case_id] = list(versions)
        self._current[case_id] = current_version


class InMemoryTeamMemberRepository(TeamMemberRepository):
    def __init__(self):
        self._members: dict[int, TeamMember] = {}

    def save(self, member: TeamMember) -> TeamMember:
        self._members[member.id] = member
        return member

    def get_by_id(self, member_id: int) -> TeamMember | None:
        return self._members.get(member_id)

    def get_all(self) -> list[TeamMember]:
        return list(self._members.values())

    def as_mapping(self) -> dict[int, TeamMember]:
        return dict(self._members)


class InMemoryAssignmentRepository(AssignmentRepository):
    def __init__(self):
        self._current: dict[int, Assignment] = {}
        self._history: list[Assignment] = []

    def save(self, assignment: Assignment) -> Assignment:
        self._current[assignment.case_id] = assignment
        self._history.append(assignment)
        return assignment

    def get_current(self, case_id: int) -> Assignment | None:
        return self._current.get(case_id)

    def get_all_current(self) -> list[Assignment]:
        return list(self._current.values())

    def get_history(self, case_id: int | None = None) -> list[Assignment]:
        if case_id is None:
            return list(self._history)
        return [a for a in self._history if a.case_id == case_id]


class InMemoryRuleRepository(RuleRepository):
    def __init__(self):
        self._rules: list[AssignmentRule] = []

    def add(self, rule: AssignmentRule) -> None:
        self._rules.append(rule)
        self._rules = sort_rules(self._rules)

    def get_all(self) -> list[AssignmentRule]:
        return list(self._rules)
