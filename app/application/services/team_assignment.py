"""TeamAssignmentService — rule-based case routing with workload balancing."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable

from app.application.ports.assignment_repo import AssignmentRepository
from app.application.ports.rule_repo import RuleRepository
from app.application.ports.team_member_repo import TeamMemberRepository
from app.domain.entities.assignment import Assignment
from app.domain.entities.assignment_rule import AssignmentRule
from app.domain.entities.team_member import TeamMember
from app.domain.policies.assignee_selection import find_best_assignee
from app.domain.policies.rule_matching import find_matching_rule
from app.domain.value_objects.case_data import CaseData
from app.domain.value_objects.enums import (
    AssignmentPriority,
    AssignmentStatus,
    Availability,
    MemberRole,
    MissingFieldPolicy,
)
from app.domain.value_objects.timestamps import new_id, utc_now

logger = logging.getLogger(__name__)


@dataclass
class WorkloadStats:
    total_members: int
    available: int
    busy: int
    away: int
    total_caseload: int
    avg_caseload: float
    overloaded: int


def coerce_priority(raw: str | None) -> AssignmentPriority:
    """Map a case priority string onto an assignment priority (MEDIUM if unknown)."""
    if raw:
        try:
            return AssignmentPriority(raw.strip().upper())
        except ValueError:
            logger.debug("Unknown case priority %r, defaulting to MEDIUM", raw)
    return AssignmentPriority.MEDIUM


class TeamAssignmentService:
    """Registers team members and rules; assigns, reassigns and escalates cases.

    Each case has at most one current assignment. Reassignment creates a new
    record; the full record list per case is kept as history.
    """

    def __init__(
        self,
        member_repo: TeamMemberRepository,
        assignment_repo: AssignmentRepository,
        rule_repo: RuleRepository,
        missing_field_policy: MissingFieldPolicy = MissingFieldPolicy.IGNORE,
    ):
        self._members = member_repo
        self._assignments = assignment_repo
        self._rules = rule_repo
        self._missing_field_policy = missing_field_policy
        self._lock = threading.RLock()

    # ─── Team members ────────────────────────────────────────────────

    def add_team_member(self, member: TeamMember) -> None:
        with self._lock:
            self._members.save(member)
        logger.info("Team member %d (%s) registered", member.id, member.name)

    def get_team_member(self, user_id: int) -> TeamMember | None:
        return self._members.get_by_id(user_id)

    def get_all_team_members(
        self,
        role: MemberRole | None = None,
        availability: Availability | None = None,
        skills: Iterable[str] | None = None,
    ) -> list[TeamMember]:
        """Filter members; ``skills`` matches members holding any of them."""
        members = self._members.get_all()
        if role is not None:
            members = [m for m in members if m.role == role]
        if availability is not None:
            members = [m for m in members if m.availability == availability]
        wanted = set(skills or ())
        if wanted:
            members = [m for m in members if m.skills & wanted]
        return members

    # ─── Rules ───────────────────────────────────────────────────────

    def add_rule(self, rule: AssignmentRule) -> None:
        with self._lock:
            self._rules.add(rule)
        logger.info("Assignment rule %s (%s, priority %d) added", rule.id, rule.name, rule.priority)

    def get_rules(self) -> list[AssignmentRule]:
        return self._rules.get_all()

    # ─── Assignments ─────────────────────────────────────────────────

    def assign_case(
        self,
        case_id: int,
        assigned_to: int,
        assigned_by: int,
        priority: AssignmentPriority | None = None,
        due_date: datetime | None = None,
        notes: str | None = None,
    ) -> Assignment:
        """Create a pending assignment and make it the case's current one.

        No capacity check here: capacity only filters auto-assignment.
        """
        assignment = Assignment(
            id=new_id("assign"),
            case_id=case_id,
            assigned_to=assigned_to,
            assigned_by=assigned_by,
            assigned_at=utc_now(),
            priority=priority or AssignmentPriority.MEDIUM,
            status=AssignmentStatus.PENDING,
            due_date=due_date,
            notes=notes,
        )
        with self._lock:
            self._register(assignment)

        logger.info("Case %d → member %d (%s)", case_id, assigned_to, assignment.priority.value)
        return assignment

    def auto_assign_case(
        self,
        case_id: int,
        case_data: CaseData,
        assigned_by: int,
    ) -> Assignment | None:
        """Assign via the first matching auto-assign rule.

        Returns None when no rule matches, the rule is manual-only, or no
        eligible assignee exists.
        """
        with self._lock:
            rule = find_matching_rule(self._rules.get_all(), case_data, self._missing_field_policy)
            if rule is None:
                logger.info("Case %d: no assignment rule matched", case_id)
                return None
            if not rule.auto_assign:
                logger.info("Case %d: rule %s matched but is not auto-assign", case_id, rule.id)
                return None

            assignee = find_best_assignee(
                rule,
                case_data,
                self._members.as_mapping(),
                self._assignments.get_history(),
            )
            if assignee is None:
                logger.warning(
                    "Case %d: rule %s (%s) found no eligible assignee",
                    case_id, rule.id, rule.assign_to.value,
                )
                return None

            logger.info(
                "Case %d: rule %s picked member %d via %s",
                case_id, rule.id, assignee.id, rule.assign_to.value,
            )
            return self.assign_case(
                case_id=case_id,
                assigned_to=assignee.id,
                assigned_by=assigned_by,
                priority=coerce_priority(case_data.priority),
            )

    def reassign_case(
        self,
        case_id: int,
        new_assignee: int,
        reassigned_by: int,
        reason: str | None = None,
    ) -> Assignment | None:
        """Move a case to another member with a fresh pending record."""
        with self._lock:
            current = self._assignments.get_current(case_id)
            if current is None:
                return None

            # a completed assignment already gave its caseload back
            old_member = self._members.get_by_id(current.assigned_to)
            if old_member is not None and current.is_open():
                old_member.release_case()

            assignment = Assignment(
                id=new_id("assign"),
                case_id=case_id,
                assigned_to=new_assignee,
                assigned_by=reassigned_by,
                assigned_at=utc_now(),
                priority=current.priority,
                status=AssignmentStatus.PENDING,
                due_date=current.due_date,
                notes=reason,
                escalated_to=current.escalated_to,
                escalated_at=current.escalated_at,
            )
            self._register(assignment)

        logger.info(
            "Case %d reassigned: member %d → %d", case_id, current.assigned_to, new_assignee
        )
        return assignment

    def escalate_case(
        self,
        case_id: int,
        escalated_to: int,
        escalated_by: int,
        reason: str,
    ) -> Assignment | None:
        """Escalate the current assignment in place; notes are appended to.

        Raises:
            ValueError: if the current assignment is already completed.
        """
        with self._lock:
            assignment = self._assignments.get_current(case_id)
            if assignment is None:
                return None
            assignment.escalate(escalated_to, reason, utc_now())

        logger.info(
            "Case %d escalated to member %d by %d: %s", case_id, escalated_to, escalated_by, reason
        )
        return assignment

    def update_assignment_status(
        self,
        case_id: int,
        status: AssignmentStatus,
    ) -> Assignment | None:
        """Advance the current assignment along its lifecycle.

        Completing an assignment frees one unit of the assignee's caseload.

        Raises:
            ValueError: on a transition the lifecycle does not allow.
        """
        with self._lock:
            assignment = self._assignments.get_current(case_id)
            if assignment is None:
                return None
            assignment.transition_to(status)
            if status == AssignmentStatus.COMPLETED:
                member = self._members.get_by_id(assignment.assigned_to)
                if member is not None:
                    member.release_case()

        logger.info("Case %d assignment %s is now %s", case_id, assignment.id, status.value)
        return assignment

    def get_assignment(self, case_id: int) -> Assignment | None:
        return self._assignments.get_current(case_id)

    def get_user_assignments(
        self,
        user_id: int,
        status: AssignmentStatus | None = None,
    ) -> list[Assignment]:
        assignments = [a for a in self._assignments.get_all_current() if a.assigned_to == user_id]
        if status is not None:
            assignments = [a for a in assignments if a.status == status]
        return assignments

    def get_assignment_history(self, case_id: int) -> list[Assignment]:
        return self._assignments.get_history(case_id)

    # ─── Stats ───────────────────────────────────────────────────────

    def get_workload_stats(self) -> WorkloadStats:
        members = self._members.get_all()
        total_caseload = sum(m.current_caseload for m in members)

        return WorkloadStats(
            total_members=len(members),
            available=sum(1 for m in members if m.availability == Availability.AVAILABLE),
            busy=sum(1 for m in members if m.availability == Availability.BUSY),
            away=sum(1 for m in members if m.availability == Availability.AWAY),
            total_caseload=total_caseload,
            avg_caseload=total_caseload / len(members) if members else 0.0,
            overloaded=sum(1 for m in members if m.is_overloaded()),
        )

    def _register(self, assignment: Assignment) -> None:
        self._assignments.save(assignment)
        member = self._members.get_by_id(assignment.assigned_to)
        if member is not None:
            member.take_case()
