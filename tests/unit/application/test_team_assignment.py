"""Tests for TeamAssignmentService with in-memory repositories."""

from __future__ import annotations

import pytest

from app.adapters.memory.repositories import (
    InMemoryAssignmentRepository,
    InMemoryRuleRepository,
    InMemoryTeamMemberRepository,
)
from app.application.services.team_assignment import TeamAssignmentService, coerce_priority
from app.domain.entities.assignment_rule import AmountRange, AssignmentRule, RuleConditions
from app.domain.entities.team_member import TeamMember
from app.domain.value_objects.case_data import CaseData
from app.domain.value_objects.enums import (
    AssignmentPriority,
    AssignmentStatus,
    AssignmentStrategy,
    Availability,
    MemberRole,
    MissingFieldPolicy,
)

# ─── Helpers ─────────────────────────────────────────────────────────


def _member(
    mid: int, load: int = 0, cap: int = 10, availability=Availability.AVAILABLE,
    skills=(), success: float = 0.5, role=MemberRole.AGENT,
) -> TeamMember:
    return TeamMember(
        id=mid, name=f"M{mid}", email=f"m{mid}@x.io", role=role, skills=set(skills),
        max_caseload=cap, current_caseload=load, availability=availability,
        success_rate=success,
    )


def _rule(
    rid="r1", priority=1, strategy=AssignmentStrategy.ROUND_ROBIN,
    target=None, auto=True, **conditions,
) -> AssignmentRule:
    return AssignmentRule(
        id=rid, name=rid, priority=priority, assign_to=strategy,
        conditions=RuleConditions(**conditions), target_user_id=target, auto_assign=auto,
    )


def _service_with(members, rules=(), policy=MissingFieldPolicy.IGNORE) -> TeamAssignmentService:
    service = TeamAssignmentService(
        member_repo=InMemoryTeamMemberRepository(),
        assignment_repo=InMemoryAssignmentRepository(),
        rule_repo=InMemoryRuleRepository(),
        missing_field_policy=policy,
    )
    for m in members:
        service.add_team_member(m)
    for r in rules:
        service.add_rule(r)
    return service


# ─── Members ─────────────────────────────────────────────────────────


def test_add_member_upserts_by_id(team_service):
    team_service.add_team_member(_member(1, load=0))
    team_service.add_team_member(_member(1, load=4))
    assert len(team_service.get_all_team_members()) == 1
    assert team_service.get_team_member(1).current_caseload == 4
    assert team_service.get_team_member(2) is None


def test_member_filters():
    service = _service_with([
        _member(1, skills={"FedEx"}, role=MemberRole.SUPERVISOR),
        _member(2, skills={"UPS", "high-value"}, availability=Availability.BUSY),
        _member(3, skills={"DHL"}),
    ])
    assert [m.id for m in service.get_all_team_members(role=MemberRole.SUPERVISOR)] == [1]
    assert [m.id for m in service.get_all_team_members(availability=Availability.BUSY)] == [2]
    assert [m.id for m in service.get_all_team_members(skills=["FedEx", "UPS"])] == [1, 2]
    assert len(service.get_all_team_members(skills=[])) == 3


# ─── Rules ───────────────────────────────────────────────────────────


def test_rules_sorted_by_priority_stable(team_service):
    team_service.add_rule(_rule("a", priority=1))
    team_service.add_rule(_rule("b", priority=5))
    team_service.add_rule(_rule("c", priority=1))
    assert [r.id for r in team_service.get_rules()] == ["b", "a", "c"]


# ─── Manual assignment ───────────────────────────────────────────────


def test_assign_case_creates_pending_and_bumps_caseload():
    service = _service_with([_member(1, load=2)])
    a = service.assign_case(case_id=10, assigned_to=1, assigned_by=99, notes="first")
    assert a.status == AssignmentStatus.PENDING
    assert a.priority == AssignmentPriority.MEDIUM
    assert a.notes == "first"
    assert service.get_assignment(10) is a
    assert service.get_team_member(1).current_caseload == 3


def test_manual_assign_ignores_capacity():
    service = _service_with([_member(1, load=3, cap=3, availability=Availability.OFFLINE)])
    service.assign_case(case_id=10, assigned_to=1, assigned_by=99)
    assert service.get_team_member(1).current_caseload == 4


def test_assign_unknown_member_still_records(team_service):
    a = team_service.assign_case(case_id=10, assigned_to=404, assigned_by=1)
    assert team_service.get_assignment(10) is a


# ─── Auto assignment ─────────────────────────────────────────────────


def test_round_robin_fairness():
    service = _service_with(
        [_member(1), _member(2), _member(3)],
        [_rule(strategy=AssignmentStrategy.ROUND_ROBIN)],
    )
    assignees = [
        service.auto_assign_case(case_id=c, case_data=CaseData(), assigned_by=0).assigned_to
        for c in (1, 2, 3)
    ]
    assert len(set(assignees)) == 3


def test_least_loaded_selection():
    service = _service_with(
        [_member(1, load=5), _member(2, load=1), _member(3, load=3)],
        [_rule(strategy=AssignmentStrategy.LEAST_LOADED)],
    )
    a = service.auto_assign_case(case_id=1, case_data=CaseData(), assigned_by=0)
    assert a.assigned_to == 2


def test_most_skilled_selection():
    service = _service_with(
        [
            _member(1, skills={"FedEx"}, success=0.6),
            _member(2, skills={"UPS"}, success=0.99),
            _member(3, skills={"FedEx"}, success=0.95),
        ],
        [_rule(strategy=AssignmentStrategy.MOST_SKILLED)],
    )
    a = service.auto_assign_case(case_id=1, case_data=CaseData(carrier="FedEx"), assigned_by=0)
    assert a.assigned_to == 3


def test_capacity_exhaustion_returns_none():
    service = _service_with(
        [_member(1, load=2, cap=2), _member(2, load=5, cap=5)],
        [_rule(strategy=AssignmentStrategy.LEAST_LOADED)],
    )
    assert service.auto_assign_case(case_id=1, case_data=CaseData(), assigned_by=0) is None
    assert service.get_assignment(1) is None


def test_capacity_exhaustion_applies_to_specific_user_too():
    service = _service_with(
        [_member(1, load=1, cap=1)],
        [_rule(strategy=AssignmentStrategy.SPECIFIC_USER, target=1)],
    )
    assert service.auto_assign_case(case_id=1, case_data=CaseData(), assigned_by=0) is None


def test_specific_user_assigns_target_even_if_unavailable():
    service = _service_with(
        [_member(1), _member(7, availability=Availability.AWAY)],
        [_rule(strategy=AssignmentStrategy.SPECIFIC_USER, target=7)],
    )
    a = service.auto_assign_case(case_id=1, case_data=CaseData(), assigned_by=0)
    assert a.assigned_to == 7


def test_no_matching_rule_returns_none():
    service = _service_with([_member(1)], [_rule(carrier=frozenset({"FedEx"}))])
    assert service.auto_assign_case(case_id=1, case_data=CaseData(carrier="UPS"), assigned_by=0) is None


def test_manual_only_rule_blocks_auto_assign():
    """First matching rule wins even when it is not auto-assign."""
    service = _service_with(
        [_member(1)],
        [
            _rule("manual", priority=10, auto=False),
            _rule("auto", priority=1),
        ],
    )
    assert service.auto_assign_case(case_id=1, case_data=CaseData(), assigned_by=0) is None


def test_higher_priority_rule_decides_strategy():
    service = _service_with(
        [_member(1, load=0), _member(2, load=0)],
        [
            _rule("big-claims", priority=10, strategy=AssignmentStrategy.SPECIFIC_USER,
                  target=2, amount_range=AmountRange(min=1000)),
            _rule("default", priority=1, strategy=AssignmentStrategy.LEAST_LOADED),
        ],
    )
    big = service.auto_assign_case(1, CaseData(claimed_amount=5000), assigned_by=0)
    small = service.auto_assign_case(2, CaseData(claimed_amount=50), assigned_by=0)
    assert big.assigned_to == 2
    assert small.assigned_to == 1


def test_missing_field_policy_reject():
    rules = [_rule(carrier=frozenset({"FedEx"}))]
    lenient = _service_with([_member(1)], rules)
    strict = _service_with([_member(1)], rules, policy=MissingFieldPolicy.REJECT)
    assert lenient.auto_assign_case(1, CaseData(), assigned_by=0) is not None
    assert strict.auto_assign_case(1, CaseData(), assigned_by=0) is None


def test_auto_assign_uses_case_priority():
    service = _service_with([_member(1)], [_rule()])
    a = service.auto_assign_case(1, CaseData(priority="urgent"), assigned_by=0)
    assert a.priority == AssignmentPriority.URGENT


def test_coerce_priority_defaults_to_medium():
    assert coerce_priority(None) == AssignmentPriority.MEDIUM
    assert coerce_priority("critical") == AssignmentPriority.MEDIUM
    assert coerce_priority(" high ") == AssignmentPriority.HIGH


# ─── Reassignment ────────────────────────────────────────────────────


def test_reassign_moves_caseload_and_keeps_history():
    service = _service_with([_member(1), _member(2)])
    first = service.assign_case(case_id=5, assigned_to=1, assigned_by=0, notes="x")
    first.transition_to(AssignmentStatus.ACCEPTED)

    second = service.reassign_case(case_id=5, new_assignee=2, reassigned_by=9, reason="vacation")

    assert second.id != first.id
    assert second.status == AssignmentStatus.PENDING
    assert second.notes == "vacation"
    assert second.assigned_by == 9
    assert first.assigned_to == 1  # old record untouched
    assert service.get_assignment(5) is second
    assert service.get_assignment_history(5) == [first, second]
    assert service.get_team_member(1).current_caseload == 0
    assert service.get_team_member(2).current_caseload == 1


def test_reassign_floor_zero():
    service = _service_with([_member(1), _member(2)])
    service.assign_case(case_id=5, assigned_to=1, assigned_by=0)
    service.get_team_member(1).current_caseload = 0
    service.reassign_case(case_id=5, new_assignee=2, reassigned_by=0)
    assert service.get_team_member(1).current_caseload == 0


def test_reassign_completed_case_keeps_other_open_load():
    service = _service_with([_member(1), _member(2)])
    service.assign_case(case_id=10, assigned_to=1, assigned_by=0)
    service.assign_case(case_id=11, assigned_to=1, assigned_by=0)
    for status in (
        AssignmentStatus.ACCEPTED, AssignmentStatus.IN_PROGRESS, AssignmentStatus.COMPLETED,
    ):
        service.update_assignment_status(10, status)
    assert service.get_team_member(1).current_caseload == 1

    service.reassign_case(case_id=10, new_assignee=2, reassigned_by=9)

    open_for_first = [a for a in service.get_user_assignments(1) if a.is_open()]
    assert len(open_for_first) == 1
    assert service.get_team_member(1).current_caseload == 1
    assert service.get_team_member(2).current_caseload == 1
    assert service.get_workload_stats().total_caseload == 2


def test_reassign_without_assignment(team_service):
    assert team_service.reassign_case(case_id=5, new_assignee=2, reassigned_by=0) is None


# ─── Escalation ──────────────────────────────────────────────────────


def test_escalation_preserves_notes():
    service = _service_with([_member(1)])
    service.assign_case(case_id=5, assigned_to=1, assigned_by=0, notes="foo")
    a = service.escalate_case(case_id=5, escalated_to=3, escalated_by=1, reason="bar")
    assert a.notes == "foo\nEscalated: bar"
    assert a.status == AssignmentStatus.ESCALATED
    assert a.escalated_to == 3
    assert a.escalated_at is not None
    assert service.get_assignment(5) is a
    assert len(service.get_assignment_history(5)) == 1


def test_escalate_without_assignment(team_service):
    assert team_service.escalate_case(case_id=5, escalated_to=3, escalated_by=1, reason="x") is None


def test_escalate_completed_raises():
    service = _service_with([_member(1)])
    service.assign_case(case_id=5, assigned_to=1, assigned_by=0)
    for status in (AssignmentStatus.ACCEPTED, AssignmentStatus.IN_PROGRESS, AssignmentStatus.COMPLETED):
        service.update_assignment_status(5, status)
    with pytest.raises(ValueError):
        service.escalate_case(case_id=5, escalated_to=3, escalated_by=1, reason="late")


# ─── Status transitions ──────────────────────────────────────────────


def test_completing_releases_caseload():
    service = _service_with([_member(1)])
    service.assign_case(case_id=5, assigned_to=1, assigned_by=0)
    assert service.get_team_member(1).current_caseload == 1

    service.update_assignment_status(5, AssignmentStatus.ACCEPTED)
    service.update_assignment_status(5, AssignmentStatus.IN_PROGRESS)
    a = service.update_assignment_status(5, AssignmentStatus.COMPLETED)

    assert a.status == AssignmentStatus.COMPLETED
    assert service.get_team_member(1).current_caseload == 0


def test_illegal_transition_raises():
    service = _service_with([_member(1)])
    service.assign_case(case_id=5, assigned_to=1, assigned_by=0)
    with pytest.raises(ValueError):
        service.update_assignment_status(5, AssignmentStatus.IN_PROGRESS)
    assert service.get_assignment(5).status == AssignmentStatus.PENDING


def test_status_update_without_assignment(team_service):
    assert team_service.update_assignment_status(5, AssignmentStatus.ACCEPTED) is None


# ─── Queries ─────────────────────────────────────────────────────────


def test_user_assignments_filtered_by_status():
    service = _service_with([_member(1), _member(2)])
    service.assign_case(case_id=1, assigned_to=1, assigned_by=0)
    service.assign_case(case_id=2, assigned_to=1, assigned_by=0)
    service.assign_case(case_id=3, assigned_to=2, assigned_by=0)
    service.update_assignment_status(2, AssignmentStatus.ACCEPTED)

    assert {a.case_id for a in service.get_user_assignments(1)} == {1, 2}
    assert [a.case_id for a in service.get_user_assignments(1, AssignmentStatus.ACCEPTED)] == [2]


def test_user_assignments_only_current():
    service = _service_with([_member(1), _member(2)])
    service.assign_case(case_id=1, assigned_to=1, assigned_by=0)
    service.reassign_case(case_id=1, new_assignee=2, reassigned_by=0)
    assert service.get_user_assignments(1) == []
    assert len(service.get_user_assignments(2)) == 1


def test_assignment_history_unknown_case(team_service):
    assert team_service.get_assignment_history(404) == []
    assert team_service.get_assignment(404) is None


# ─── Workload ────────────────────────────────────────────────────────


def test_workload_stats():
    service = _service_with([
        _member(1, load=3, cap=3, availability=Availability.AVAILABLE),
        _member(2, load=2, cap=5, availability=Availability.AVAILABLE),
        _member(3, load=0, cap=5, availability=Availability.BUSY),
        _member(4, load=1, cap=5, availability=Availability.AWAY),
    ])
    stats = service.get_workload_stats()
    assert stats.total_members == 4
    assert stats.available == 2
    assert stats.busy == 1
    assert stats.away == 1
    assert stats.total_caseload == 6
    assert stats.avg_caseload == 1.5
    assert stats.overloaded == 1


def test_workload_stats_empty(team_service):
    stats = team_service.get_workload_stats()
    assert stats.total_members == 0
    assert stats.avg_caseload == 0.0
