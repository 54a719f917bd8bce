"""AssigneeSelectionPolicy — pick a team member for a matched rule."""

from __future__ import annotations

from typing import Iterable, Mapping

from app.domain.entities.assignment import Assignment
from app.domain.entities.assignment_rule import AssignmentRule
from app.domain.entities.team_member import TeamMember
from app.domain.policies.round_robin import pick_least_recent
from app.domain.value_objects.case_data import CaseData
from app.domain.value_objects.enums import AssignmentStrategy

# specific_user returns its target even when that member is unavailable or full,
# while every other strategy only draws from the eligible pool.
SPECIFIC_USER_BYPASSES_POOL = True


def eligible_pool(members: Iterable[TeamMember]) -> list[TeamMember]:
    """Available members with spare capacity, in registry order."""
    return [m for m in members if m.is_available() and m.has_capacity()]


def find_best_assignee(
    rule: AssignmentRule,
    case_data: CaseData,
    members: Mapping[int, TeamMember],
    history: Iterable[Assignment],
    specific_user_bypasses_pool: bool = SPECIFIC_USER_BYPASSES_POOL,
) -> TeamMember | None:
    """Select an assignee according to ``rule.assign_to``.

    Returns None when the eligible pool is empty, whatever the strategy.
    """
    pool = eligible_pool(members.values())
    if not pool:
        return None

    strategy = rule.assign_to

    if strategy == AssignmentStrategy.SPECIFIC_USER:
        if specific_user_bypasses_pool:
            return members.get(rule.target_user_id)
        return next((m for m in pool if m.id == rule.target_user_id), None)

    if strategy == AssignmentStrategy.ROUND_ROBIN:
        return pick_least_recent(pool, history)

    if strategy == AssignmentStrategy.LEAST_LOADED:
        return min(pool, key=lambda m: m.current_caseload)

    if strategy == AssignmentStrategy.MOST_SKILLED:
        skilled = pool
        if case_data.carrier:
            skilled = [m for m in pool if m.has_skill(case_data.carrier)]
        if not skilled:
            return None
        # max() keeps the first of equal success rates
        return max(skilled, key=lambda m: m.success_rate)

    return pool[0]
