"""RuleMatchingPolicy — decide which assignment rule applies to a case."""

from __future__ import annotations

from typing import Iterable

from app.domain.entities.assignment_rule import AssignmentRule
from app.domain.value_objects.case_data import CaseData
from app.domain.value_objects.enums import MissingFieldPolicy


def rule_matches(
    rule: AssignmentRule,
    case_data: CaseData,
    missing_field_policy: MissingFieldPolicy = MissingFieldPolicy.IGNORE,
) -> bool:
    """Check every condition the rule sets against the case.

    - carrier / priority / status: set membership.
    - amount_range: inclusive min/max on claimed_amount.
    - tags: at least one case tag is in the rule's tag set.

    A condition whose field the case does not carry is satisfied under
    ``MissingFieldPolicy.IGNORE`` and fails under ``MissingFieldPolicy.REJECT``.
    """
    cond = rule.conditions
    missing_ok = missing_field_policy == MissingFieldPolicy.IGNORE

    checks = (
        (cond.carrier, case_data.carrier, lambda allowed, v: v in allowed),
        (cond.priority, case_data.priority, lambda allowed, v: v in allowed),
        (cond.amount_range, case_data.claimed_amount, lambda rng, v: rng.contains(v)),
        (cond.status, case_data.status, lambda allowed, v: v in allowed),
        (cond.tags, case_data.tags, lambda allowed, v: any(t in allowed for t in v)),
    )

    for condition, value, satisfied in checks:
        if condition is None:
            continue
        if value is None:
            if missing_ok:
                continue
            return False
        if not satisfied(condition, value):
            return False

    return True


def find_matching_rule(
    rules: Iterable[AssignmentRule],
    case_data: CaseData,
    missing_field_policy: MissingFieldPolicy = MissingFieldPolicy.IGNORE,
) -> AssignmentRule | None:
    """First matching rule wins; ``rules`` must already be priority-ordered."""
    for rule in rules:
        if rule_matches(rule, case_data, missing_field_policy):
            return rule
    return None


def sort_rules(rules: Iterable[AssignmentRule]) -> list[AssignmentRule]:
    """Highest priority first; equal priorities keep insertion order."""
    return sorted(rules, key=lambda r: r.priority, reverse=True)
