"""AssignmentRule entity — conditions plus a strategy for picking an assignee."""

from __future__ import annotations

from dataclasses import dataclass, field

from app.domain.value_objects.enums import AssignmentStrategy


@dataclass(frozen=True)
class AmountRange:
    """Inclusive claimed-amount bounds; either side may be open."""

    min: float | None = None
    max: float | None = None

    def contains(self, amount: float) -> bool:
        if self.min is not None and amount < self.min:
            return False
        if self.max is not None and amount > self.max:
            return False
        return True


@dataclass(frozen=True)
class RuleConditions:
    """Filters a case must pass. ``None`` means the rule does not filter on it."""

    carrier: frozenset[str] | None = None
    priority: frozenset[str] | None = None
    amount_range: AmountRange | None = None
    status: frozenset[str] | None = None
    tags: frozenset[str] | None = None  # any-match


@dataclass
class AssignmentRule:
    id: str
    name: str
    priority: int
    assign_to: AssignmentStrategy
    conditions: RuleConditions = field(default_factory=RuleConditions)
    target_user_id: int | None = None
    auto_assign: bool = True
    notify_assignee: bool = False
    escalate_after_hours: float | None = None  # consumed by an external scheduler

    def __post_init__(self) -> None:
        if self.assign_to == AssignmentStrategy.SPECIFIC_USER and self.target_user_id is None:
            raise ValueError(f"Rule {self.id}: specific_user strategy requires target_user_id")
