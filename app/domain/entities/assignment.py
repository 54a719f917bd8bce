"""Assignment entity — the result of routing a case to a team member."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from app.domain.value_objects.enums import AssignmentPriority, AssignmentStatus

# Forward edges of the assignment lifecycle. ESCALATED is reached only via escalate().
ALLOWED_TRANSITIONS: dict[AssignmentStatus, frozenset[AssignmentStatus]] = {
    AssignmentStatus.PENDING: frozenset({AssignmentStatus.ACCEPTED}),
    AssignmentStatus.ACCEPTED: frozenset({AssignmentStatus.IN_PROGRESS}),
    AssignmentStatus.IN_PROGRESS: frozenset({AssignmentStatus.COMPLETED}),
    AssignmentStatus.COMPLETED: frozenset(),
    AssignmentStatus.ESCALATED: frozenset(),
}


@dataclass
class Assignment:
    id: str
    case_id: int
    assigned_to: int
    assigned_by: int
    assigned_at: datetime
    priority: AssignmentPriority = AssignmentPriority.MEDIUM
    status: AssignmentStatus = AssignmentStatus.PENDING
    due_date: datetime | None = None
    notes: str | None = None
    escalated_to: int | None = None
    escalated_at: datetime | None = None

    def can_transition_to(self, status: AssignmentStatus) -> bool:
        return status in ALLOWED_TRANSITIONS[self.status]

    def transition_to(self, status: AssignmentStatus) -> None:
        """Move along the pending → accepted → in_progress → completed path.

        Raises:
            ValueError: if the edge is not part of the lifecycle.
        """
        if not self.can_transition_to(status):
            raise ValueError(
                f"Cannot move assignment {self.id} from {self.status.value} to {status.value}"
            )
        self.status = status

    def escalate(self, escalated_to: int, reason: str, at: datetime) -> None:
        """Mark as escalated and append the reason to the notes.

        Raises:
            ValueError: if the assignment is already completed.
        """
        if self.status == AssignmentStatus.COMPLETED:
            raise ValueError(f"Cannot escalate completed assignment {self.id}")
        self.status = AssignmentStatus.ESCALATED
        self.escalated_to = escalated_to
        self.escalated_at = at
        self.notes = (self.notes or "") + f"\nEscalated: {reason}"

    def is_open(self) -> bool:
        return self.status != AssignmentStatus.COMPLETED
