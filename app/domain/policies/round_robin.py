"""RoundRobinPolicy — least-recently-assigned member selection."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Iterable

from app.domain.entities.assignment import Assignment
from app.domain.entities.team_member import TeamMember

# Members that never received a case sort before everyone else.
NEVER_ASSIGNED = (datetime.min.replace(tzinfo=timezone.utc), -1)


def last_assigned(history: Iterable[Assignment]) -> dict[int, tuple[datetime, int]]:
    """Map member id → (assigned_at, history position) of their latest record.

    History is append-only, so the position breaks ties between records that
    share a timestamp.
    """
    latest: dict[int, tuple[datetime, int]] = {}
    for position, record in enumerate(history):
        key = (record.assigned_at, position)
        if record.assigned_to not in latest or key > latest[record.assigned_to]:
            latest[record.assigned_to] = key
    return latest


def pick_least_recent(
    candidates: list[TeamMember],
    history: Iterable[Assignment],
) -> TeamMember:
    """Pick the candidate whose most recent assignment is oldest.

    Stable: candidates with the same key keep their input order.

    Raises:
        ValueError: if candidates list is empty.
    """
    if not candidates:
        raise ValueError("Cannot pick from an empty candidate list")

    latest = last_assigned(history)
    ordered = sorted(candidates, key=lambda m: latest.get(m.id, NEVER_ASSIGNED))
    return ordered[0]
