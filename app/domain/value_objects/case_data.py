"""CaseData value object — the case attributes the router looks at."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class CaseData:
    """Routing view of a case.

    ``None`` on any field means the case does not carry that attribute,
    which is distinct from an empty value (e.g. ``tags=()``). Empty strings
    for carrier, priority and status are treated as absent.
    """

    carrier: str | None = None
    priority: str | None = None
    claimed_amount: float | None = None
    status: str | None = None
    tags: tuple[str, ...] | None = None

    def __post_init__(self):
        # an empty label carries no routing information
        for name in ("carrier", "priority", "status"):
            if getattr(self, name) == "":
                object.__setattr__(self, name, None)
