"""SnapshotDiff — structural field-level diff between two flat case snapshots."""

from __future__ import annotations

import json
from datetime import date, datetime, time
from typing import Any, Mapping

from app.domain.value_objects.enums import DiffType
from app.domain.value_objects.version_diff import VersionDiff


def _json_default(value: Any) -> Any:
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, (set, frozenset)):
        return list(value)
    return str(value)


def to_json_native(value: Any) -> Any:
    """Copy ``value`` into plain JSON types, the form snapshots are stored in.

    Datetimes become ISO-8601 strings, sets become lists, other unknown
    objects (Decimal, UUID, ...) become ``str(obj)``. Mapping keys become
    strings, so mixed key types no longer break key sorting.

    Raises:
        ValueError: if the value still cannot be represented as JSON
            (circular references, tuple keys).
    """
    try:
        return json.loads(json.dumps(value, default=_json_default))
    except TypeError as e:
        raise ValueError(f"Snapshot is not JSON-serializable: {e}") from e


def canonical(value: Any) -> str:
    """Canonical serialization used for deep equality of snapshot values."""
    return json.dumps(to_json_native(value), sort_keys=True, separators=(",", ":"))


def calculate_diff(
    old_snapshot: Mapping[str, Any],
    new_snapshot: Mapping[str, Any],
) -> list[VersionDiff]:
    """Diff two snapshots over the union of their keys.

    Rules:
      1. key only in new  →  ``added`` with old_value=None.
      2. key only in old  →  ``deleted`` with new_value=None.
      3. key in both, canonical serializations differ  →  ``modified``.
      4. key in both, same serialization  →  no entry.

    A key whose value is ``None`` is present; only a missing key counts as absent.
    Keys from the old snapshot come first, then keys that only the new one has.
    """
    diffs: list[VersionDiff] = []
    keys = list(old_snapshot) + [k for k in new_snapshot if k not in old_snapshot]

    for key in keys:
        in_old = key in old_snapshot
        in_new = key in new_snapshot

        if not in_old:
            diffs.append(VersionDiff(key, None, new_snapshot[key], DiffType.ADDED))
        elif not in_new:
            diffs.append(VersionDiff(key, old_snapshot[key], None, DiffType.DELETED))
        elif canonical(old_snapshot[key]) != canonical(new_snapshot[key]):
            diffs.append(
                VersionDiff(key, old_snapshot[key], new_snapshot[key], DiffType.MODIFIED)
            )

    return diffs
