"""Timestamp and identifier helpers shared by the entities."""

from __future__ import annotations

import time
from datetime import datetime, timezone
from uuid import uuid4


def utc_now() -> datetime:
    """Current UTC time truncated to milliseconds (the precision we serialize)."""
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)


def new_id(prefix: str) -> str:
    """Opaque id like ``v_1736244000000_3f9a1c2b7``."""
    return f"{prefix}_{int(time.time() * 1000)}_{uuid4().hex[:9]}"


def format_timestamp(value: datetime) -> str:
    """ISO-8601 UTC with milliseconds and a ``Z`` suffix."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


def parse_timestamp(raw: str) -> datetime:
    """Inverse of :func:`format_timestamp`; also accepts any ISO-8601 offset.

    Raises:
        ValueError: if the string is not ISO-8601.
    """
    if not isinstance(raw, str):
        raise ValueError(f"Timestamp must be a string, got {type(raw).__name__}")
    if raw.endswith("Z"):
        raw = raw[:-1] + "+00:00"
    value = datetime.fromisoformat(raw)
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
