"""CSV column normalization — handles BOM, trailing spaces, encoding quirks."""

from __future__ import annotations

import re


def normalize_column_name(name: str) -> str:
    """Normalize a CSV column name.

    - Removes BOM characters (\\ufeff)
    - Strips leading/trailing whitespace
    - Replaces runs of spaces / non-breaking spaces / dashes with one underscore
    - Lowercases
    - Strips anything that is not alphanumeric or underscore
    """
    name = name.replace("\ufeff", "").strip()
    name = re.sub(r"[\s\u00a0\-]+", "_", name)
    name = name.lower()
    return re.sub(r"[^\w]", "", name, flags=re.UNICODE)


def clean_string(value: str | None) -> str | None:
    """Strip whitespace and return None for empty strings."""
    if value is None:
        return None
    value = value.strip()
    return value if value else None


def parse_skills(raw: str | None) -> set[str]:
    """Parse 'FedEx; UPS, high-value' into {'FedEx', 'UPS', 'high-value'}.

    Only comma and semicolon separate skills; case is preserved so carrier
    names match the carrier on incoming cases.
    """
    if not raw:
        return set()
    parts = re.split(r"[,;]+", raw.strip())
    return {p.strip() for p in parts if p.strip()}
