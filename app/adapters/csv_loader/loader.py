"""CSV loader — reads and normalizes the team roster file."""

from __future__ import annotations

import csv
import logging
from pathlib import Path

from app.adapters.csv_loader.normalizer import (
    clean_string,
    normalize_column_name,
    parse_skills,
)

logger = logging.getLogger(__name__)


def _sniff_dialect(sample: str) -> type[csv.Dialect]:
    """Detect the delimiter (comma/semicolon/tab) from the header line."""
    if not sample:
        return csv.excel

    first_line = sample.splitlines()[0]
    delims = [";", ",", "\t"]
    counts = {d: first_line.count(d) for d in delims}
    best_delim = max(counts, key=counts.get)

    if counts[best_delim] > 0:
        class DynamicDialect(csv.excel):
            delimiter = best_delim
        return DynamicDialect

    return csv.excel


def _read_csv(file_path: Path, encoding: str = "utf-8-sig") -> list[dict[str, str | None]]:
    """Read a CSV file with BOM handling and column normalization.

    Args:
        file_path: path to the CSV file.
        encoding: file encoding (utf-8-sig strips BOM automatically).

    Returns:
        List of dicts with normalized column names.

    Raises:
        ValueError: if the file has no header row.
    """
    with open(file_path, encoding=encoding, newline="") as f:
        sample = f.read(4096)
        f.seek(0)
        reader = csv.DictReader(f, dialect=_sniff_dialect(sample))
        if reader.fieldnames is None:
            raise ValueError(f"CSV file {file_path} has no header row")

        col_map = {col: normalize_column_name(col) for col in reader.fieldnames}
        rows = []
        for raw_row in reader:
            row = {col_map[k]: clean_string(v) for k, v in raw_row.items() if k is not None}
            rows.append(row)

    logger.info("Loaded %d rows from %s (columns: %s)", len(rows), file_path.name, list(col_map.values()))
    return rows


def load_team_members(file_path: Path) -> list[dict]:
    """Load and normalize the team roster CSV.

    Expected columns (after normalization):
        id, name, email, role, skills, max_caseload, current_caseload,
        availability, avg_resolution_time, success_rate

    Rows without an id are skipped.
    """
    rows = _read_csv(file_path)
    members = []
    for line_no, row in enumerate(rows, start=2):
        member_id = _parse_int(row.get("id") or row.get("user_id"), default=None)
        if member_id is None:
            logger.warning("%s line %d: missing id, row skipped", file_path.name, line_no)
            continue

        members.append({
            "id": member_id,
            "name": row.get("name") or row.get("full_name") or "",
            "email": row.get("email") or "",
            "role": _normalize_token(row.get("role")),
            "skills": parse_skills(row.get("skills")),
            "max_caseload": _parse_int(row.get("max_caseload") or row.get("capacity"), default=10),
            "current_caseload": _parse_int(row.get("current_caseload") or row.get("caseload"), default=0),
            "availability": _normalize_token(row.get("availability") or row.get("status")),
            "avg_resolution_time": _parse_float(row.get("avg_resolution_time")) or 0.0,
            "success_rate": _parse_float(row.get("success_rate")) or 0.0,
        })
    logger.info("Parsed %d team members", len(members))
    return members


def _normalize_token(value: str | None) -> str | None:
    """'Senior Agent' -> 'senior_agent'."""
    if not value:
        return None
    return normalize_column_name(value)


def _parse_float(value: str | None) -> float | None:
    """Safely parse a float from a string."""
    if not value:
        return None
    try:
        return float(value.replace(",", ".").strip())
    except (ValueError, AttributeError):
        return None


def _parse_int(value: str | None, default: int | None = 0) -> int | None:
    if not value:
        return default
    try:
        # handle "4", "4.0"
        return int(float(str(value).replace(",", ".").strip()))
    except ValueError:
        return default
