"""CaseVersion entity — one immutable snapshot in a case's history."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from app.domain.value_objects.timestamps import format_timestamp, parse_timestamp
from app.domain.value_objects.version_diff import FieldChange


@dataclass
class CaseVersion:
    id: str
    case_id: int
    version: int
    snapshot: dict[str, Any]
    changes: list[FieldChange]
    user_id: int
    user_name: str
    timestamp: datetime
    comment: str | None = None
    tags: list[str] = field(default_factory=list)

    def has_tag(self, tag: str) -> bool:
        return tag in self.tags

    def to_dict(self) -> dict:
        """Serialize to the camelCase export record."""
        return {
            "id": self.id,
            "caseId": self.case_id,
            "version": self.version,
            "snapshot": self.snapshot,
            "changes": [c.to_dict() for c in self.changes],
            "userId": self.user_id,
            "userName": self.user_name,
            "timestamp": format_timestamp(self.timestamp),
            "comment": self.comment,
            "tags": list(self.tags),
        }

    @classmethod
    def from_dict(cls, data: dict) -> CaseVersion:
        """Build a CaseVersion from an export record.

        Raises:
            ValueError: on a record that is not a mapping or has bad field types.
            KeyError: on a missing required field.
        """
        if not isinstance(data, dict):
            raise ValueError("Version record must be an object")

        version = data["version"]
        if not isinstance(version, int) or isinstance(version, bool) or version < 1:
            raise ValueError(f"Invalid version number: {version!r}")

        snapshot = data["snapshot"]
        if not isinstance(snapshot, dict):
            raise ValueError("Version snapshot must be an object")

        raw_changes = data.get("changes") or []
        if not isinstance(raw_changes, list):
            raise ValueError("Version changes must be a list")
        changes = [
            FieldChange(field=c["field"], old_value=c.get("oldValue"), new_value=c.get("newValue"))
            for c in raw_changes
        ]

        tags = data.get("tags") or []
        if not isinstance(tags, list) or not all(isinstance(t, str) for t in tags):
            raise ValueError("Version tags must be a list of strings")

        return cls(
            id=str(data["id"]),
            case_id=data["caseId"],
            version=version,
            snapshot=snapshot,
            changes=changes,
            user_id=data["userId"],
            user_name=data["userName"],
            timestamp=parse_timestamp(data["timestamp"]),
            comment=data.get("comment"),
            tags=list(tags),
        )
