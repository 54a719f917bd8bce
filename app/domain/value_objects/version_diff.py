"""Field-level change records between two case snapshots."""

from dataclasses import dataclass
from typing import Any

from app.domain.value_objects.enums import DiffType


@dataclass(frozen=True)
class FieldChange:
    """A change stored on a CaseVersion (no diff type on the wire)."""

    field: str
    old_value: Any
    new_value: Any

    def to_dict(self) -> dict:
        return {"field": self.field, "oldValue": self.old_value, "newValue": self.new_value}


@dataclass(frozen=True)
class VersionDiff:
    field: str
    old_value: Any
    new_value: Any
    type: DiffType

    def to_change(self) -> FieldChange:
        return FieldChange(field=self.field, old_value=self.old_value, new_value=self.new_value)

    def to_dict(self) -> dict:
        return {
            "field": self.field,
            "oldValue": self.old_value,
            "newValue": self.new_value,
            "type": self.type.value,
        }
