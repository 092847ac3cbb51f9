"""Change history response schemas."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field

from src.models.change import ChangeType
from src.services.change_tracker import format_field_name, format_field_value


class FieldChangeResponse(BaseModel):
    """One changed field with raw and display values."""

    field: str = Field(description="Column name")
    label: str = Field(description="Human readable field name")
    old: Any = Field(default=None, description="Value before the change")
    new: Any = Field(default=None, description="Value after the change")
    old_display: str = Field(description="Formatted old value")
    new_display: str = Field(description="Formatted new value")


class ChangeEntryResponse(BaseModel):
    """A single entry of a profile's change timeline."""

    id: UUID
    changed_by: UUID | None = Field(default=None, description="Actor user ID")
    changed_by_name: str = Field(default="Unknown User", description="Actor display name")
    changed_at: datetime
    change_type: ChangeType
    changes: list[FieldChangeResponse] = Field(default_factory=list)

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "ChangeEntryResponse":
        """Build a response from a get_profile_changes row."""
        changes = []
        for field, values in (row.get("changed_fields") or {}).items():
            old = values.get("old")
            new = values.get("new")
            changes.append(
                FieldChangeResponse(
                    field=field,
                    label=format_field_name(field),
                    old=old,
                    new=new,
                    old_display=format_field_value(old, field),
                    new_display=format_field_value(new, field),
                )
            )

        return cls(
            id=row["id"],
            changed_by=row.get("changed_by"),
            changed_by_name=row.get("changed_by_name") or "Unknown User",
            changed_at=row["changed_at"],
            change_type=row["change_type"],
            changes=changes,
        )
