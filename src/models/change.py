"""Change history model type definitions."""

from datetime import datetime
from enum import Enum
from typing import Any, TypedDict
from uuid import UUID


class ChangeType(str, Enum):
    """Kind of profile mutation a change entry describes."""

    CREATE = "create"
    UPDATE = "update"
    APPROVE = "approve"
    REJECT = "reject"
    ADMIN_EDIT = "admin_edit"


class FieldChange(TypedDict):
    """Before/after pair stored for one changed field."""

    old: Any
    new: Any


ChangedFields = dict[str, FieldChange]


class ChangeEntry(TypedDict):
    """Row returned by the get_profile_changes RPC.

    Entries are append-only; nothing updates or deletes them.
    """

    id: UUID
    subject_user_id: UUID
    changed_by: UUID
    changed_by_name: str
    changed_at: datetime
    change_type: str
    changed_fields: ChangedFields
