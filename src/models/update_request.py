"""Profile update request model type definitions."""

from datetime import datetime
from enum import Enum
from typing import Any, TypedDict
from uuid import UUID


class UpdateRequestStatus(str, Enum):
    """Moderation state. approved and rejected are terminal."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class UpdateRequest(TypedDict):
    """profile_update_requests table row."""

    id: UUID
    profile_user_id: UUID
    submitted_payload: dict[str, Any]
    status: str
    admin_notes: str | None
    reviewed_by: UUID | None
    reviewed_at: datetime | None
    created_at: datetime
