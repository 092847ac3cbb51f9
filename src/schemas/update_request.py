"""Profile update request schemas."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from src.models.update_request import UpdateRequestStatus
from src.schemas.profile import ProfilePatch


class UpdateRequestCreate(ProfilePatch):
    """Changes a member proposes for their own approved profile."""


class UpdateRequestApprove(BaseModel):
    """Approval, optionally with an administrator-edited payload.

    When override is present it replaces the submitted payload entirely.
    """

    override: ProfilePatch | None = Field(default=None, description="Edited payload to apply instead")
    admin_notes: str | None = Field(default=None, max_length=1000)


class UpdateRequestReject(BaseModel):
    """Rejection with an optional reason."""

    reason: str | None = Field(default=None, max_length=1000, description="Shown to the member")


class UpdateRequestResponse(BaseModel):
    """Update request as stored."""

    model_config = ConfigDict(from_attributes=True, extra="ignore")

    id: UUID
    profile_user_id: UUID
    submitted_payload: dict[str, Any]
    status: UpdateRequestStatus
    admin_notes: str | None = None
    created_at: datetime | None = None
    reviewed_at: datetime | None = None


class UpdateRequestResolution(BaseModel):
    """Outcome of approving or rejecting a request."""

    request_id: UUID
    status: UpdateRequestStatus
    changed_fields: list[str] = Field(default_factory=list, description="Fields written to the profile")
