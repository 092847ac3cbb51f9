"""Directory, member search, organization and city schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.schemas.profile import ProfileResponse


class DirectoryAddRequest(BaseModel):
    """Bookmark a member into the caller's directory."""

    member_id: UUID = Field(..., description="user_id of the member to save")


class DirectoryEntryCreated(BaseModel):
    """Newly saved directory entry."""

    id: UUID = Field(description="Directory entry ID")
    member_id: UUID = Field(description="Saved member's user ID")
    created_at: datetime | None = None


class DirectoryEntryResponse(BaseModel):
    """Saved member with their (privacy-masked) profile."""

    id: UUID = Field(description="Directory entry ID")
    member_id: UUID = Field(description="Saved member's user ID")
    created_at: datetime | None = Field(default=None, description="When the member was saved")
    profile: ProfileResponse = Field(description="Member profile")


class MemberSearchResponse(BaseModel):
    """Search results with the size of the unfiltered directory."""

    members: list[ProfileResponse] = Field(default_factory=list)
    total: int = Field(description="Number of visible members before filtering")
    count: int = Field(description="Number of members returned")
    saved_member_ids: list[UUID] = Field(default_factory=list, description="Members already in the caller's directory")


class OrganizationCreate(BaseModel):
    """Add an organization on demand (deduplicated by name)."""

    name: str = Field(..., min_length=1, max_length=255, description="Organization name")
    domain: str | None = Field(default=None, max_length=255, description="Web domain")

    @field_validator("name")
    @classmethod
    def strip_name(cls, value: str) -> str:
        """Trim surrounding whitespace."""
        value = value.strip()
        if not value:
            raise ValueError("Organization name is required")
        return value


class OrganizationUpdate(BaseModel):
    """Admin edit of an organization master record."""

    name: str = Field(..., min_length=1, max_length=255)
    domain: str | None = Field(default=None, max_length=255)
    is_verified: bool = Field(default=False)


class OrganizationResponse(BaseModel):
    """Organization master record."""

    model_config = ConfigDict(from_attributes=True, extra="ignore")

    id: UUID
    name: str
    domain: str | None = None
    is_verified: bool | None = None


class OrganizationAddResponse(BaseModel):
    """Result of an on-demand add; created is False when it already existed."""

    created: bool
    organization: OrganizationResponse


class CityCreate(BaseModel):
    """Add a city on demand (deduplicated by name and country)."""

    name: str = Field(..., min_length=1, max_length=120, description="City name")
    country: str = Field(..., min_length=1, max_length=120, description="Country name")
    state_province: str | None = Field(default=None, max_length=120)

    @field_validator("name", "country")
    @classmethod
    def strip_required(cls, value: str) -> str:
        """Trim surrounding whitespace."""
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value


class CityResponse(BaseModel):
    """City lookup record."""

    model_config = ConfigDict(from_attributes=True, extra="ignore")

    id: UUID
    name: str
    country: str
    state_province: str | None = None


class CityAddResponse(BaseModel):
    """Result of an on-demand city add."""

    created: bool
    city: CityResponse
