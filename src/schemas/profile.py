"""Profile Pydantic schemas for API request/response models.

Profile writes arrive as a list of tagged field groups. Each group is
validated on its own before anything is diffed or persisted.
"""

from datetime import date, datetime
from typing import Annotated, Any, Literal, Union
from uuid import UUID

from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    HttpUrl,
    TypeAdapter,
    ValidationError,
    field_validator,
    model_validator,
)

from src.models.profile import ApprovalStatus, ExperienceLevel, OrganizationType


def _clean_tags(values: list[str] | None) -> list[str] | None:
    if values is None:
        return None
    cleaned: list[str] = []
    for value in values:
        item = value.strip()
        if item and item not in cleaned:
            cleaned.append(item)
    return cleaned


_HTTP_URL = TypeAdapter(HttpUrl)


def _check_url(value: str) -> str:
    """Validate as an http(s) URL but keep the text as the member typed it."""
    value = value.strip()
    try:
        _HTTP_URL.validate_python(value)
    except ValidationError as e:
        raise ValueError("must be a valid http or https URL") from e
    return value


WebUrl = Annotated[str, AfterValidator(_check_url)]


class OrganizationEntry(BaseModel):
    """One organization in a member's work history."""

    name: str = Field(..., min_length=1, max_length=255, description="Organization name")
    position: str | None = Field(default=None, max_length=255, description="Role held")
    organization_type: OrganizationType | None = Field(default=None, description="Kind of organization")
    start_year: int | None = Field(default=None, ge=1900, le=2100, description="Year joined")
    end_year: int | None = Field(default=None, ge=1900, le=2100, description="Year left")
    is_current: bool = Field(default=False, description="Still at this organization")


class ContactGroup(BaseModel):
    """Personal and contact fields."""

    model_config = ConfigDict(extra="forbid")

    group: Literal["contact"] = "contact"
    first_name: str | None = Field(default=None, min_length=1, max_length=100)
    last_name: str | None = Field(default=None, min_length=1, max_length=100)
    email: EmailStr | None = None
    phone: str | None = Field(default=None, max_length=30, pattern=r"^[0-9+\-() ]*$")
    country_code: str | None = Field(default=None, max_length=8)
    address: str | None = Field(default=None, max_length=500)
    date_of_birth: date | None = None
    city: str | None = Field(default=None, max_length=120)
    country: str | None = Field(default=None, max_length=120)


class ProfessionalGroup(BaseModel):
    """Career and education fields."""

    model_config = ConfigDict(extra="forbid")

    group: Literal["professional"] = "professional"
    organization: str | None = Field(default=None, max_length=255)
    organizations: list[OrganizationEntry] | None = None
    position: str | None = Field(default=None, max_length=255)
    program: str | None = Field(default=None, max_length=255)
    experience_level: ExperienceLevel | None = None
    organization_type: OrganizationType | None = None
    graduation_year: int | None = Field(default=None, ge=1950, le=2100)


class AboutGroup(BaseModel):
    """Free text, tags and links."""

    model_config = ConfigDict(extra="forbid")

    group: Literal["about"] = "about"
    bio: str | None = Field(default=None, max_length=2000)
    interests: list[str] | None = None
    skills: list[str] | None = None
    linkedin_url: WebUrl | None = None
    website_url: WebUrl | None = None

    @field_validator("interests", "skills")
    @classmethod
    def strip_tags(cls, value: list[str] | None) -> list[str] | None:
        """Trim entries and drop blanks and duplicates."""
        return _clean_tags(value)


class PrivacyGroup(BaseModel):
    """Directory visibility flags."""

    model_config = ConfigDict(extra="forbid")

    group: Literal["privacy"] = "privacy"
    is_public: bool | None = None
    show_contact_info: bool | None = None
    show_location: bool | None = None


ProfileSection = Annotated[
    Union[ContactGroup, ProfessionalGroup, AboutGroup, PrivacyGroup],
    Field(discriminator="group"),
]


def sections_to_payload(sections: list[BaseModel]) -> dict[str, Any]:
    """Flatten validated groups into a column -> value dict.

    Only fields the client actually sent are included, so a group can
    clear a value by sending null explicitly.
    """
    payload: dict[str, Any] = {}
    for section in sections:
        payload.update(section.model_dump(mode="json", exclude_unset=True, exclude={"group"}))
    return payload


class ProfilePatch(BaseModel):
    """Partial profile update made of one or more field groups."""

    sections: list[ProfileSection] = Field(..., min_length=1, description="Field groups to change")

    def to_payload(self) -> dict[str, Any]:
        """Columns and values to write."""
        return sections_to_payload(self.sections)


class RegistrationRequest(BaseModel):
    """Full profile submitted when a new member completes registration."""

    contact: ContactGroup
    professional: ProfessionalGroup = Field(default_factory=ProfessionalGroup)
    about: AboutGroup = Field(default_factory=AboutGroup)
    privacy: PrivacyGroup = Field(
        default_factory=lambda: PrivacyGroup(is_public=True, show_contact_info=False, show_location=True)
    )

    @model_validator(mode="after")
    def require_name(self) -> "RegistrationRequest":
        """Registration needs at least a first and last name."""
        if not self.contact.first_name or not self.contact.last_name:
            raise ValueError("first_name and last_name are required to register")
        return self

    def to_payload(self) -> dict[str, Any]:
        """Columns and values to write."""
        return sections_to_payload([self.contact, self.professional, self.about, self.privacy])


class ProfileResponse(BaseModel):
    """Profile as returned to clients. Hidden fields come back as null."""

    model_config = ConfigDict(from_attributes=True, extra="ignore")

    id: UUID | None = Field(default=None, description="Profile unique identifier")
    user_id: UUID = Field(description="Associated auth user ID")
    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    phone: str | None = None
    country_code: str | None = None
    address: str | None = None
    date_of_birth: date | None = None
    city: str | None = None
    country: str | None = None
    organization: str | None = None
    organizations: list[dict[str, Any]] | None = None
    position: str | None = None
    program: str | None = None
    experience_level: str | None = None
    organization_type: str | None = None
    graduation_year: int | None = None
    bio: str | None = None
    interests: list[str] | None = None
    skills: list[str] | None = None
    linkedin_url: str | None = None
    website_url: str | None = None
    avatar_url: str | None = None
    is_public: bool | None = None
    show_contact_info: bool | None = None
    show_location: bool | None = None
    approval_status: ApprovalStatus | None = None
    rejection_reason: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ProfileUpdateOutcome(BaseModel):
    """Result of a self-service edit.

    Approved non-admin members get an update request instead of a direct
    write; in that case profile is the unchanged current profile.
    """

    applied: bool = Field(description="True when the profile was written directly")
    profile: ProfileResponse = Field(description="Profile after the call")
    update_request_id: UUID | None = Field(default=None, description="Created update request, if any")
    changed_fields: list[str] = Field(default_factory=list, description="Fields that differ from the stored profile")


class RejectRegistrationRequest(BaseModel):
    """Reason shown to the user when their registration is rejected."""

    reason: str = Field(..., min_length=1, max_length=1000, description="Why the registration was rejected")

    @field_validator("reason")
    @classmethod
    def not_blank(cls, value: str) -> str:
        """Reject whitespace-only reasons."""
        if not value.strip():
            raise ValueError("Please provide a reason for rejection")
        return value.strip()


class ApprovalStats(BaseModel):
    """Counts shown on the admin dashboard."""

    pending: int = 0
    approved: int = 0
    rejected: int = 0
    total: int = 0
