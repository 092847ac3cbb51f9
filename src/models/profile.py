"""Profile model type definitions for database operations."""

from datetime import date, datetime
from enum import Enum
from typing import Any, TypedDict
from uuid import UUID


class ApprovalStatus(str, Enum):
    """Registration approval status matching the profile_approval_status enum."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class UserRole(str, Enum):
    """Values of the user_role enum in the user_roles table."""

    ADMIN = "admin"
    NORMAL_USER = "normal_user"


class ExperienceLevel(str, Enum):
    """Values of the experience_level enum."""

    ENTRY_LEVEL = "Entry Level"
    MID_LEVEL = "Mid Level"
    SENIOR_LEVEL = "Senior Level"
    EXECUTIVE = "Executive"
    STUDENT = "Student"
    RECENT_GRADUATE = "Recent Graduate"


class OrganizationType(str, Enum):
    """Values of the organization_type enum."""

    CORPORATE = "Corporate"
    STARTUP = "Startup"
    NON_PROFIT = "Non-Profit"
    GOVERNMENT = "Government"
    CONSULTING = "Consulting"
    EDUCATION = "Education"
    HEALTHCARE = "Healthcare"
    TECHNOLOGY = "Technology"
    FINANCE = "Finance"
    OTHER = "Other"


class Profile(TypedDict, total=False):
    """Profile table row representation.

    One row per auth user, keyed by user_id.
    """

    id: UUID
    user_id: UUID
    first_name: str | None
    last_name: str | None
    email: str | None
    phone: str | None
    country_code: str | None
    address: str | None
    date_of_birth: date | None
    city: str | None
    country: str | None
    organization: str | None
    organizations: list[dict[str, Any]] | None
    position: str | None
    program: str | None
    experience_level: str | None
    organization_type: str | None
    graduation_year: int | None
    bio: str | None
    interests: list[str] | None
    skills: list[str] | None
    linkedin_url: str | None
    website_url: str | None
    avatar_url: str | None
    is_public: bool | None
    show_contact_info: bool | None
    show_location: bool | None
    approval_status: str | None
    rejection_reason: str | None
    approved_by: UUID | None
    approved_at: datetime | None
    created_at: datetime
    updated_at: datetime


CONTACT_FIELDS: tuple[str, ...] = ("email", "phone", "country_code")
LOCATION_FIELDS: tuple[str, ...] = ("address", "city", "country")
