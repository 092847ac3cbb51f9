"""Member directory search and privacy masking."""

import logging
from collections.abc import Iterable
from typing import Any

from src.core.supabase import get_supabase_client
from src.models.profile import CONTACT_FIELDS, LOCATION_FIELDS, ApprovalStatus
from src.services.access_service import RequestContext

logger = logging.getLogger(__name__)

# Searched for every visible member.
_TEXT_FIELDS = (
    "organization",
    "position",
    "program",
    "experience_level",
    "organization_type",
    "bio",
    "linkedin_url",
    "website_url",
)
_TAG_FIELDS = ("skills", "interests")


def mask_private_fields(profile: dict[str, Any], viewer_is_admin: bool = False) -> dict[str, Any]:
    """Return a copy of the profile with hidden contact and location data nulled.

    Admins always see everything. Otherwise email, phone and country code
    are only kept when show_contact_info is set, and address, city and
    country only when show_location is set.
    """
    masked = dict(profile)
    if viewer_is_admin:
        return masked

    if not profile.get("show_contact_info"):
        for field in CONTACT_FIELDS:
            masked[field] = None
    if not profile.get("show_location"):
        for field in LOCATION_FIELDS:
            masked[field] = None
    return masked


def _searchable_values(member: dict[str, Any], viewer_is_admin: bool) -> Iterable[str]:
    yield f"{member.get('first_name') or ''} {member.get('last_name') or ''}"

    for field in _TEXT_FIELDS:
        if member.get(field):
            yield str(member[field])

    if member.get("graduation_year") is not None:
        yield str(member["graduation_year"])

    for field in _TAG_FIELDS:
        for tag in member.get(field) or []:
            yield str(tag)

    for entry in member.get("organizations") or []:
        if isinstance(entry, dict) and entry.get("name"):
            yield str(entry["name"])

    if viewer_is_admin or member.get("show_location"):
        for field in LOCATION_FIELDS:
            if member.get(field):
                yield str(member[field])

    if viewer_is_admin or member.get("show_contact_info"):
        for field in ("email", "phone"):
            if member.get(field):
                yield str(member[field])


def matches_term(member: dict[str, Any], term: str, viewer_is_admin: bool = False) -> bool:
    """Case-insensitive substring match of term against a member's visible fields."""
    needle = term.strip().lower()
    if not needle:
        return True
    return any(needle in value.lower() for value in _searchable_values(member, viewer_is_admin))


def filter_members(
    members: list[dict[str, Any]],
    term: str | None = None,
    experience_level: str | None = None,
    organization_type: str | None = None,
    viewer_is_admin: bool = False,
) -> list[dict[str, Any]]:
    """Apply the free-text search and exact-match filters, preserving order.

    Args:
        members: Candidate profiles.
        term: Free-text search term; blank matches everything.
        experience_level: Exact experience_level to keep.
        organization_type: Exact organization_type to keep.
        viewer_is_admin: Whether hidden contact/location fields are searchable.

    Returns:
        list[dict]: Matching profiles.
    """
    result = members
    if term:
        result = [member for member in result if matches_term(member, term, viewer_is_admin)]
    if experience_level:
        result = [member for member in result if member.get("experience_level") == experience_level]
    if organization_type:
        result = [member for member in result if member.get("organization_type") == organization_type]
    return result


def is_listed(profile: dict[str, Any]) -> bool:
    """Whether a profile appears in the member directory."""
    return profile.get("approval_status") == ApprovalStatus.APPROVED.value and bool(profile.get("is_public"))


class MemberSearchService:
    """Searches approved, public member profiles."""

    def __init__(self) -> None:
        """Initialize member search service with Supabase client."""
        self.client = get_supabase_client()

    async def list_visible_members(self) -> list[dict[str, Any]]:
        """Return every approved, public profile ordered by first name."""
        response = (
            self.client.table("profiles")
            .select("*")
            .eq("approval_status", ApprovalStatus.APPROVED.value)
            .eq("is_public", True)
            .order("first_name")
            .execute()
        )
        return response.data or []

    async def search(
        self,
        ctx: RequestContext,
        term: str | None = None,
        experience_level: str | None = None,
        organization_type: str | None = None,
    ) -> dict[str, Any]:
        """Search the member directory on behalf of a viewer.

        The caller's own profile is excluded, results are privacy-masked
        for non-admin viewers, and the caller's saved member IDs are
        returned so clients can mark them.

        Returns:
            dict: members, total (before filtering), count and saved_member_ids.
        """
        members = [
            member
            for member in await self.list_visible_members()
            if str(member.get("user_id")) != str(ctx.user_id)
        ]
        matched = filter_members(members, term, experience_level, organization_type, ctx.is_admin)

        saved = (
            self.client.table("user_directory")
            .select("member_id")
            .eq("user_id", str(ctx.user_id))
            .execute()
        )

        logger.debug("Member search by %s matched %d of %d", ctx.user_id, len(matched), len(members))

        return {
            "members": [mask_private_fields(member, ctx.is_admin) for member in matched],
            "total": len(members),
            "count": len(matched),
            "saved_member_ids": [row["member_id"] for row in saved.data or []],
        }
