"""Personal member directory (saved members) service."""

import logging
from typing import Any
from uuid import UUID

from src.api.middleware.error_handler import AlreadyExistsError, NotFoundError, ValidationError
from src.core.supabase import get_supabase_client
from src.services.access_service import RequestContext
from src.services.member_search import is_listed, mask_private_fields

logger = logging.getLogger(__name__)


class DirectoryService:
    """Manages the (owner, member) bookmarks in user_directory.

    Only the owner adds, removes or lists their own entries. Visibility of
    the saved members is re-checked every time the directory is read.
    """

    def __init__(self) -> None:
        """Initialize directory service with Supabase client."""
        self.client = get_supabase_client()

    async def _get_entry(self, owner_id: UUID, member_id: UUID) -> dict[str, Any] | None:
        response = (
            self.client.table("user_directory")
            .select("*")
            .eq("user_id", str(owner_id))
            .eq("member_id", str(member_id))
            .execute()
        )
        return response.data[0] if response.data else None

    async def add(self, ctx: RequestContext, member_id: UUID) -> dict[str, Any]:
        """Save a member to the caller's directory.

        Args:
            ctx: Directory owner's context.
            member_id: user_id of the member to save.

        Returns:
            dict: The created directory entry.

        Raises:
            ValidationError: If the caller tries to save themselves.
            NotFoundError: If the member is not an approved, public profile.
            AlreadyExistsError: If the member is already saved.
        """
        if str(member_id) == str(ctx.user_id):
            raise ValidationError("You cannot add yourself to your directory")

        member = (
            self.client.table("profiles")
            .select("user_id, approval_status, is_public")
            .eq("user_id", str(member_id))
            .execute()
        )
        if not member.data or not is_listed(member.data[0]):
            raise NotFoundError("Member not found")

        if await self._get_entry(ctx.user_id, member_id):
            raise AlreadyExistsError("Member is already in your directory")

        response = (
            self.client.table("user_directory")
            .insert({"user_id": str(ctx.user_id), "member_id": str(member_id)})
            .execute()
        )

        logger.info("User %s saved member %s", ctx.user_id, member_id)
        return response.data[0]

    async def remove(self, ctx: RequestContext, member_id: UUID) -> None:
        """Remove a member from the caller's directory. Missing entries are ignored."""
        (
            self.client.table("user_directory")
            .delete()
            .eq("user_id", str(ctx.user_id))
            .eq("member_id", str(member_id))
            .execute()
        )
        logger.info("User %s removed member %s", ctx.user_id, member_id)

    async def list(self, ctx: RequestContext) -> list[dict[str, Any]]:
        """Return the caller's saved members that are still approved and public.

        Returns:
            list[dict]: Entries with id, member_id, created_at and the masked profile,
            newest first.
        """
        entries = (
            self.client.table("user_directory")
            .select("*")
            .eq("user_id", str(ctx.user_id))
            .order("created_at", desc=True)
            .execute()
        )
        rows = entries.data or []
        if not rows:
            return []

        profiles = (
            self.client.table("profiles")
            .select("*")
            .in_("user_id", [str(row["member_id"]) for row in rows])
            .execute()
        )
        by_user = {str(profile["user_id"]): profile for profile in profiles.data or []}

        result = []
        for row in rows:
            profile = by_user.get(str(row["member_id"]))
            if profile is None or not is_listed(profile):
                continue
            result.append(
                {
                    "id": row["id"],
                    "member_id": row["member_id"],
                    "created_at": row.get("created_at"),
                    "profile": mask_private_fields(profile, ctx.is_admin),
                }
            )
        return result
