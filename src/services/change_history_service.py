"""Append-only profile change log backed by database RPCs."""

import logging
from typing import Any
from uuid import UUID

from src.api.middleware.error_handler import AuthorizationError
from src.core.supabase import get_supabase_client
from src.models.change import ChangedFields, ChangeType
from src.services.access_service import RequestContext

logger = logging.getLogger(__name__)


class ChangeHistoryService:
    """Writes and reads profile change entries."""

    def __init__(self) -> None:
        """Initialize change history service with Supabase client."""
        self.client = get_supabase_client()

    async def record_change(
        self,
        subject_user_id: UUID,
        actor_id: UUID,
        actor_name: str,
        changed_fields: ChangedFields,
        change_type: ChangeType = ChangeType.UPDATE,
    ) -> None:
        """Append a change entry for a profile mutation.

        Failures are logged and never raised: the profile write this entry
        describes has already happened and must stand on its own.

        Args:
            subject_user_id: Owner of the changed profile.
            actor_id: User who performed the change.
            actor_name: Display name of the actor at the time of the change.
            changed_fields: Output of get_changed_fields.
            change_type: Kind of mutation.
        """
        try:
            self.client.rpc(
                "add_profile_change",
                {
                    "profile_user_id": str(subject_user_id),
                    "changed_by": str(actor_id),
                    "changed_by_name": actor_name,
                    "changed_fields": changed_fields,
                    "change_type": change_type.value,
                },
            ).execute()
            logger.info(
                "Recorded %s change on profile %s (%d fields)",
                change_type.value,
                subject_user_id,
                len(changed_fields),
            )
        except Exception as e:
            logger.error("Failed to record %s change for %s: %s", change_type.value, subject_user_id, e)

    async def get_changes(self, ctx: RequestContext, subject_user_id: UUID) -> list[dict[str, Any]]:
        """Return change entries for a profile, newest first.

        Args:
            ctx: Calling user's context.
            subject_user_id: Profile owner whose history is requested.

        Returns:
            list[dict]: Change entries.

        Raises:
            AuthorizationError: If the caller is neither the owner nor an admin.
        """
        if not ctx.is_admin and ctx.user_id != subject_user_id:
            raise AuthorizationError("You can only view your own change history")

        response = self.client.rpc(
            "get_profile_changes",
            {"profile_user_id": str(subject_user_id)},
        ).execute()

        entries = response.data or []
        return sorted(entries, key=lambda entry: str(entry.get("changed_at") or ""), reverse=True)
