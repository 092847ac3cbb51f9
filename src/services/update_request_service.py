"""Moderation of profile update requests submitted by approved members."""

import logging
from typing import Any
from uuid import UUID

from src.api.middleware.error_handler import AuthorizationError, NotFoundError, ValidationError
from src.core.supabase import get_supabase_client
from src.models.change import ChangeType
from src.models.update_request import UpdateRequestStatus
from src.services.access_service import RequestContext
from src.services.change_history_service import ChangeHistoryService
from src.services.change_tracker import get_changed_fields

logger = logging.getLogger(__name__)


class UpdateRequestService:
    """Creates, lists and resolves profile update requests.

    A request moves from pending to approved or rejected exactly once.
    """

    def __init__(self) -> None:
        """Initialize update request service with Supabase client."""
        self.client = get_supabase_client()
        self.history = ChangeHistoryService()

    async def submit(self, ctx: RequestContext, payload: dict[str, Any]) -> dict[str, Any]:
        """Create a pending request for the caller's own profile.

        Args:
            ctx: Calling user's context.
            payload: Column -> value changes to propose.

        Returns:
            dict: The created update request.
        """
        if not payload:
            raise ValidationError("An update request needs at least one changed field")

        response = self.client.rpc(
            "submit_profile_update_request",
            {"profile_user_id": str(ctx.user_id), "payload": payload},
        ).execute()

        request = response.data[0] if isinstance(response.data, list) else response.data
        if not request:
            raise ValidationError("Failed to submit update request")

        logger.info("Update request %s submitted by %s", request.get("id"), ctx.user_id)
        return request

    async def get_request(self, request_id: UUID) -> dict[str, Any]:
        """Get an update request by ID.

        Raises:
            NotFoundError: If no such request exists.
        """
        response = (
            self.client.table("profile_update_requests")
            .select("*")
            .eq("id", str(request_id))
            .execute()
        )
        if not response.data:
            raise NotFoundError("Update request not found")
        return response.data[0]

    async def list_requests(
        self,
        ctx: RequestContext,
        status: UpdateRequestStatus | None = UpdateRequestStatus.PENDING,
    ) -> list[dict[str, Any]]:
        """List update requests, oldest first, optionally filtered by status."""
        self._require_admin(ctx)

        query = self.client.table("profile_update_requests").select("*")
        if status is not None:
            query = query.eq("status", status.value)

        response = query.order("created_at").execute()
        return response.data or []

    async def approve(
        self,
        ctx: RequestContext,
        request_id: UUID,
        override: dict[str, Any] | None = None,
        admin_notes: str | None = None,
    ) -> dict[str, Any]:
        """Approve a pending request and merge its payload into the profile.

        Args:
            ctx: Administrator's context.
            request_id: Request to approve.
            override: Replaces the submitted payload entirely when given.
            admin_notes: Optional note stored on the request.

        Returns:
            dict: request_id, status and the fields that actually changed.

        Raises:
            AuthorizationError: If the caller is not an admin.
            NotFoundError: If the request or its profile does not exist.
            ValidationError: If the request has already been resolved.
        """
        self._require_admin(ctx)
        request = await self._get_pending(request_id)
        subject_user_id = request["profile_user_id"]

        profile_response = (
            self.client.table("profiles")
            .select("*")
            .eq("user_id", str(subject_user_id))
            .execute()
        )
        if not profile_response.data:
            raise NotFoundError("Profile not found")
        old_profile = profile_response.data[0]

        payload = override if override is not None else request.get("submitted_payload") or {}

        self.client.rpc(
            "approve_profile_update_request",
            {
                "request_id": str(request_id),
                "payload": payload,
                "admin_notes": admin_notes,
                "reviewed_by": str(ctx.user_id),
            },
        ).execute()

        changed = get_changed_fields(old_profile, {**old_profile, **payload}, payload.keys())
        if changed:
            await self.history.record_change(
                subject_user_id,
                ctx.user_id,
                ctx.display_name,
                changed,
                ChangeType.UPDATE,
            )

        logger.info("Update request %s approved by %s (%d fields changed)", request_id, ctx.user_id, len(changed))

        return {
            "request_id": request_id,
            "status": UpdateRequestStatus.APPROVED,
            "changed_fields": list(changed),
        }

    async def reject(
        self,
        ctx: RequestContext,
        request_id: UUID,
        reason: str | None = None,
    ) -> dict[str, Any]:
        """Reject a pending request. The profile is left untouched."""
        self._require_admin(ctx)
        await self._get_pending(request_id)

        self.client.rpc(
            "reject_profile_update_request",
            {
                "request_id": str(request_id),
                "reason": reason,
                "reviewed_by": str(ctx.user_id),
            },
        ).execute()

        logger.info("Update request %s rejected by %s", request_id, ctx.user_id)

        return {
            "request_id": request_id,
            "status": UpdateRequestStatus.REJECTED,
            "changed_fields": [],
        }

    async def _get_pending(self, request_id: UUID) -> dict[str, Any]:
        request = await self.get_request(request_id)
        if request.get("status") != UpdateRequestStatus.PENDING.value:
            raise ValidationError(f"Update request is already {request.get('status')}")
        return request

    @staticmethod
    def _require_admin(ctx: RequestContext) -> None:
        if not ctx.is_admin:
            raise AuthorizationError("Admin access required")
