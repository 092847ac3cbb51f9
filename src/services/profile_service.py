"""Profile business logic service."""

import logging
from typing import Any
from uuid import UUID

from src.api.middleware.error_handler import AuthorizationError, NotFoundError, ValidationError
from src.core.config import get_settings
from src.core.supabase import get_supabase_client
from src.models.change import ChangeType
from src.models.profile import ApprovalStatus
from src.schemas.profile import ProfilePatch, RegistrationRequest
from src.services.access_service import RequestContext, build_display_name
from src.services.change_history_service import ChangeHistoryService
from src.services.change_tracker import creation_fields, get_changed_fields
from src.services.email_service import EmailService
from src.services.member_search import is_listed, mask_private_fields
from src.services.update_request_service import UpdateRequestService

logger = logging.getLogger(__name__)

AVATAR_EXTENSIONS = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
    "image/gif": "gif",
}


class ProfileService:
    """Service for reading, editing and moderating member profiles."""

    def __init__(self) -> None:
        """Initialize profile service with Supabase client."""
        self.client = get_supabase_client()
        self.settings = get_settings()
        self.history = ChangeHistoryService()
        self.update_requests = UpdateRequestService()
        self.email = EmailService()

    async def get_profile(self, user_id: UUID) -> dict[str, Any] | None:
        """Get a profile by user ID.

        Args:
            user_id: The auth user ID.

        Returns:
            dict | None: The profile data or None if not found.
        """
        response = (
            self.client.table("profiles")
            .select("*")
            .eq("user_id", str(user_id))
            .execute()
        )

        return response.data[0] if response.data else None

    async def require_profile(self, user_id: UUID) -> dict[str, Any]:
        """Get a profile by user ID or raise NotFoundError."""
        profile = await self.get_profile(user_id)
        if not profile:
            raise NotFoundError("Profile not found")
        return profile

    async def get_member_profile(self, ctx: RequestContext, user_id: UUID) -> dict[str, Any]:
        """Get another member's profile as the caller is allowed to see it.

        Owners and admins see the full record. Everyone else only sees
        approved, public profiles, with hidden fields masked.

        Raises:
            NotFoundError: If the profile is missing or not visible to the caller.
        """
        profile = await self.require_profile(user_id)

        if ctx.is_admin or str(ctx.user_id) == str(user_id):
            return profile

        if not is_listed(profile):
            raise NotFoundError("Profile not found")

        return mask_private_fields(profile, viewer_is_admin=False)

    async def _write(self, user_id: UUID, data: dict[str, Any]) -> dict[str, Any]:
        response = (
            self.client.table("profiles")
            .update(data)
            .eq("user_id", str(user_id))
            .execute()
        )
        if not response.data:
            raise NotFoundError("Profile not found")
        return response.data[0]

    async def complete_registration(self, ctx: RequestContext, data: RegistrationRequest) -> dict[str, Any]:
        """Store a new member's registration and queue it for approval.

        Args:
            ctx: Registering user's context.
            data: Full registration form.

        Returns:
            dict: The stored profile, now pending approval.

        Raises:
            ValidationError: If the profile has already been approved.
        """
        existing = await self.get_profile(ctx.user_id)
        if existing and existing.get("approval_status") == ApprovalStatus.APPROVED.value:
            raise ValidationError("Profile is already approved; edit it from your profile page instead")

        payload = data.to_payload()
        payload["approval_status"] = ApprovalStatus.PENDING.value
        payload["rejection_reason"] = None
        if not payload.get("email"):
            payload["email"] = ctx.email

        if existing:
            profile = await self._write(ctx.user_id, payload)
            changed = get_changed_fields(existing, profile)
        else:
            response = (
                self.client.table("profiles")
                .insert({"user_id": str(ctx.user_id), **payload})
                .execute()
            )
            profile = response.data[0]
            changed = creation_fields(profile)

        if changed:
            await self.history.record_change(
                ctx.user_id,
                ctx.user_id,
                build_display_name(profile.get("first_name"), profile.get("last_name"), ctx.email),
                changed,
                ChangeType.CREATE,
            )

        await self.email.send_pending_signup_notice(
            profile.get("first_name") or "",
            profile.get("last_name") or "",
            profile.get("email") or ctx.email or "",
        )

        logger.info("Registration submitted for %s", ctx.user_id)
        return profile

    async def update_own_profile(self, ctx: RequestContext, patch: ProfilePatch) -> dict[str, Any]:
        """Apply a self-service edit.

        Admins write directly. Members whose profile is already approved get
        an update request for an administrator to review. Members still
        pending or rejected write directly and go back to pending.

        Returns:
            dict: applied, profile, update_request_id and changed_fields.
        """
        current = await self.require_profile(ctx.user_id)
        payload = patch.to_payload()
        changed = get_changed_fields(current, {**current, **payload}, payload.keys())

        if not changed:
            return {"applied": False, "profile": current, "update_request_id": None, "changed_fields": []}

        if ctx.is_admin:
            profile = await self._write(ctx.user_id, payload)
            await self.history.record_change(ctx.user_id, ctx.user_id, ctx.display_name, changed, ChangeType.ADMIN_EDIT)
            return {"applied": True, "profile": profile, "update_request_id": None, "changed_fields": list(changed)}

        if current.get("approval_status") == ApprovalStatus.APPROVED.value:
            request = await self.update_requests.submit(ctx, {field: payload[field] for field in changed})
            return {
                "applied": False,
                "profile": current,
                "update_request_id": request.get("id"),
                "changed_fields": list(changed),
            }

        payload["approval_status"] = ApprovalStatus.PENDING.value
        payload["rejection_reason"] = None
        profile = await self._write(ctx.user_id, payload)
        changed = get_changed_fields(current, profile)
        await self.history.record_change(ctx.user_id, ctx.user_id, ctx.display_name, changed, ChangeType.UPDATE)

        logger.info("Profile %s resubmitted for approval", ctx.user_id)
        return {"applied": True, "profile": profile, "update_request_id": None, "changed_fields": list(changed)}

    async def admin_update_profile(self, ctx: RequestContext, user_id: UUID, patch: ProfilePatch) -> dict[str, Any]:
        """Write an administrator's edit to any profile directly."""
        self._require_admin(ctx)
        current = await self.require_profile(user_id)
        payload = patch.to_payload()
        changed = get_changed_fields(current, {**current, **payload}, payload.keys())

        if not changed:
            return current

        profile = await self._write(user_id, payload)
        await self.history.record_change(user_id, ctx.user_id, ctx.display_name, changed, ChangeType.ADMIN_EDIT)
        return profile

    async def approve_registration(self, ctx: RequestContext, user_id: UUID) -> dict[str, Any]:
        """Approve a pending registration and notify the member.

        Raises:
            ValidationError: If the profile is already approved.
        """
        self._require_admin(ctx)
        current = await self.require_profile(user_id)
        if current.get("approval_status") == ApprovalStatus.APPROVED.value:
            raise ValidationError("Profile is already approved")

        self.client.rpc("approve_user_profile", {"profile_user_id": str(user_id)}).execute()
        profile = await self.require_profile(user_id)

        changed = get_changed_fields(current, profile)
        if changed:
            await self.history.record_change(user_id, ctx.user_id, ctx.display_name, changed, ChangeType.APPROVE)

        if profile.get("email"):
            await self.email.send_approval_status_email(
                profile["email"],
                build_display_name(profile.get("first_name"), profile.get("last_name")),
                approved=True,
            )

        logger.info("Profile %s approved by %s", user_id, ctx.user_id)
        return profile

    async def reject_registration(self, ctx: RequestContext, user_id: UUID, reason: str) -> dict[str, Any]:
        """Reject a registration with a reason and notify the member."""
        self._require_admin(ctx)
        if not reason or not reason.strip():
            raise ValidationError("Please provide a reason for rejection")

        current = await self.require_profile(user_id)
        self.client.rpc(
            "reject_user_profile",
            {"profile_user_id": str(user_id), "reason": reason},
        ).execute()
        profile = await self.require_profile(user_id)

        changed = get_changed_fields(current, profile)
        if changed:
            await self.history.record_change(user_id, ctx.user_id, ctx.display_name, changed, ChangeType.REJECT)

        if profile.get("email"):
            await self.email.send_approval_status_email(
                profile["email"],
                build_display_name(profile.get("first_name"), profile.get("last_name")),
                approved=False,
                reason=reason,
            )

        logger.info("Profile %s rejected by %s", user_id, ctx.user_id)
        return profile

    async def list_profiles(
        self,
        ctx: RequestContext,
        status: ApprovalStatus | None = None,
    ) -> list[dict[str, Any]]:
        """List all profiles for the admin dashboard, newest first."""
        self._require_admin(ctx)

        query = self.client.table("profiles").select("*")
        if status is not None:
            query = query.eq("approval_status", status.value)

        response = query.order("created_at", desc=True).execute()
        return response.data or []

    async def get_stats(self, ctx: RequestContext) -> dict[str, int]:
        """Count profiles per approval status."""
        self._require_admin(ctx)

        response = self.client.table("profiles").select("approval_status").execute()
        stats = {status.value: 0 for status in ApprovalStatus}
        rows = response.data or []
        for row in rows:
            if row.get("approval_status") in stats:
                stats[row["approval_status"]] += 1
        stats["total"] = len(rows)
        return stats

    async def upload_avatar(
        self,
        ctx: RequestContext,
        content: bytes,
        content_type: str | None,
    ) -> dict[str, Any]:
        """Store a new profile picture and point the profile at it.

        Args:
            ctx: Uploading user's context.
            content: Raw image bytes.
            content_type: MIME type reported by the client.

        Returns:
            dict: The updated profile.

        Raises:
            ValidationError: For non-image uploads, empty files or files over the size limit.
        """
        extension = AVATAR_EXTENSIONS.get((content_type or "").lower())
        if extension is None:
            raise ValidationError(
                "Profile picture must be an image",
                details=[
                    {
                        "loc": ["file"],
                        "msg": f"Allowed types: {', '.join(AVATAR_EXTENSIONS)}",
                        "type": "content_type",
                    }
                ],
            )
        if not content:
            raise ValidationError("Uploaded file is empty")
        if len(content) > self.settings.avatar_max_bytes:
            raise ValidationError(
                f"Profile picture must be at most {self.settings.avatar_max_bytes // (1024 * 1024)}MB"
            )

        current = await self.require_profile(ctx.user_id)
        bucket = self.client.storage.from_(self.settings.avatar_bucket)
        path = f"{ctx.user_id}/avatar.{extension}"

        previous = (current.get("avatar_url") or "").split("?")[0].rsplit("/", 1)[-1]
        if previous and previous != f"avatar.{extension}":
            try:
                bucket.remove([f"{ctx.user_id}/{previous}"])
            except Exception as e:
                logger.warning("Failed to remove old avatar %s for %s: %s", previous, ctx.user_id, e)

        bucket.upload(path, content, {"content-type": content_type, "upsert": "true"})
        avatar_url = bucket.get_public_url(path)

        profile = await self._write(ctx.user_id, {"avatar_url": avatar_url})
        changed = get_changed_fields(current, profile, ("avatar_url",))
        if changed:
            await self.history.record_change(ctx.user_id, ctx.user_id, ctx.display_name, changed, ChangeType.UPDATE)

        logger.info("Avatar uploaded for %s (%d bytes)", ctx.user_id, len(content))
        return profile

    @staticmethod
    def _require_admin(ctx: RequestContext) -> None:
        if not ctx.is_admin:
            raise AuthorizationError("Admin access required")
