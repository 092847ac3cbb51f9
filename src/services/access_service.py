"""Resolves who is calling: role and display name for a request."""

import logging
from dataclasses import dataclass
from uuid import UUID

from src.core.supabase import get_supabase_client
from src.models.profile import ApprovalStatus, UserRole
from src.schemas.auth import UserContext

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RequestContext:
    """Everything a service needs to know about the acting user.

    Built once per request and passed explicitly to service methods.
    """

    user_id: UUID
    email: str | None
    role: UserRole
    display_name: str
    approval_status: ApprovalStatus | None = None

    @property
    def is_admin(self) -> bool:
        """Whether the caller holds the admin role."""
        return self.role == UserRole.ADMIN

    @property
    def is_approved(self) -> bool:
        """Whether the caller's own registration has been approved."""
        return self.approval_status == ApprovalStatus.APPROVED


def _parse_status(value: str | None) -> ApprovalStatus | None:
    """Map a stored status to the enum; unknown values count as no status."""
    if not value:
        return None
    try:
        return ApprovalStatus(value)
    except ValueError:
        logger.warning("Unknown approval status on profile: %s", value)
        return None


def build_display_name(
    first_name: str | None,
    last_name: str | None,
    fallback: str | None = None,
) -> str:
    """Join first and last name, falling back to email or a placeholder."""
    name = f"{first_name or ''} {last_name or ''}".strip()
    return name or fallback or "Unknown User"


class AccessService:
    """Looks up roles and profile basics used for authorization."""

    def __init__(self) -> None:
        """Initialize access service with Supabase client."""
        self.client = get_supabase_client()

    async def get_role(self, user_id: UUID) -> UserRole:
        """Return the user's role, defaulting to normal_user when no row exists."""
        response = (
            self.client.table("user_roles")
            .select("role")
            .eq("user_id", str(user_id))
            .execute()
        )

        roles = {row.get("role") for row in response.data or []}
        if UserRole.ADMIN.value in roles:
            return UserRole.ADMIN
        return UserRole.NORMAL_USER

    async def resolve_context(self, user: UserContext) -> RequestContext:
        """Combine the token identity with role and profile data.

        Args:
            user: Identity from the validated access token.

        Returns:
            RequestContext: Context for the current request.
        """
        role = await self.get_role(user.user_id)

        response = (
            self.client.table("profiles")
            .select("first_name, last_name, email, approval_status")
            .eq("user_id", str(user.user_id))
            .execute()
        )
        profile = response.data[0] if response.data else {}

        approval_status = _parse_status(profile.get("approval_status"))

        return RequestContext(
            user_id=user.user_id,
            email=user.email or profile.get("email"),
            role=role,
            display_name=build_display_name(
                profile.get("first_name"),
                profile.get("last_name"),
                user.email or profile.get("email"),
            ),
            approval_status=approval_status,
        )
