"""Authentication business logic service."""

import logging
from datetime import datetime, timezone
from typing import Any

from src.api.middleware.error_handler import AlreadyExistsError, APIError, AuthorizationError, ValidationError
from src.core.config import get_settings
from src.core.supabase import create_auth_client, get_supabase_client
from src.models.change import ChangeType
from src.models.profile import ApprovalStatus
from src.services.access_service import RequestContext
from src.services.change_history_service import ChangeHistoryService
from src.services.change_tracker import creation_fields
from src.services.email_service import EmailService

logger = logging.getLogger(__name__)


def _translate_auth_error(error_msg: str, action: str) -> APIError:
    lowered = error_msg.lower()
    if "already registered" in lowered or "already exists" in lowered or "already been registered" in lowered:
        return AlreadyExistsError("An account with this email already exists")
    if "invalid email" in lowered:
        return ValidationError("Invalid email address")
    if "password" in lowered and ("weak" in lowered or "at least" in lowered):
        return ValidationError("Password is too weak. Please use a stronger password.")
    return ValidationError(f"{action} failed: {error_msg}")


class AuthService:
    """Service for account creation."""

    def __init__(self) -> None:
        """Initialize auth service with isolated Supabase client.

        Uses create_auth_client() for auth calls so session state from
        sign-up never leaks into the shared database client.
        """
        self.auth_client = create_auth_client()
        self.client = get_supabase_client()
        self.settings = get_settings()
        self.history = ChangeHistoryService()
        self.email = EmailService()

    async def signup(
        self,
        email: str,
        password: str,
        first_name: str,
        last_name: str,
    ) -> dict[str, Any]:
        """Sign up a new member with email and password.

        The new account starts with a pending profile; administrators are
        notified by email.

        Returns:
            dict: user_id, email, message and whether a confirmation email was sent.

        Raises:
            AlreadyExistsError: If the email is already registered.
            ValidationError: For any other sign-up failure.
        """
        try:
            response = self.auth_client.auth.sign_up(
                {
                    "email": email,
                    "password": password,
                    "options": {
                        "email_redirect_to": self.settings.frontend_url,
                        "data": {"first_name": first_name, "last_name": last_name},
                    },
                }
            )
        except Exception as e:
            logger.error("Signup failed: %s", str(e))
            raise _translate_auth_error(str(e), "Signup") from e

        if not response.user:
            raise ValidationError("Failed to create user account")

        user = response.user
        logger.info("User signed up: %s", user.id)

        await self.email.send_pending_signup_notice(first_name, last_name, email)

        return {
            "user_id": str(user.id),
            "email": user.email or email,
            "email_sent": response.session is None,
            "message": "Account created. Complete your registration to request approval.",
        }

    async def admin_create_user(
        self,
        ctx: RequestContext,
        email: str,
        password: str,
        first_name: str,
        last_name: str,
    ) -> dict[str, Any]:
        """Create a confirmed account whose profile is approved immediately.

        Args:
            ctx: Administrator's context.
            email: New member's email.
            password: Initial password.
            first_name: New member's first name.
            last_name: New member's last name.

        Returns:
            dict: user_id, email, first_name and last_name.

        Raises:
            AuthorizationError: If the caller is not an admin.
            AlreadyExistsError: If the email is already registered.
        """
        if not ctx.is_admin:
            raise AuthorizationError("Admin access required")

        try:
            response = self.auth_client.auth.admin.create_user(
                {
                    "email": email,
                    "password": password,
                    "email_confirm": True,
                    "user_metadata": {"first_name": first_name, "last_name": last_name},
                }
            )
        except Exception as e:
            logger.error("Admin user creation failed: %s", str(e))
            raise _translate_auth_error(str(e), "User creation") from e

        if not response.user:
            raise ValidationError("Failed to create user")

        user_id = str(response.user.id)
        approval = {
            "approval_status": ApprovalStatus.APPROVED.value,
            "approved_by": str(ctx.user_id),
            "approved_at": datetime.now(timezone.utc).isoformat(),
        }

        # The profile row normally comes from the auth.users insert trigger.
        try:
            updated = (
                self.client.table("profiles")
                .update(approval)
                .eq("user_id", user_id)
                .execute()
            )
            if updated.data:
                profile = updated.data[0]
            else:
                inserted = (
                    self.client.table("profiles")
                    .insert(
                        {
                            "user_id": user_id,
                            "email": email,
                            "first_name": first_name,
                            "last_name": last_name,
                            **approval,
                        }
                    )
                    .execute()
                )
                profile = inserted.data[0]

            await self.history.record_change(
                user_id,
                ctx.user_id,
                ctx.display_name,
                creation_fields(profile),
                ChangeType.CREATE,
            )
        except Exception as e:
            logger.error("Error approving profile for created user %s: %s", user_id, e)

        logger.info("Admin %s created user %s", ctx.user_id, user_id)

        return {
            "user_id": user_id,
            "email": response.user.email or email,
            "first_name": first_name,
            "last_name": last_name,
        }
