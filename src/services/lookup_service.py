"""Organization and city lookup data, created on demand by members."""

import logging
from typing import Any
from uuid import UUID

from src.api.middleware.error_handler import AuthorizationError, NotFoundError
from src.core.supabase import get_supabase_client
from src.services.access_service import RequestContext

logger = logging.getLogger(__name__)

SEARCH_LIMIT = 50


def escape_like(value: str) -> str:
    """Escape LIKE wildcards so a name is matched literally."""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class OrganizationService:
    """Organization master data."""

    def __init__(self) -> None:
        """Initialize organization service with Supabase client."""
        self.client = get_supabase_client()

    async def search(self, query: str | None = None, limit: int = SEARCH_LIMIT) -> list[dict[str, Any]]:
        """Search organizations by name substring, alphabetically."""
        request = self.client.table("organizations").select("*")
        if query and query.strip():
            request = request.ilike("name", f"%{escape_like(query.strip())}%")

        response = request.order("name").limit(limit).execute()
        return response.data or []

    async def find_by_name(self, name: str) -> dict[str, Any] | None:
        """Case-insensitive exact name lookup."""
        response = (
            self.client.table("organizations")
            .select("*")
            .ilike("name", escape_like(name.strip()))
            .execute()
        )
        return response.data[0] if response.data else None

    async def add(self, ctx: RequestContext, name: str, domain: str | None = None) -> tuple[dict[str, Any], bool]:
        """Add an organization unless one with the same name exists.

        Args:
            ctx: Calling user's context.
            name: Organization name.
            domain: Optional web domain.

        Returns:
            tuple: (organization, created). created is False when an existing
            organization with the same name (ignoring case) was returned.
        """
        existing = await self.find_by_name(name)
        if existing:
            logger.info("Organization already exists: %s", existing["name"])
            return existing, False

        response = (
            self.client.table("organizations")
            .insert(
                {
                    "name": name.strip(),
                    "domain": (domain or "").strip() or None,
                    "is_verified": False,
                    "created_by": str(ctx.user_id),
                }
            )
            .execute()
        )

        logger.info("Organization added by %s: %s", ctx.user_id, name.strip())
        return response.data[0], True

    async def _get(self, organization_id: UUID) -> dict[str, Any]:
        response = (
            self.client.table("organizations")
            .select("*")
            .eq("id", str(organization_id))
            .execute()
        )
        if not response.data:
            raise NotFoundError("Organization not found")
        return response.data[0]

    async def update(
        self,
        ctx: RequestContext,
        organization_id: UUID,
        name: str,
        domain: str | None = None,
        is_verified: bool = False,
    ) -> dict[str, Any]:
        """Edit an organization and carry a rename over to member profiles.

        The profile rename is best-effort: a failure there is logged and the
        organization edit still stands.
        """
        self._require_admin(ctx)
        current = await self._get(organization_id)
        new_name = name.strip()

        response = (
            self.client.table("organizations")
            .update({"name": new_name, "domain": (domain or "").strip() or None, "is_verified": is_verified})
            .eq("id", str(organization_id))
            .execute()
        )
        updated = response.data[0] if response.data else {**current, "name": new_name}

        if current["name"] != new_name:
            try:
                (
                    self.client.table("profiles")
                    .update({"organization": new_name})
                    .eq("organization", current["name"])
                    .execute()
                )
            except Exception as e:
                logger.warning("Failed to rename organization on profiles (%s -> %s): %s", current["name"], new_name, e)

        logger.info("Organization %s updated by %s", organization_id, ctx.user_id)
        return updated

    async def delete(self, ctx: RequestContext, organization_id: UUID) -> None:
        """Delete an organization after clearing it from member profiles."""
        self._require_admin(ctx)
        current = await self._get(organization_id)

        (
            self.client.table("profiles")
            .update({"organization": None})
            .eq("organization", current["name"])
            .execute()
        )
        self.client.table("organizations").delete().eq("id", str(organization_id)).execute()

        logger.info("Organization %s (%s) deleted by %s", organization_id, current["name"], ctx.user_id)

    @staticmethod
    def _require_admin(ctx: RequestContext) -> None:
        if not ctx.is_admin:
            raise AuthorizationError("Admin access required")


class CityService:
    """City lookup data."""

    def __init__(self) -> None:
        """Initialize city service with Supabase client."""
        self.client = get_supabase_client()

    async def search(
        self,
        query: str | None = None,
        country: str | None = None,
        limit: int = SEARCH_LIMIT,
    ) -> list[dict[str, Any]]:
        """Search cities by name substring, optionally within one country."""
        request = self.client.table("cities").select("*")
        if country:
            request = request.eq("country", country)
        if query and query.strip():
            request = request.ilike("name", f"%{escape_like(query.strip())}%")

        response = request.order("name").limit(limit).execute()
        return response.data or []

    async def add(
        self,
        name: str,
        country: str,
        state_province: str | None = None,
    ) -> tuple[dict[str, Any], bool]:
        """Add a city unless the same name already exists in that country.

        Returns:
            tuple: (city, created).
        """
        name = name.strip()
        country = country.strip()

        existing = (
            self.client.table("cities")
            .select("*")
            .eq("name", name)
            .eq("country", country)
            .execute()
        )
        if existing.data:
            return existing.data[0], False

        response = (
            self.client.table("cities")
            .insert({"name": name, "country": country, "state_province": (state_province or "").strip() or None})
            .execute()
        )

        logger.info("City added: %s, %s", name, country)
        return response.data[0], True
