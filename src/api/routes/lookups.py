"""Organization and city lookup routes."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query, Response, status

from src.api.deps import AdminContext, Context
from src.schemas.directory import (
    CityAddResponse,
    CityCreate,
    CityResponse,
    OrganizationAddResponse,
    OrganizationCreate,
    OrganizationResponse,
    OrganizationUpdate,
)
from src.services.lookup_service import CityService, OrganizationService

router = APIRouter(tags=["lookups"])


@router.get(
    "/organizations",
    response_model=list[OrganizationResponse],
    summary="Search organizations",
)
async def search_organizations(
    ctx: Context,
    q: Annotated[str | None, Query(max_length=255, description="Name contains")] = None,
) -> list[OrganizationResponse]:
    """Search organizations by name."""
    service = OrganizationService()
    rows = await service.search(q)
    return [OrganizationResponse(**row) for row in rows]


@router.post(
    "/organizations",
    response_model=OrganizationAddResponse,
    summary="Add an organization",
    description="Returns the existing organization when one with the same name exists.",
)
async def add_organization(data: OrganizationCreate, ctx: Context, response: Response) -> OrganizationAddResponse:
    """Add an organization on demand."""
    service = OrganizationService()
    organization, created = await service.add(ctx, data.name, data.domain)

    if created:
        response.status_code = status.HTTP_201_CREATED

    return OrganizationAddResponse(created=created, organization=OrganizationResponse(**organization))


@router.put(
    "/organizations/{organization_id}",
    response_model=OrganizationResponse,
    summary="Edit an organization (admin)",
    description="Renaming also updates member profiles that reference the old name.",
)
async def update_organization(
    organization_id: UUID,
    data: OrganizationUpdate,
    ctx: AdminContext,
) -> OrganizationResponse:
    """Edit an organization master record."""
    service = OrganizationService()
    organization = await service.update(ctx, organization_id, data.name, data.domain, data.is_verified)
    return OrganizationResponse(**organization)


@router.delete(
    "/organizations/{organization_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete an organization (admin)",
)
async def delete_organization(organization_id: UUID, ctx: AdminContext) -> Response:
    """Delete an organization and clear it from member profiles."""
    service = OrganizationService()
    await service.delete(ctx, organization_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(
    "/cities",
    response_model=list[CityResponse],
    summary="Search cities",
)
async def search_cities(
    ctx: Context,
    q: Annotated[str | None, Query(max_length=120, description="Name contains")] = None,
    country: Annotated[str | None, Query(max_length=120, description="Exact country")] = None,
) -> list[CityResponse]:
    """Search cities, optionally within one country."""
    service = CityService()
    rows = await service.search(q, country)
    return [CityResponse(**row) for row in rows]


@router.post(
    "/cities",
    response_model=CityAddResponse,
    summary="Add a city",
    description="Returns the existing city when the name already exists in that country.",
)
async def add_city(data: CityCreate, ctx: Context, response: Response) -> CityAddResponse:
    """Add a city on demand."""
    service = CityService()
    city, created = await service.add(data.name, data.country, data.state_province)

    if created:
        response.status_code = status.HTTP_201_CREATED

    return CityAddResponse(created=created, city=CityResponse(**city))
