"""Member directory search and saved-member routes."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query, Response, status

from src.api.deps import ApprovedContext
from src.models.profile import ExperienceLevel, OrganizationType
from src.schemas.directory import (
    DirectoryAddRequest,
    DirectoryEntryCreated,
    DirectoryEntryResponse,
    MemberSearchResponse,
)
from src.schemas.profile import ProfileResponse
from src.services.directory_service import DirectoryService
from src.services.member_search import MemberSearchService

router = APIRouter(tags=["members"])


@router.get(
    "/members",
    response_model=MemberSearchResponse,
    summary="Search members",
    description=(
        "Free-text search across approved, public profiles with optional "
        "exact filters on experience level and organization type."
    ),
)
async def search_members(
    ctx: ApprovedContext,
    q: Annotated[str | None, Query(max_length=200, description="Free-text search term")] = None,
    experience_level: Annotated[ExperienceLevel | None, Query(description="Exact experience level")] = None,
    organization_type: Annotated[OrganizationType | None, Query(description="Exact organization type")] = None,
) -> MemberSearchResponse:
    """Search the member directory."""
    service = MemberSearchService()
    result = await service.search(
        ctx,
        term=q,
        experience_level=experience_level.value if experience_level else None,
        organization_type=organization_type.value if organization_type else None,
    )

    return MemberSearchResponse(
        members=[ProfileResponse(**member) for member in result["members"]],
        total=result["total"],
        count=result["count"],
        saved_member_ids=result["saved_member_ids"],
    )


@router.get(
    "/directory",
    response_model=list[DirectoryEntryResponse],
    summary="List saved members",
    description="The caller's saved members that are still approved and public.",
)
async def list_directory(ctx: ApprovedContext) -> list[DirectoryEntryResponse]:
    """List the caller's personal directory."""
    service = DirectoryService()
    entries = await service.list(ctx)

    return [DirectoryEntryResponse(**entry) for entry in entries]


@router.post(
    "/directory",
    response_model=DirectoryEntryCreated,
    status_code=status.HTTP_201_CREATED,
    summary="Save a member",
    description="Adds a member to the caller's directory. 409 if already saved.",
)
async def add_to_directory(data: DirectoryAddRequest, ctx: ApprovedContext) -> DirectoryEntryCreated:
    """Save a member to the caller's directory."""
    service = DirectoryService()
    entry = await service.add(ctx, data.member_id)

    return DirectoryEntryCreated(**entry)


@router.delete(
    "/directory/{member_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Remove a saved member",
    description="Removes a member from the caller's directory. Succeeds even if it was not saved.",
)
async def remove_from_directory(member_id: UUID, ctx: ApprovedContext) -> Response:
    """Remove a member from the caller's directory."""
    service = DirectoryService()
    await service.remove(ctx, member_id)

    return Response(status_code=status.HTTP_204_NO_CONTENT)
