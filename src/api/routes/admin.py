"""Administrator routes: registration approval, profile edits, account creation."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query, status

from src.api.deps import AdminContext
from src.models.profile import ApprovalStatus
from src.schemas.auth import AdminCreateUserRequest, AdminCreateUserResponse
from src.schemas.profile import (
    ApprovalStats,
    ProfilePatch,
    ProfileResponse,
    RejectRegistrationRequest,
)
from src.services.auth_service import AuthService
from src.services.profile_service import ProfileService

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get(
    "/profiles",
    response_model=list[ProfileResponse],
    summary="List profiles",
    description="All profiles, newest first, optionally filtered by approval status.",
)
async def list_profiles(
    ctx: AdminContext,
    approval_status: Annotated[ApprovalStatus | None, Query(alias="status")] = None,
) -> list[ProfileResponse]:
    """List profiles for the admin dashboard."""
    service = ProfileService()
    profiles = await service.list_profiles(ctx, approval_status)

    return [ProfileResponse(**profile) for profile in profiles]


@router.get(
    "/stats",
    response_model=ApprovalStats,
    summary="Approval counts",
)
async def get_stats(ctx: AdminContext) -> ApprovalStats:
    """Count profiles per approval status."""
    service = ProfileService()
    return ApprovalStats(**await service.get_stats(ctx))


@router.put(
    "/profiles/{user_id}",
    response_model=ProfileResponse,
    summary="Edit any profile",
    description="Writes directly and records an admin_edit change entry.",
)
async def admin_update_profile(user_id: UUID, data: ProfilePatch, ctx: AdminContext) -> ProfileResponse:
    """Edit a member's profile as an administrator."""
    service = ProfileService()
    profile = await service.admin_update_profile(ctx, user_id, data)

    return ProfileResponse(**profile)


@router.post(
    "/profiles/{user_id}/approve",
    response_model=ProfileResponse,
    summary="Approve a registration",
)
async def approve_registration(user_id: UUID, ctx: AdminContext) -> ProfileResponse:
    """Approve a pending registration and notify the member."""
    service = ProfileService()
    profile = await service.approve_registration(ctx, user_id)

    return ProfileResponse(**profile)


@router.post(
    "/profiles/{user_id}/reject",
    response_model=ProfileResponse,
    summary="Reject a registration",
)
async def reject_registration(
    user_id: UUID,
    data: RejectRegistrationRequest,
    ctx: AdminContext,
) -> ProfileResponse:
    """Reject a registration with a reason and notify the member."""
    service = ProfileService()
    profile = await service.reject_registration(ctx, user_id, data.reason)

    return ProfileResponse(**profile)


@router.post(
    "/users",
    response_model=AdminCreateUserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a member account",
    description="Creates a confirmed account whose profile is approved immediately.",
)
async def create_user(data: AdminCreateUserRequest, ctx: AdminContext) -> AdminCreateUserResponse:
    """Create a member account on behalf of an administrator."""
    service = AuthService()
    result = await service.admin_create_user(
        ctx,
        email=data.email,
        password=data.password,
        first_name=data.first_name,
        last_name=data.last_name,
    )

    return AdminCreateUserResponse(**result)
