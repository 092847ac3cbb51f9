"""Profile API routes."""

from uuid import UUID

from fastapi import APIRouter, File, UploadFile, status

from src.api.deps import ApprovedContext, Context
from src.api.middleware.error_handler import NotFoundError
from src.schemas.change import ChangeEntryResponse
from src.schemas.profile import (
    ProfilePatch,
    ProfileResponse,
    ProfileUpdateOutcome,
    RegistrationRequest,
)
from src.services.change_history_service import ChangeHistoryService
from src.services.profile_service import ProfileService

router = APIRouter(prefix="/profiles", tags=["profiles"])


@router.get(
    "/me",
    response_model=ProfileResponse,
    summary="Get current user's profile",
    description="Returns the authenticated user's full profile, including approval status.",
)
async def get_my_profile(ctx: Context) -> ProfileResponse:
    """Get the authenticated user's profile.

    Raises:
        NotFoundError: 404 if the user has no profile yet.
    """
    service = ProfileService()
    profile = await service.get_profile(ctx.user_id)

    if not profile:
        raise NotFoundError("Profile not found")

    return ProfileResponse(**profile)


@router.put(
    "/me",
    response_model=ProfileUpdateOutcome,
    summary="Update current user's profile",
    description=(
        "Applies one or more field groups. Approved members get an update request "
        "for admin review instead of a direct write."
    ),
)
async def update_my_profile(data: ProfilePatch, ctx: Context) -> ProfileUpdateOutcome:
    """Update the authenticated user's profile.

    Args:
        data: Field groups to change.
        ctx: Request context.

    Returns:
        ProfileUpdateOutcome: Whether the change was applied or queued.
    """
    service = ProfileService()
    outcome = await service.update_own_profile(ctx, data)

    return ProfileUpdateOutcome(**outcome)


@router.post(
    "/me/registration",
    response_model=ProfileResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Submit registration",
    description="Stores the registration form and places the profile in the approval queue.",
)
async def submit_registration(data: RegistrationRequest, ctx: Context) -> ProfileResponse:
    """Complete registration for the authenticated user."""
    service = ProfileService()
    profile = await service.complete_registration(ctx, data)

    return ProfileResponse(**profile)


@router.post(
    "/me/avatar",
    response_model=ProfileResponse,
    summary="Upload profile picture",
    description="Replaces the profile picture. JPEG, PNG, WebP or GIF.",
)
async def upload_avatar(
    ctx: Context,
    file: UploadFile = File(..., description="Profile picture image"),
) -> ProfileResponse:
    """Upload a new profile picture for the authenticated user."""
    content = await file.read()

    service = ProfileService()
    profile = await service.upload_avatar(ctx, content, file.content_type)

    return ProfileResponse(**profile)


@router.get(
    "/{user_id}",
    response_model=ProfileResponse,
    summary="Get a member's profile",
    description="Approved, public profiles only; hidden contact and location fields are null.",
)
async def get_member_profile(user_id: UUID, ctx: ApprovedContext) -> ProfileResponse:
    """Get another member's profile as visible to the caller."""
    service = ProfileService()
    profile = await service.get_member_profile(ctx, user_id)

    return ProfileResponse(**profile)


@router.get(
    "/{user_id}/history",
    response_model=list[ChangeEntryResponse],
    summary="Get profile change history",
    description="Change timeline, newest first. Visible to the profile owner and admins.",
)
async def get_profile_history(user_id: UUID, ctx: Context) -> list[ChangeEntryResponse]:
    """List change entries for a profile."""
    service = ChangeHistoryService()
    entries = await service.get_changes(ctx, user_id)

    return [ChangeEntryResponse.from_row(entry) for entry in entries]
