"""Profile update request routes."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query, status

from src.api.deps import AdminContext, Context
from src.models.update_request import UpdateRequestStatus
from src.schemas.update_request import (
    UpdateRequestApprove,
    UpdateRequestCreate,
    UpdateRequestReject,
    UpdateRequestResolution,
    UpdateRequestResponse,
)
from src.services.update_request_service import UpdateRequestService

router = APIRouter(prefix="/update-requests", tags=["update-requests"])


@router.post(
    "",
    response_model=UpdateRequestResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Submit an update request",
    description="Proposes changes to the caller's own profile for admin review.",
)
async def submit_update_request(data: UpdateRequestCreate, ctx: Context) -> UpdateRequestResponse:
    """Submit a profile update request."""
    service = UpdateRequestService()
    request = await service.submit(ctx, data.to_payload())

    return UpdateRequestResponse(**request)


@router.get(
    "",
    response_model=list[UpdateRequestResponse],
    summary="List update requests (admin)",
)
async def list_update_requests(
    ctx: AdminContext,
    request_status: Annotated[
        UpdateRequestStatus | None,
        Query(alias="status", description="Filter by status; omit for pending"),
    ] = UpdateRequestStatus.PENDING,
) -> list[UpdateRequestResponse]:
    """List update requests, oldest first."""
    service = UpdateRequestService()
    requests = await service.list_requests(ctx, request_status)

    return [UpdateRequestResponse(**request) for request in requests]


@router.post(
    "/{request_id}/approve",
    response_model=UpdateRequestResolution,
    summary="Approve an update request (admin)",
    description="Merges the submitted payload, or the override when given, into the profile.",
)
async def approve_update_request(
    request_id: UUID,
    ctx: AdminContext,
    data: UpdateRequestApprove | None = None,
) -> UpdateRequestResolution:
    """Approve a pending update request."""
    data = data or UpdateRequestApprove()
    override = data.override.to_payload() if data.override is not None else None

    service = UpdateRequestService()
    result = await service.approve(ctx, request_id, override=override, admin_notes=data.admin_notes)

    return UpdateRequestResolution(**result)


@router.post(
    "/{request_id}/reject",
    response_model=UpdateRequestResolution,
    summary="Reject an update request (admin)",
)
async def reject_update_request(
    request_id: UUID,
    ctx: AdminContext,
    data: UpdateRequestReject | None = None,
) -> UpdateRequestResolution:
    """Reject a pending update request. The profile is not changed."""
    data = data or UpdateRequestReject()

    service = UpdateRequestService()
    result = await service.reject(ctx, request_id, reason=data.reason)

    return UpdateRequestResolution(**result)
