"""Support routes."""

from fastapi import APIRouter

from src.api.deps import Context
from src.schemas.support import IssueReport, IssueReportResponse
from src.services.email_service import EmailService
from src.services.profile_service import ProfileService

router = APIRouter(prefix="/support", tags=["support"])


@router.post(
    "/issues",
    response_model=IssueReportResponse,
    summary="Report an issue",
    description="Forwards the report, with a summary of the reporter's profile, to the support inbox.",
)
async def report_issue(data: IssueReport, ctx: Context) -> IssueReportResponse:
    """Send an issue report to support."""
    profile = await ProfileService().get_profile(ctx.user_id)

    result = await EmailService().send_issue_report(
        reporter_email=ctx.email or (profile or {}).get("email") or "unknown",
        issue_type=data.type.value,
        message=data.message,
        profile=profile,
    )

    if result["success"]:
        return IssueReportResponse(delivered=True, message="Thanks, your report has been sent to support.")
    return IssueReportResponse(
        delivered=False,
        message="We could not send your report right now. Please try again later.",
    )
