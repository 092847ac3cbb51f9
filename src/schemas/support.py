"""Support request schemas."""

from enum import Enum

from pydantic import BaseModel, Field


class IssueType(str, Enum):
    """Categories offered on the report-an-issue form."""

    LOGIN = "login"
    PROFILE = "profile"
    DIRECTORY = "directory"
    APPROVAL = "approval"
    OTHER = "other"


class IssueReport(BaseModel):
    """A problem reported by a signed-in member."""

    type: IssueType = Field(default=IssueType.OTHER, description="Issue category")
    message: str = Field(..., min_length=1, max_length=5000, description="What went wrong")


class IssueReportResponse(BaseModel):
    """Whether the report reached the support inbox."""

    delivered: bool
    message: str
