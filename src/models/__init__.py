"""Database model type definitions."""

from src.models.change import ChangeEntry, ChangeType, FieldChange
from src.models.directory import City, DirectoryEntry, Organization
from src.models.profile import ApprovalStatus, Profile, UserRole
from src.models.update_request import UpdateRequest, UpdateRequestStatus

__all__ = [
    "ApprovalStatus",
    "ChangeEntry",
    "ChangeType",
    "City",
    "DirectoryEntry",
    "FieldChange",
    "Organization",
    "Profile",
    "UpdateRequest",
    "UpdateRequestStatus",
    "UserRole",
]
