"""Directory, organization and city model type definitions."""

from datetime import datetime
from typing import TypedDict
from uuid import UUID


class DirectoryEntry(TypedDict):
    """user_directory row: the owner bookmarked member_id."""

    id: UUID
    user_id: UUID
    member_id: UUID
    created_at: datetime


class Organization(TypedDict):
    """organizations table row. Names are unique ignoring case."""

    id: UUID
    name: str
    domain: str | None
    is_verified: bool | None
    created_by: UUID | None
    created_at: datetime
    updated_at: datetime


class City(TypedDict):
    """cities table row. (name, country) is unique."""

    id: UUID
    name: str
    country: str
    state_province: str | None
