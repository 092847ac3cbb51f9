"""Field-level diffing of profile records for the change history.

The diff is order-insensitive for collections: reordering skills, or the
keys inside an organizations sub-record, never shows up as a change.
"""

import json
from collections.abc import Iterable, Mapping
from datetime import date, datetime
from typing import Any

from src.models.change import ChangedFields

DEFAULT_TRACKED_FIELDS: tuple[str, ...] = (
    "first_name",
    "last_name",
    "email",
    "phone",
    "country_code",
    "address",
    "date_of_birth",
    "city",
    "country",
    "organization",
    "organizations",
    "position",
    "program",
    "experience_level",
    "organization_type",
    "graduation_year",
    "bio",
    "interests",
    "skills",
    "linkedin_url",
    "website_url",
    "avatar_url",
    "show_contact_info",
    "show_location",
    "is_public",
    "approval_status",
    "rejection_reason",
)

FIELD_LABELS: dict[str, str] = {
    "first_name": "First Name",
    "last_name": "Last Name",
    "email": "Email",
    "phone": "Phone",
    "country_code": "Country Code",
    "address": "Address",
    "date_of_birth": "Date of Birth",
    "city": "City",
    "country": "Country",
    "organization": "Organization",
    "organizations": "Organizations",
    "position": "Position",
    "program": "Program",
    "experience_level": "Experience Level",
    "organization_type": "Organization Type",
    "graduation_year": "Graduation Year",
    "bio": "Bio",
    "interests": "Interests",
    "skills": "Skills",
    "linkedin_url": "LinkedIn URL",
    "website_url": "Website URL",
    "avatar_url": "Profile Picture",
    "show_contact_info": "Show Contact Info",
    "show_location": "Show Location",
    "is_public": "Public Profile",
    "approval_status": "Approval Status",
    "rejection_reason": "Rejection Reason",
}


def _is_primitive(value: Any) -> bool:
    return not isinstance(value, (Mapping, list, tuple))


def _canonical(value: Any) -> str:
    return json.dumps(value, sort_keys=True, default=str)


def normalize_value(value: Any) -> Any:
    """Return a comparison form of a field value.

    - lists of primitives become a sorted list of their string forms
    - mappings get their keys sorted, recursively
    - lists holding mappings or lists are normalized element-wise and then
      sorted by canonical JSON
    - anything else (including None) is returned unchanged
    """
    if isinstance(value, Mapping):
        return {key: normalize_value(value[key]) for key in sorted(value, key=str)}

    if isinstance(value, (list, tuple)):
        if all(_is_primitive(item) for item in value):
            return sorted(str(item) for item in value)
        return sorted((normalize_value(item) for item in value), key=_canonical)

    return value


def get_changed_fields(
    old_record: Mapping[str, Any],
    new_record: Mapping[str, Any],
    tracked_fields: Iterable[str] = DEFAULT_TRACKED_FIELDS,
) -> ChangedFields:
    """Compare two records and return the tracked fields that differ.

    A field missing from either record counts as None. None and an empty
    list are different values.

    Args:
        old_record: State before the mutation.
        new_record: State after the mutation.
        tracked_fields: Field names to compare.

    Returns:
        dict: field name -> {"old": ..., "new": ...} holding the original,
        un-normalized values.
    """
    changes: ChangedFields = {}

    for field in tracked_fields:
        old_value = old_record.get(field)
        new_value = new_record.get(field)

        if normalize_value(old_value) != normalize_value(new_value):
            changes[field] = {"old": old_value, "new": new_value}

    return changes


def creation_fields(record: Mapping[str, Any], tracked_fields: Iterable[str] = DEFAULT_TRACKED_FIELDS) -> ChangedFields:
    """Describe a freshly written record as a diff against an empty one."""
    return get_changed_fields({}, record, tracked_fields)


def format_field_name(field_name: str) -> str:
    """Human label for a profile column."""
    if field_name in FIELD_LABELS:
        return FIELD_LABELS[field_name]
    return field_name.replace("_", " ").title()


def format_field_value(value: Any, field_name: str) -> str:
    """Render a stored value the way the change timeline shows it."""
    if value is None:
        return "Not set"

    if isinstance(value, bool):
        return "Yes" if value else "No"

    if isinstance(value, list):
        if not value:
            return "None"
        return ", ".join(item if isinstance(item, str) else _canonical(item) for item in value)

    if field_name == "date_of_birth":
        if isinstance(value, (date, datetime)):
            return value.strftime("%d %b %Y")
        try:
            return date.fromisoformat(str(value)[:10]).strftime("%d %b %Y")
        except ValueError:
            return str(value)

    if isinstance(value, Mapping):
        return _canonical(value)

    return str(value)
