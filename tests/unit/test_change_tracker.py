"""Unit tests for the profile change diff."""

from datetime import date

import pytest

from src.services.change_tracker import (
    DEFAULT_TRACKED_FIELDS,
    creation_fields,
    format_field_name,
    format_field_value,
    get_changed_fields,
    normalize_value,
)
from tests.helpers import make_profile


class TestGetChangedFields:
    """Tests for get_changed_fields."""

    def test_identical_records_have_no_changes(self) -> None:
        """diff(A, A) is empty."""
        profile = make_profile()

        assert get_changed_fields(profile, dict(profile)) == {}

    def test_skill_order_is_ignored(self) -> None:
        """Reordering a list of primitives is not a change."""
        assert get_changed_fields({"skills": ["a", "b"]}, {"skills": ["b", "a"]}) == {}

    def test_none_to_value_is_reported_with_original_values(self) -> None:
        """A field going from None to text is reported with both values."""
        assert get_changed_fields({"bio": None}, {"bio": "hi"}) == {"bio": {"old": None, "new": "hi"}}

    def test_missing_field_counts_as_none(self) -> None:
        """Absent and None are the same value."""
        assert get_changed_fields({}, {"bio": None}) == {}
        assert get_changed_fields({}, {"bio": "x"}) == {"bio": {"old": None, "new": "x"}}

    def test_none_and_empty_list_are_distinct(self) -> None:
        """Clearing skills to [] from None is a change."""
        assert get_changed_fields({"skills": None}, {"skills": []}) == {"skills": {"old": None, "new": []}}

    def test_nested_objects_compare_by_content(self) -> None:
        """Key order inside objects and object order in lists are ignored."""
        old = {
            "organizations": [
                {"name": "Acme", "position": "Lead", "is_current": True},
                {"name": "Beta", "position": "Analyst", "is_current": False},
            ]
        }
        new = {
            "organizations": [
                {"is_current": False, "position": "Analyst", "name": "Beta"},
                {"position": "Lead", "is_current": True, "name": "Acme"},
            ]
        }

        assert get_changed_fields(old, new) == {}

    def test_nested_object_value_change_is_detected(self) -> None:
        """Changing a value inside an organizations entry is reported."""
        old = {"organizations": [{"name": "Acme", "position": "Lead"}]}
        new = {"organizations": [{"name": "Acme", "position": "Director"}]}

        changes = get_changed_fields(old, new)

        assert list(changes) == ["organizations"]
        assert changes["organizations"]["new"] == new["organizations"]

    def test_reordering_yields_same_diff(self) -> None:
        """Permuting list fields on either side does not change the diff."""
        old = make_profile(skills=["python", "sql", "go"], bio="old")
        new = make_profile(user_id=old["user_id"], skills=["rust"], bio="new")
        reordered = dict(old, skills=["go", "python", "sql"])

        assert get_changed_fields(old, new).keys() == get_changed_fields(reordered, new).keys()

    @pytest.mark.parametrize(
        "old,new",
        [
            ({"bio": "a", "city": "Pune"}, {"bio": "b", "city": "Pune"}),
            ({"skills": ["x"]}, {"skills": ["x", "y"], "phone": "1"}),
            ({"is_public": True}, {"is_public": False, "interests": []}),
        ],
    )
    def test_changed_field_set_is_symmetric(self, old: dict, new: dict) -> None:
        """diff(A, B) and diff(B, A) name the same fields."""
        assert get_changed_fields(old, new).keys() == get_changed_fields(new, old).keys()

    def test_untracked_fields_are_ignored(self) -> None:
        """Only the requested fields are compared."""
        changes = get_changed_fields({"bio": "a", "city": "x"}, {"bio": "b", "city": "y"}, ("city",))

        assert list(changes) == ["city"]

    def test_numbers_and_strings_in_lists_compare_by_string_form(self) -> None:
        """List elements are compared by their string forms."""
        assert get_changed_fields({"interests": [1, 2]}, {"interests": ["2", "1"]}) == {}


class TestNormalizeValue:
    """Tests for normalize_value."""

    def test_mapping_keys_are_sorted_recursively(self) -> None:
        """Nested mappings come back with sorted keys."""
        value = normalize_value({"b": {"d": 1, "c": 2}, "a": 0})

        assert list(value) == ["a", "b"]
        assert list(value["b"]) == ["c", "d"]

    def test_scalars_pass_through(self) -> None:
        """Scalars and None are unchanged."""
        assert normalize_value(None) is None
        assert normalize_value(5) == 5
        assert normalize_value("x") == "x"


class TestCreationFields:
    """Tests for creation_fields."""

    def test_reports_only_set_fields(self) -> None:
        """A new record's diff has every non-None tracked field and nothing else."""
        changes = creation_fields({"first_name": "Asha", "bio": None, "user_id": "ignored"})

        assert changes == {"first_name": {"old": None, "new": "Asha"}}

    def test_default_fields_cover_moderation_columns(self) -> None:
        """Approval changes are tracked by default."""
        assert "approval_status" in DEFAULT_TRACKED_FIELDS
        assert "rejection_reason" in DEFAULT_TRACKED_FIELDS


class TestFormatting:
    """Tests for the display helpers."""

    def test_format_field_name_uses_labels(self) -> None:
        """Known fields get their label, others are title-cased."""
        assert format_field_name("linkedin_url") == "LinkedIn URL"
        assert format_field_name("some_new_field") == "Some New Field"

    @pytest.mark.parametrize(
        "value,field,expected",
        [
            (None, "bio", "Not set"),
            (True, "is_public", "Yes"),
            (False, "show_location", "No"),
            ([], "skills", "None"),
            (["python", "sql"], "skills", "python, sql"),
            ("1990-04-12", "date_of_birth", "12 Apr 1990"),
            (date(2001, 1, 5), "date_of_birth", "05 Jan 2001"),
            ("not a date", "date_of_birth", "not a date"),
            (2014, "graduation_year", "2014"),
        ],
    )
    def test_format_field_value(self, value: object, field: str, expected: str) -> None:
        """Values render the way the change timeline shows them."""
        assert format_field_value(value, field) == expected
