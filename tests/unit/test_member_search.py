"""Unit tests for member search and privacy masking."""

import pytest

from src.models.profile import UserRole
from src.services.member_search import (
    MemberSearchService,
    filter_members,
    is_listed,
    mask_private_fields,
    matches_term,
)
from tests.fakes import FakeSupabase
from tests.helpers import make_ctx, make_profile


class TestMaskPrivateFields:
    """Tests for mask_private_fields."""

    def test_hides_contact_and_location_when_not_shared(self) -> None:
        """Each flag controls its own group of fields."""
        profile = make_profile(show_contact_info=False, show_location=False)

        masked = mask_private_fields(profile)

        assert masked["email"] is None
        assert masked["phone"] is None
        assert masked["country_code"] is None
        assert masked["address"] is None
        assert masked["city"] is None
        assert masked["country"] is None
        assert masked["organization"] == "Acme Analytics"
        assert profile["email"] == "asha@example.com"

    def test_keeps_shared_fields(self) -> None:
        """Shared groups are returned as stored."""
        masked = mask_private_fields(make_profile(show_contact_info=True, show_location=True))

        assert masked["email"] == "asha@example.com"
        assert masked["city"] == "Bengaluru"

    def test_admin_sees_everything(self) -> None:
        """Admins are never masked."""
        masked = mask_private_fields(make_profile(show_contact_info=False), viewer_is_admin=True)

        assert masked["phone"] == "+91 98765 43210"


class TestMatchesTerm:
    """Tests for matches_term."""

    @pytest.mark.parametrize("term", ["asha", "VERMA", "asha verma", "acme", "PYTHON", "hiking", "2014", "pgp"])
    def test_matches_public_fields(self, term: str) -> None:
        """Name, organization, tags, program and year are searchable."""
        assert matches_term(make_profile(), term)

    def test_matches_organization_history(self) -> None:
        """Past organizations are searchable by name."""
        profile = make_profile(organizations=[{"name": "Initech", "position": "Analyst"}])

        assert matches_term(profile, "initech")

    def test_hidden_contact_is_not_searchable(self) -> None:
        """Members cannot find someone by an email they chose to hide."""
        profile = make_profile(show_contact_info=False)

        assert not matches_term(profile, "asha@example.com")
        assert matches_term(profile, "asha@example.com", viewer_is_admin=True)
        assert matches_term(dict(profile, show_contact_info=True), "asha@example.com")

    def test_hidden_location_is_not_searchable(self) -> None:
        """City is only searchable when the member shows their location."""
        assert matches_term(make_profile(show_location=True), "bengaluru")
        assert not matches_term(make_profile(show_location=False), "bengaluru")

    def test_blank_term_matches_everything(self) -> None:
        """Whitespace-only terms match."""
        assert matches_term(make_profile(), "   ")


class TestFilterMembers:
    """Tests for filter_members."""

    def test_combines_term_and_filters_preserving_order(self) -> None:
        """Term and exact filters all apply, in input order."""
        members = [
            make_profile(first_name="Zara", experience_level="Executive"),
            make_profile(first_name="Arun", experience_level="Executive", organization_type="Finance"),
            make_profile(first_name="Bela", experience_level="Student"),
        ]

        result = filter_members(members, term="a", experience_level="Executive")
        finance = filter_members(members, organization_type="Finance")

        assert [m["first_name"] for m in result] == ["Zara", "Arun"]
        assert [m["first_name"] for m in finance] == ["Arun"]

    def test_no_criteria_returns_all(self) -> None:
        """Without criteria every member is returned."""
        members = [make_profile(), make_profile()]

        assert filter_members(members) == members


def test_is_listed() -> None:
    """Only approved public profiles are listed."""
    assert is_listed(make_profile())
    assert not is_listed(make_profile(is_public=False))
    assert not is_listed(make_profile(approval_status="pending"))


class TestMemberSearchService:
    """Tests for MemberSearchService.search."""

    @pytest.mark.asyncio
    async def test_search_excludes_caller_and_unlisted(self, fake_db: FakeSupabase) -> None:
        """The caller, private and unapproved profiles never appear."""
        me = fake_db.seed("profiles", make_profile(first_name="Me"))
        visible = fake_db.seed("profiles", make_profile(first_name="Kiran"))
        fake_db.seed("profiles", make_profile(first_name="Hidden", is_public=False))
        fake_db.seed("profiles", make_profile(first_name="Waiting", approval_status="pending"))
        fake_db.seed("user_directory", {"user_id": me["user_id"], "member_id": visible["user_id"]})

        result = await MemberSearchService().search(make_ctx(user_id=me["user_id"]))

        assert [m["first_name"] for m in result["members"]] == ["Kiran"]
        assert result["total"] == 1
        assert result["count"] == 1
        assert result["saved_member_ids"] == [visible["user_id"]]
        assert result["members"][0]["email"] is None

    @pytest.mark.asyncio
    async def test_search_orders_by_first_name_and_counts(self, fake_db: FakeSupabase) -> None:
        """Results are alphabetical; total counts before the term filter."""
        for name in ("Zoya", "Anil", "Anika"):
            fake_db.seed("profiles", make_profile(first_name=name, last_name="K"))

        result = await MemberSearchService().search(make_ctx(role=UserRole.ADMIN), term="ani")

        assert [m["first_name"] for m in result["members"]] == ["Anika", "Anil"]
        assert result["total"] == 3
        assert result["count"] == 2
        assert result["members"][0]["email"] == "asha@example.com"
