"""Unit tests for ChangeHistoryService."""

from uuid import UUID

import pytest

from src.api.middleware.error_handler import AuthorizationError
from src.models.change import ChangeType
from src.models.profile import UserRole
from src.services.change_history_service import ChangeHistoryService
from tests.fakes import FakeSupabase
from tests.helpers import make_ctx

SUBJECT = UUID("11111111-1111-1111-1111-111111111111")
ACTOR = UUID("22222222-2222-2222-2222-222222222222")


@pytest.fixture
def history(fake_db: FakeSupabase) -> ChangeHistoryService:
    """Create ChangeHistoryService on the in-memory database."""
    return ChangeHistoryService()


class TestRecordChange:
    """Tests for record_change method."""

    @pytest.mark.asyncio
    async def test_calls_rpc_with_entry(self, history: ChangeHistoryService, fake_db: FakeSupabase) -> None:
        """The entry is written through add_profile_change."""
        fields = {"bio": {"old": None, "new": "hi"}}

        await history.record_change(SUBJECT, ACTOR, "Admin One", fields, ChangeType.ADMIN_EDIT)

        assert fake_db.rpc_calls == [
            (
                "add_profile_change",
                {
                    "profile_user_id": str(SUBJECT),
                    "changed_by": str(ACTOR),
                    "changed_by_name": "Admin One",
                    "changed_fields": fields,
                    "change_type": "admin_edit",
                },
            )
        ]

    @pytest.mark.asyncio
    async def test_failure_is_swallowed(self, history: ChangeHistoryService, fake_db: FakeSupabase) -> None:
        """A failing log write never propagates."""
        fake_db.failing_rpcs.add("add_profile_change")

        await history.record_change(SUBJECT, ACTOR, "Admin One", {"bio": {"old": "a", "new": "b"}})

        assert fake_db.tables["profile_changes"] == []


class TestGetChanges:
    """Tests for get_changes method."""

    @pytest.mark.asyncio
    async def test_owner_reads_newest_first(self, history: ChangeHistoryService) -> None:
        """Entries come back in reverse chronological order."""
        await history.record_change(SUBJECT, SUBJECT, "Asha", {"bio": {"old": None, "new": "a"}}, ChangeType.CREATE)
        await history.record_change(SUBJECT, ACTOR, "Admin", {"bio": {"old": "a", "new": "b"}}, ChangeType.ADMIN_EDIT)

        entries = await history.get_changes(make_ctx(user_id=SUBJECT), SUBJECT)

        assert [entry["change_type"] for entry in entries] == ["admin_edit", "create"]

    @pytest.mark.asyncio
    async def test_admin_can_read_any_history(self, history: ChangeHistoryService) -> None:
        """Admins see other members' history."""
        await history.record_change(SUBJECT, SUBJECT, "Asha", {"bio": {"old": None, "new": "a"}})

        entries = await history.get_changes(make_ctx(role=UserRole.ADMIN), SUBJECT)

        assert len(entries) == 1

    @pytest.mark.asyncio
    async def test_other_members_are_refused(self, history: ChangeHistoryService) -> None:
        """Members cannot read someone else's history."""
        with pytest.raises(AuthorizationError):
            await history.get_changes(make_ctx(), SUBJECT)
