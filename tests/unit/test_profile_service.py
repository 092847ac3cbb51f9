"""Unit tests for ProfileService."""

from unittest.mock import MagicMock
from uuid import UUID

import pytest

from src.api.middleware.error_handler import AuthorizationError, NotFoundError, ValidationError
from src.models.profile import ApprovalStatus, UserRole
from src.schemas.profile import ProfilePatch, RegistrationRequest
from src.services.profile_service import ProfileService
from tests.fakes import FakeSupabase
from tests.helpers import make_ctx, make_profile


@pytest.fixture
def profile_service(fake_db: FakeSupabase) -> ProfileService:
    """Create ProfileService on the in-memory database."""
    return ProfileService()


@pytest.fixture
def admin():
    """Administrator context."""
    return make_ctx(role=UserRole.ADMIN, display_name="Admin One")


def _patch(**groups: dict) -> ProfilePatch:
    return ProfilePatch.model_validate(
        {"sections": [{"group": name, **fields} for name, fields in groups.items()]}
    )


class TestGetMemberProfile:
    """Tests for get_member_profile method."""

    @pytest.mark.asyncio
    async def test_masks_hidden_fields_for_other_members(
        self, profile_service: ProfileService, fake_db: FakeSupabase
    ) -> None:
        """Other members see contact data only when the owner shares it."""
        profile = fake_db.seed("profiles", make_profile(show_contact_info=False, show_location=False))

        result = await profile_service.get_member_profile(make_ctx(), UUID(profile["user_id"]))

        assert result["email"] is None
        assert result["phone"] is None
        assert result["city"] is None
        assert result["first_name"] == "Asha"

    @pytest.mark.asyncio
    async def test_owner_and_admin_see_everything(
        self, profile_service: ProfileService, fake_db: FakeSupabase, admin
    ) -> None:
        """The owner and admins get the unmasked record, even when private."""
        profile = fake_db.seed("profiles", make_profile(is_public=False, show_contact_info=False))

        own = await profile_service.get_member_profile(make_ctx(user_id=profile["user_id"]), UUID(profile["user_id"]))
        as_admin = await profile_service.get_member_profile(admin, UUID(profile["user_id"]))

        assert own["email"] == "asha@example.com"
        assert as_admin["email"] == "asha@example.com"

    @pytest.mark.asyncio
    async def test_unlisted_profile_is_not_found(
        self, profile_service: ProfileService, fake_db: FakeSupabase
    ) -> None:
        """Pending profiles are invisible to other members."""
        profile = fake_db.seed("profiles", make_profile(approval_status="pending"))

        with pytest.raises(NotFoundError):
            await profile_service.get_member_profile(make_ctx(), UUID(profile["user_id"]))


class TestCompleteRegistration:
    """Tests for complete_registration method."""

    @pytest.mark.asyncio
    async def test_creates_pending_profile_and_notifies_admins(
        self, profile_service: ProfileService, fake_db: FakeSupabase, sent_emails: MagicMock
    ) -> None:
        """A first registration inserts the profile, logs a create entry and emails the admins."""
        ctx = make_ctx(approval_status=None, email="new@example.com")
        data = RegistrationRequest.model_validate(
            {
                "contact": {"first_name": "Meera", "last_name": "Rao", "city": "Pune"},
                "about": {"skills": [" python ", "python", "go"]},
            }
        )

        profile = await profile_service.complete_registration(ctx, data)

        assert profile["approval_status"] == "pending"
        assert profile["email"] == "new@example.com"
        assert profile["skills"] == ["python", "go"]
        assert fake_db.profile(ctx.user_id) is not None

        [entry] = fake_db.tables["profile_changes"]
        assert entry["change_type"] == "create"
        assert entry["changed_by_name"] == "Meera Rao"
        assert entry["changed_fields"]["first_name"] == {"old": None, "new": "Meera"}

        params = sent_emails.call_args.args[0]
        assert params["to"] == ["admin@test.example.org"]
        assert "Meera" in params["html"]

    @pytest.mark.asyncio
    async def test_resubmission_after_rejection_clears_reason(
        self, profile_service: ProfileService, fake_db: FakeSupabase
    ) -> None:
        """Re-registering updates the existing row and returns it to pending."""
        existing = fake_db.seed(
            "profiles", make_profile(approval_status="rejected", rejection_reason="Missing program")
        )
        ctx = make_ctx(user_id=existing["user_id"], approval_status=ApprovalStatus.REJECTED)
        data = RegistrationRequest.model_validate(
            {"contact": {"first_name": "Asha", "last_name": "Verma"}, "professional": {"program": "PGP-MBA"}}
        )

        profile = await profile_service.complete_registration(ctx, data)

        assert profile["approval_status"] == "pending"
        assert profile["rejection_reason"] is None
        assert profile["program"] == "PGP-MBA"
        assert len(fake_db.tables["profiles"]) == 1

    @pytest.mark.asyncio
    async def test_approved_profile_cannot_reregister(
        self, profile_service: ProfileService, fake_db: FakeSupabase
    ) -> None:
        """Approved members edit their profile instead."""
        existing = fake_db.seed("profiles", make_profile())
        data = RegistrationRequest.model_validate({"contact": {"first_name": "A", "last_name": "B"}})

        with pytest.raises(ValidationError):
            await profile_service.complete_registration(make_ctx(user_id=existing["user_id"]), data)


class TestUpdateOwnProfile:
    """Tests for update_own_profile method."""

    @pytest.mark.asyncio
    async def test_approved_member_gets_update_request(
        self, profile_service: ProfileService, fake_db: FakeSupabase
    ) -> None:
        """Approved members' edits are queued with only the changed fields."""
        existing = fake_db.seed("profiles", make_profile())
        ctx = make_ctx(user_id=existing["user_id"])

        result = await profile_service.update_own_profile(
            ctx, _patch(about={"bio": "New bio", "skills": ["sql", "python"]})
        )

        assert result["applied"] is False
        assert result["changed_fields"] == ["bio"]
        [request] = fake_db.tables["profile_update_requests"]
        assert request["submitted_payload"] == {"bio": "New bio"}
        assert result["update_request_id"] == request["id"]
        assert fake_db.profile(existing["user_id"])["bio"] == "Builds data teams."

    @pytest.mark.asyncio
    async def test_admin_writes_directly(
        self, profile_service: ProfileService, fake_db: FakeSupabase
    ) -> None:
        """Admins editing themselves skip moderation."""
        existing = fake_db.seed("profiles", make_profile())
        ctx = make_ctx(user_id=existing["user_id"], role=UserRole.ADMIN)

        result = await profile_service.update_own_profile(ctx, _patch(privacy={"show_location": False}))

        assert result["applied"] is True
        assert fake_db.profile(existing["user_id"])["show_location"] is False
        assert fake_db.tables["profile_changes"][0]["change_type"] == "admin_edit"
        assert fake_db.tables["profile_update_requests"] == []

    @pytest.mark.asyncio
    async def test_pending_member_writes_and_stays_pending(
        self, profile_service: ProfileService, fake_db: FakeSupabase
    ) -> None:
        """Unapproved members edit directly and remain queued for approval."""
        existing = fake_db.seed("profiles", make_profile(approval_status="rejected", rejection_reason="x"))
        ctx = make_ctx(user_id=existing["user_id"], approval_status=ApprovalStatus.REJECTED)

        result = await profile_service.update_own_profile(ctx, _patch(contact={"city": "Chennai"}))

        profile = fake_db.profile(existing["user_id"])
        assert result["applied"] is True
        assert profile["city"] == "Chennai"
        assert profile["approval_status"] == "pending"
        assert set(result["changed_fields"]) == {"city", "approval_status", "rejection_reason"}

    @pytest.mark.asyncio
    async def test_no_change_does_nothing(
        self, profile_service: ProfileService, fake_db: FakeSupabase
    ) -> None:
        """Submitting current values creates no request and no entry."""
        existing = fake_db.seed("profiles", make_profile())
        ctx = make_ctx(user_id=existing["user_id"])

        result = await profile_service.update_own_profile(ctx, _patch(contact={"city": "Bengaluru"}))

        assert result["applied"] is False
        assert result["update_request_id"] is None
        assert fake_db.tables["profile_update_requests"] == []
        assert fake_db.tables["profile_changes"] == []

    @pytest.mark.asyncio
    async def test_resending_stored_url_does_nothing(
        self, profile_service: ProfileService, fake_db: FakeSupabase
    ) -> None:
        """A link sent back exactly as stored is not a change."""
        existing = fake_db.seed("profiles", make_profile(website_url="https://example.com"))
        ctx = make_ctx(user_id=existing["user_id"])

        result = await profile_service.update_own_profile(
            ctx, _patch(about={"website_url": "https://example.com", "linkedin_url": existing["linkedin_url"]})
        )

        assert result["changed_fields"] == []
        assert result["update_request_id"] is None
        assert fake_db.tables["profile_update_requests"] == []
        assert fake_db.tables["profile_changes"] == []


class TestModeration:
    """Tests for admin edit, approval and rejection."""

    @pytest.mark.asyncio
    async def test_admin_update_records_admin_edit(
        self, profile_service: ProfileService, fake_db: FakeSupabase, admin
    ) -> None:
        """Admin edits land immediately and are attributed to the admin."""
        existing = fake_db.seed("profiles", make_profile())

        profile = await profile_service.admin_update_profile(
            admin, UUID(existing["user_id"]), _patch(professional={"position": "CTO"})
        )

        assert profile["position"] == "CTO"
        [entry] = fake_db.tables["profile_changes"]
        assert entry["change_type"] == "admin_edit"
        assert entry["changed_by"] == str(admin.user_id)
        assert entry["changed_fields"] == {"position": {"old": "Data Lead", "new": "CTO"}}

    @pytest.mark.asyncio
    async def test_admin_update_requires_admin(
        self, profile_service: ProfileService, fake_db: FakeSupabase
    ) -> None:
        """Members cannot edit other profiles."""
        existing = fake_db.seed("profiles", make_profile())

        with pytest.raises(AuthorizationError):
            await profile_service.admin_update_profile(
                make_ctx(), UUID(existing["user_id"]), _patch(professional={"position": "CTO"})
            )

    @pytest.mark.asyncio
    async def test_approve_registration_sends_email(
        self, profile_service: ProfileService, fake_db: FakeSupabase, sent_emails: MagicMock, admin
    ) -> None:
        """Approval flips the status, logs it and emails the member."""
        existing = fake_db.seed("profiles", make_profile(approval_status="pending"))

        profile = await profile_service.approve_registration(admin, UUID(existing["user_id"]))

        assert profile["approval_status"] == "approved"
        entry = fake_db.tables["profile_changes"][0]
        assert entry["change_type"] == "approve"
        assert entry["changed_fields"]["approval_status"] == {"old": "pending", "new": "approved"}
        params = sent_emails.call_args.args[0]
        assert params["to"] == ["asha@example.com"]
        assert "Approved" in params["subject"]

    @pytest.mark.asyncio
    async def test_approve_twice_is_rejected(
        self, profile_service: ProfileService, fake_db: FakeSupabase, admin
    ) -> None:
        """An approved profile cannot be approved again."""
        existing = fake_db.seed("profiles", make_profile())

        with pytest.raises(ValidationError):
            await profile_service.approve_registration(admin, UUID(existing["user_id"]))

    @pytest.mark.asyncio
    async def test_reject_registration_requires_reason(
        self, profile_service: ProfileService, fake_db: FakeSupabase, admin
    ) -> None:
        """A blank reason is refused before anything is written."""
        existing = fake_db.seed("profiles", make_profile(approval_status="pending"))

        with pytest.raises(ValidationError):
            await profile_service.reject_registration(admin, UUID(existing["user_id"]), "   ")

        assert fake_db.rpc_calls == []

    @pytest.mark.asyncio
    async def test_reject_registration_stores_reason_and_emails(
        self, profile_service: ProfileService, fake_db: FakeSupabase, sent_emails: MagicMock, admin
    ) -> None:
        """Rejection stores the reason, logs it and includes it in the email."""
        existing = fake_db.seed("profiles", make_profile(approval_status="pending"))

        profile = await profile_service.reject_registration(
            admin, UUID(existing["user_id"]), "Please add your program"
        )

        assert profile["approval_status"] == "rejected"
        assert profile["rejection_reason"] == "Please add your program"
        assert fake_db.tables["profile_changes"][0]["change_type"] == "reject"
        assert "Please add your program" in sent_emails.call_args.args[0]["html"]

    @pytest.mark.asyncio
    async def test_email_failure_does_not_undo_approval(
        self, profile_service: ProfileService, fake_db: FakeSupabase, sent_emails: MagicMock, admin
    ) -> None:
        """A mail outage is logged, the approval stands."""
        sent_emails.side_effect = Exception("resend down")
        existing = fake_db.seed("profiles", make_profile(approval_status="pending"))

        profile = await profile_service.approve_registration(admin, UUID(existing["user_id"]))

        assert profile["approval_status"] == "approved"

    @pytest.mark.asyncio
    async def test_stats_and_listing(
        self, profile_service: ProfileService, fake_db: FakeSupabase, admin
    ) -> None:
        """Counts per status and status-filtered listing."""
        fake_db.seed("profiles", make_profile())
        pending = fake_db.seed("profiles", make_profile(approval_status="pending"))
        fake_db.seed("profiles", make_profile(approval_status="rejected"))

        stats = await profile_service.get_stats(admin)
        listed = await profile_service.list_profiles(admin, ApprovalStatus.PENDING)

        assert stats == {"pending": 1, "approved": 1, "rejected": 1, "total": 3}
        assert [row["user_id"] for row in listed] == [pending["user_id"]]


class TestUploadAvatar:
    """Tests for upload_avatar method."""

    @pytest.mark.asyncio
    async def test_stores_file_and_updates_profile(
        self, profile_service: ProfileService, fake_db: FakeSupabase
    ) -> None:
        """The image lands at {user_id}/avatar.{ext} and the profile points at it."""
        existing = fake_db.seed("profiles", make_profile())
        ctx = make_ctx(user_id=existing["user_id"])

        profile = await profile_service.upload_avatar(ctx, b"\x89PNG...", "image/png")

        path = f"{existing['user_id']}/avatar.png"
        assert fake_db.files["profile-pictures"][path] == b"\x89PNG..."
        assert profile["avatar_url"].endswith(f"/profile-pictures/{path}")
        assert fake_db.tables["profile_changes"][0]["changed_fields"]["avatar_url"]["old"] is None

    @pytest.mark.asyncio
    async def test_replacing_with_other_type_removes_old_file(
        self, profile_service: ProfileService, fake_db: FakeSupabase
    ) -> None:
        """Switching from png to jpeg deletes the png."""
        existing = fake_db.seed("profiles", make_profile())
        ctx = make_ctx(user_id=existing["user_id"])

        await profile_service.upload_avatar(ctx, b"png", "image/png")
        await profile_service.upload_avatar(ctx, b"jpg", "image/jpeg")

        assert list(fake_db.files["profile-pictures"]) == [f"{existing['user_id']}/avatar.jpg"]

    @pytest.mark.asyncio
    async def test_rejects_non_image(self, profile_service: ProfileService, fake_db: FakeSupabase) -> None:
        """Only image types are accepted."""
        existing = fake_db.seed("profiles", make_profile())

        with pytest.raises(ValidationError) as exc_info:
            await profile_service.upload_avatar(make_ctx(user_id=existing["user_id"]), b"%PDF", "application/pdf")

        assert exc_info.value.details[0]["loc"] == ["file"]

    @pytest.mark.asyncio
    async def test_rejects_empty_and_oversized(
        self, profile_service: ProfileService, fake_db: FakeSupabase
    ) -> None:
        """Empty files and files over the limit are refused."""
        existing = fake_db.seed("profiles", make_profile())
        ctx = make_ctx(user_id=existing["user_id"])
        too_big = b"x" * (profile_service.settings.avatar_max_bytes + 1)

        with pytest.raises(ValidationError):
            await profile_service.upload_avatar(ctx, b"", "image/png")
        with pytest.raises(ValidationError):
            await profile_service.upload_avatar(ctx, too_big, "image/png")

        assert fake_db.files["profile-pictures"] == {}
