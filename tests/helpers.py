"""Shared test helpers: signing key, tokens and row/context builders.

Importing this module configures the test environment, so it must be
imported before any application module.
"""

import json
import os
import time
import uuid
from typing import Any

import jwt
from cryptography.hazmat.primitives.asymmetric import ec
from jwt.algorithms import ECAlgorithm

# Signing key pair for test tokens; the public half is what the API trusts.
TEST_PRIVATE_KEY = ec.generate_private_key(ec.SECP256R1())
_public_jwk = json.loads(ECAlgorithm.to_jwk(TEST_PRIVATE_KEY.public_key()))
_public_jwk["alg"] = "ES256"
TEST_SIGNING_KEY_JWK = json.dumps(_public_jwk)

# Set test environment variables before importing application modules
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_SECRET_KEY", "test-secret-key")
os.environ["SUPABASE_SIGNING_KEY_JWK"] = TEST_SIGNING_KEY_JWK
os.environ.setdefault("RESEND_API_KEY", "re_test_key")
os.environ.setdefault("ADMIN_NOTIFICATION_EMAIL", "admin@test.example.org")
os.environ.setdefault("SUPPORT_EMAIL", "support@test.example.org")

from src.models.profile import ApprovalStatus, UserRole  # noqa: E402
from src.services.access_service import RequestContext  # noqa: E402

SERVICE_MODULES = (
    "src.services.access_service",
    "src.services.auth_service",
    "src.services.change_history_service",
    "src.services.directory_service",
    "src.services.lookup_service",
    "src.services.member_search",
    "src.services.profile_service",
    "src.services.update_request_service",
)


def make_token(
    sub: str | uuid.UUID = "550e8400-e29b-41d4-a716-446655440000",
    email: str | None = "test@example.com",
    exp_offset: int = 3600,
    audience: str = "authenticated",
    private_key: Any = None,
    **extra: Any,
) -> str:
    """Create an ES256 access token shaped like a Supabase one."""
    now = int(time.time())
    payload = {
        "sub": str(sub),
        "email": email,
        "role": "authenticated",
        "exp": now + exp_offset,
        "iat": now,
        "aud": audience,
        "iss": "https://test-project.supabase.co/auth/v1",
        **extra,
    }
    return jwt.encode(payload, private_key or TEST_PRIVATE_KEY, algorithm="ES256")


def make_profile(**overrides: Any) -> dict[str, Any]:
    """A fully registered, approved and public profile row."""
    profile = {
        "user_id": str(uuid.uuid4()),
        "first_name": "Asha",
        "last_name": "Verma",
        "email": "asha@example.com",
        "phone": "+91 98765 43210",
        "country_code": "+91",
        "address": "12 MG Road",
        "date_of_birth": "1990-04-12",
        "city": "Bengaluru",
        "country": "India",
        "organization": "Acme Analytics",
        "organizations": [{"name": "Acme Analytics", "position": "Lead", "is_current": True}],
        "position": "Data Lead",
        "program": "PGP",
        "experience_level": "Senior Level",
        "organization_type": "Technology",
        "graduation_year": 2014,
        "bio": "Builds data teams.",
        "interests": ["mentoring", "hiking"],
        "skills": ["python", "sql"],
        "linkedin_url": "https://linkedin.com/in/asha",
        "website_url": None,
        "avatar_url": None,
        "is_public": True,
        "show_contact_info": False,
        "show_location": True,
        "approval_status": ApprovalStatus.APPROVED.value,
        "rejection_reason": None,
    }
    profile.update(overrides)
    return profile


def make_ctx(
    user_id: str | uuid.UUID | None = None,
    role: UserRole = UserRole.NORMAL_USER,
    approval_status: ApprovalStatus | None = ApprovalStatus.APPROVED,
    display_name: str = "Test User",
    email: str | None = "test@example.com",
) -> RequestContext:
    """Build a request context without touching the database."""
    return RequestContext(
        user_id=uuid.UUID(str(user_id)) if user_id else uuid.uuid4(),
        email=email,
        role=role,
        display_name=display_name,
        approval_status=approval_status,
    )

