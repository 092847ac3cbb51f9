"""Authentication schemas for JWT tokens, request context and sign-up."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class UserContext(BaseModel):
    """Identity extracted from a validated access token."""

    model_config = ConfigDict(from_attributes=True)

    user_id: UUID = Field(description="Unique identifier for the user (from JWT sub claim)")
    email: str | None = Field(default=None, description="User's email address if available")
    role: str | None = Field(default=None, description="Token role claim (e.g., 'authenticated')")


class TokenPayload(BaseModel):
    """Claims of a Supabase-issued access token."""

    sub: str = Field(description="Subject - the user's UUID")
    email: str | None = Field(default=None, description="User's email address")
    role: str | None = Field(default=None, description="User's role")
    exp: int = Field(description="Expiration timestamp (Unix epoch)")
    iat: int = Field(description="Issued at timestamp (Unix epoch)")
    aud: str | None = Field(default=None, description="Audience - intended recipient")
    iss: str | None = Field(default=None, description="Issuer - token issuer URL")

    @property
    def expiration_datetime(self) -> datetime:
        """Get expiration as datetime object."""
        return datetime.fromtimestamp(self.exp)

    def to_user_context(self) -> UserContext:
        """Convert token claims to a UserContext."""
        return UserContext(
            user_id=UUID(self.sub),
            email=self.email,
            role=self.role,
        )


class SignupRequest(BaseModel):
    """Request schema for user signup."""

    email: EmailStr = Field(..., description="User's email address")
    password: str = Field(..., description="User's password", min_length=6, max_length=100)
    first_name: str = Field(..., min_length=1, max_length=100, description="Given name")
    last_name: str = Field(..., min_length=1, max_length=100, description="Family name")


class SignupResponse(BaseModel):
    """Response schema for user signup."""

    user_id: str = Field(description="Newly created user ID")
    email: str = Field(description="User's email address")
    message: str = Field(description="Success message")
    email_sent: bool = Field(description="Whether a confirmation email was sent")


class AdminCreateUserRequest(BaseModel):
    """Admin-created account. The profile is approved immediately."""

    email: EmailStr = Field(..., description="Email address of the new member")
    password: str = Field(..., min_length=6, max_length=100, description="Initial password")
    first_name: str = Field(..., min_length=1, max_length=100, description="Given name")
    last_name: str = Field(..., min_length=1, max_length=100, description="Family name")


class AdminCreateUserResponse(BaseModel):
    """Created account summary."""

    user_id: str = Field(description="Auth user ID")
    email: str = Field(description="Email address")
    first_name: str = Field(description="Given name")
    last_name: str = Field(description="Family name")
