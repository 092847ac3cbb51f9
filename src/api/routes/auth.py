"""Authentication API routes."""

from fastapi import APIRouter, status

from src.schemas.auth import SignupRequest, SignupResponse
from src.services.auth_service import AuthService

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post(
    "/signup",
    response_model=SignupResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Sign up new user",
    description=(
        "Create a new account with email and password. The member then completes "
        "registration and waits for admin approval."
    ),
)
async def signup(data: SignupRequest) -> SignupResponse:
    """Sign up a new user with email and password.

    Args:
        data: Email, password, first and last name.

    Returns:
        SignupResponse: User ID, email, and confirmation email status.

    Raises:
        AlreadyExistsError: 409 if the email is already registered.
        ValidationError: 422 for other sign-up failures.
    """
    service = AuthService()
    result = await service.signup(
        email=data.email,
        password=data.password,
        first_name=data.first_name,
        last_name=data.last_name,
    )
    return SignupResponse(**result)
