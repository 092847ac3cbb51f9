"""FastAPI dependency injection functions."""

from typing import Annotated

from fastapi import Depends, Header, HTTPException, status

from src.api.middleware.auth import AuthError, AuthErrorCode, decode_jwt
from src.api.middleware.error_handler import AuthorizationError
from src.schemas.auth import UserContext
from src.services.access_service import AccessService, RequestContext


async def get_current_user(
    authorization: Annotated[str, Header(description="Bearer token")] = "",
) -> UserContext:
    """Extract and validate the current user from the Authorization header.

    Args:
        authorization: The Authorization header value (Bearer token).

    Returns:
        UserContext: The authenticated user's identity.

    Raises:
        HTTPException: 401 if token is missing, invalid, or expired.
    """
    if not authorization:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authorization header required",
            headers={"WWW-Authenticate": "Bearer"},
        )

    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authorization header format. Expected: Bearer <token>",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        return decode_jwt(parts[1]).to_user_context()

    except AuthError as e:
        detail = "Token has expired" if e.code == AuthErrorCode.TOKEN_EXPIRED else e.message
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        ) from e


CurrentUser = Annotated[UserContext, Depends(get_current_user)]


async def get_request_context(user: CurrentUser) -> RequestContext:
    """Resolve role and display name for the authenticated caller.

    Args:
        user: Identity from the access token.

    Returns:
        RequestContext: Request-scoped context handed to services.
    """
    return await AccessService().resolve_context(user)


Context = Annotated[RequestContext, Depends(get_request_context)]


async def require_admin(ctx: Context) -> RequestContext:
    """Allow the request only when the caller is an administrator.

    Raises:
        AuthorizationError: 403 for non-admin callers.
    """
    if not ctx.is_admin:
        raise AuthorizationError("Admin access required")
    return ctx


AdminContext = Annotated[RequestContext, Depends(require_admin)]


async def require_approved(ctx: Context) -> RequestContext:
    """Allow the request only once the caller's registration is approved.

    Administrators pass regardless of their own profile status.

    Raises:
        AuthorizationError: 403 for pending, rejected or unregistered callers.
    """
    if not ctx.is_admin and not ctx.is_approved:
        raise AuthorizationError("Registration approval required")
    return ctx


ApprovedContext = Annotated[RequestContext, Depends(require_approved)]
