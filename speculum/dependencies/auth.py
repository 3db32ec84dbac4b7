from typing import Optional

from fastapi import HTTPException, Request, status

from speculum.services.auth_service import AUTH_COOKIE_NAME, verify_access_token


def get_current_admin_optional(request: Request) -> Optional[str]:
    """Return the admin username if the auth cookie is valid, None otherwise."""
    token = request.cookies.get(AUTH_COOKIE_NAME)
    if not token:
        return None
    return verify_access_token(token)


def require_admin(request: Request) -> str:
    """
    Dependency for admin-only endpoints.

    Raises:
        HTTPException: 401 if no valid admin session exists
    """
    username = get_current_admin_optional(request)
    if username is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
        )
    return username
