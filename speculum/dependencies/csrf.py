"""
CSRF Validation Dependency

Validates the double-submit CSRF token on unsafe methods.
"""

import logging
import secrets

from fastapi import HTTPException, Request, status

from speculum.services.csrf_service import (
    CSRF_COOKIE_NAME,
    CSRF_HEADER_NAME,
    verify_csrf_signature,
)

logger = logging.getLogger(__name__)


async def validate_csrf_token(request: Request) -> None:
    """
    Dependency that validates the CSRF token for unsafe methods.

    The token is read from the X-CSRF-Token header (fetch/XHR) or the
    csrf_token form field and must equal the signed cookie.

    Raises:
        HTTPException: 403 if CSRF validation fails

    Usage:
        @router.post("/submit")
        async def submit_form(
            request: Request,
            csrf_protected: None = Depends(validate_csrf_token)
        ):
            ...
    """
    if request.method not in ("POST", "PUT", "DELETE", "PATCH"):
        return

    signed_cookie_token = request.cookies.get(CSRF_COOKIE_NAME)

    request_token = request.headers.get(CSRF_HEADER_NAME)

    if not request_token:
        content_type = request.headers.get("content-type", "")
        if (
            "application/x-www-form-urlencoded" in content_type
            or "multipart/form-data" in content_type
        ):
            form = await request.form()
            token_value = form.get(CSRF_COOKIE_NAME)
            if isinstance(token_value, str):
                request_token = token_value

    if not signed_cookie_token or not verify_csrf_signature(signed_cookie_token):
        logger.warning(
            f"CSRF cookie missing or invalid: {request.method} {request.url.path}"
        )
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="CSRF cookie missing. Please refresh the page.",
        )

    if not request_token:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="CSRF token missing from request.",
        )

    if not secrets.compare_digest(signed_cookie_token, request_token):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN, detail="CSRF token invalid."
        )
