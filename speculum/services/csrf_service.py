"""
CSRF Protection Service
Implements the double-submit cookie pattern.

The signed token lives in a cookie (7 days). The middleware issues the
cookie; validation happens in the validate_csrf_token dependency.

Templates receive the token through the render context and put it in
forms; scripts fetch it from /api/csrf-token and send it as X-CSRF-Token.
"""

import hashlib
import hmac
import secrets
from contextlib import suppress
from typing import Optional

from fastapi import Request

from speculum.config import settings

CSRF_COOKIE_NAME = "csrf_token"
CSRF_HEADER_NAME = "X-CSRF-Token"
CSRF_COOKIE_MAX_AGE = 60 * 60 * 24 * 7


def generate_csrf_token() -> str:
    """Generate a secure CSRF token."""
    return secrets.token_urlsafe(32)


def sign_csrf_token(token: str) -> str:
    """Sign a CSRF token with the secret key."""
    signature = hmac.new(
        settings.SECRET_KEY.encode(), token.encode(), hashlib.sha256
    ).hexdigest()
    return f"{token}.{signature}"


def verify_csrf_signature(signed_token: str) -> Optional[str]:
    """Verify CSRF token signature and return the token if valid."""
    with suppress(ValueError):
        token, signature = signed_token.rsplit(".", 1)
        expected_signature = hmac.new(
            settings.SECRET_KEY.encode(), token.encode(), hashlib.sha256
        ).hexdigest()
        if hmac.compare_digest(signature, expected_signature):
            return token
    return None


def get_csrf_token(request: Request) -> str:
    """
    Signed CSRF token for the current request.

    Prefers a valid cookie; falls back to the token the middleware is about
    to issue on this response.
    """
    cookie_token = request.cookies.get(CSRF_COOKIE_NAME)
    if cookie_token and verify_csrf_signature(cookie_token):
        return cookie_token
    return getattr(request.state, "csrf_token", "")


class CSRFMiddleware:
    """
    Middleware that issues the CSRF cookie.

    This middleware:
    1. Checks if a validly signed CSRF cookie exists
    2. If not, generates a new signed token, exposes it on request.state
       for this request and sets it as cookie on the response
    """

    def __init__(self, app):
        self.app = app

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request = Request(scope, receive)
        existing_cookie = request.cookies.get(CSRF_COOKIE_NAME)
        if existing_cookie and verify_csrf_signature(existing_cookie):
            await self.app(scope, receive, send)
            return

        signed_token = sign_csrf_token(generate_csrf_token())
        scope.setdefault("state", {})["csrf_token"] = signed_token

        async def send_wrapper(message):
            if message["type"] == "http.response.start":
                cookie_value = (
                    f"{CSRF_COOKIE_NAME}={signed_token}; Path=/; SameSite=strict; "
                    f"Max-Age={CSRF_COOKIE_MAX_AGE}"
                )
                if not settings.DEBUG:
                    cookie_value += "; Secure"

                headers = list(message.get("headers", []))
                headers.append((b"set-cookie", cookie_value.encode()))
                message["headers"] = headers

            await send(message)

        await self.app(scope, receive, send_wrapper)
