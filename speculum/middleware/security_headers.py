"""
Security Headers Middleware
Adds security headers to all responses.
"""

from starlette.middleware.base import BaseHTTPMiddleware

from speculum.config import settings
from speculum.csp import CSP_HEADER, ContentSecurityPolicy


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """
    Middleware that adds security headers to all responses.

    Headers implemented:
    - X-Frame-Options: Prevents clickjacking
    - X-Content-Type-Options: Prevents MIME sniffing
    - Strict-Transport-Security: Forces HTTPS (production only)
    - Content-Security-Policy: Base policy from settings, without nonce
    - Referrer-Policy: Controls referrer information
    - Permissions-Policy: Restricts browser features

    The per-request nonce is added afterwards by CSPNonceMiddleware.
    """

    def __init__(self, app, csp_enabled: bool | None = None):
        super().__init__(app)
        self.csp_enabled = settings.CSP_ENABLED if csp_enabled is None else csp_enabled
        self.csp_policy = ContentSecurityPolicy.from_directives(
            settings.csp_directives
        ).serialize()

    async def dispatch(self, request, call_next):
        response = await call_next(request)

        response.headers["X-Frame-Options"] = "DENY"
        response.headers["X-Content-Type-Options"] = "nosniff"

        # HTTPS enforcement (production only)
        if not settings.DEBUG:
            response.headers["Strict-Transport-Security"] = (
                "max-age=31536000; includeSubDomains; preload"
            )

        # Routes may ship their own policy
        if self.csp_enabled and CSP_HEADER not in response.headers:
            response.headers[CSP_HEADER] = self.csp_policy

        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        response.headers["Permissions-Policy"] = (
            "accelerometer=(), camera=(), geolocation=(), gyroscope=(), "
            "magnetometer=(), microphone=(), payment=(), usb=()"
        )

        return response
