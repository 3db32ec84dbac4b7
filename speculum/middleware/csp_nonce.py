"""
CSP Nonce Middleware
Generates a cryptographically secure nonce for each request and adds it to
the Content-Security-Policy header of the response.
"""

from typing import Iterable

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from speculum.csp import CSP_HEADER, apply_nonce, generate_nonce


class CSPNonceMiddleware(BaseHTTPMiddleware):
    """
    Middleware that generates a CSP nonce for each request.

    The nonce is stored in request.state.csp_nonce and is used:
    1. In templates (nonce="{{ csp_nonce }}") via get_csp_nonce()
    2. In the CSP header, appended to script-src and style-src

    The header is only rewritten when a downstream stage already set it.
    Register this middleware after SecurityHeadersMiddleware so it wraps it.
    """

    def __init__(
        self,
        app,
        script_hashes: Iterable[str] = (),
        style_hashes: Iterable[str] = (),
    ):
        super().__init__(app)
        self.script_hashes = tuple(script_hashes)
        self.style_hashes = tuple(style_hashes)

    async def dispatch(self, request, call_next):
        nonce = generate_nonce()
        request.state.csp_nonce = nonce

        response = await call_next(request)

        policy = response.headers.get(CSP_HEADER)
        if policy:
            response.headers[CSP_HEADER] = apply_nonce(
                policy, nonce, self.script_hashes, self.style_hashes
            )
        return response


def get_csp_nonce(request: Request) -> str:
    """Get the CSP nonce of the current request ("" outside the middleware)."""
    return getattr(request.state, "csp_nonce", "")
