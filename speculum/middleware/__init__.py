from speculum.middleware.csp_nonce import CSPNonceMiddleware, get_csp_nonce
from speculum.middleware.security_headers import SecurityHeadersMiddleware

__all__ = [
    "CSPNonceMiddleware",
    "SecurityHeadersMiddleware",
    "get_csp_nonce",
]
