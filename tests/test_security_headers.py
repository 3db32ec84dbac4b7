# tests/test_security_headers.py
from fastapi import FastAPI
from fastapi.responses import PlainTextResponse
from fastapi.testclient import TestClient

from speculum.csp import CSP_HEADER, ContentSecurityPolicy
from speculum.middleware.security_headers import SecurityHeadersMiddleware


def test_default_headers(client):
    response = client.get("/api/health")
    assert response.headers["X-Frame-Options"] == "DENY"
    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert response.headers["Referrer-Policy"] == "strict-origin-when-cross-origin"
    assert "camera=()" in response.headers["Permissions-Policy"]
    assert response.headers["Strict-Transport-Security"].startswith("max-age=31536000")


def test_policy_directives(client):
    policy = ContentSecurityPolicy.parse(client.get("/api/health").headers[CSP_HEADER])
    assert policy.sources("default-src") == ["'self'"]
    assert policy.sources("object-src") == ["'none'"]
    assert policy.sources("frame-ancestors") == ["'none'"]
    assert policy.sources("base-uri") == ["'self'"]
    assert any(s.startswith("'nonce-") for s in policy.sources("script-src"))
    assert "'unsafe-hashes'" in policy.sources("style-src")
    assert "'unsafe-hashes'" not in policy.sources("script-src")


def test_route_policy_is_not_overwritten():
    app = FastAPI()

    @app.get("/")
    def index():
        return PlainTextResponse("ok", headers={CSP_HEADER: "default-src 'none'"})

    app.add_middleware(SecurityHeadersMiddleware)
    response = TestClient(app).get("/")
    assert response.headers[CSP_HEADER] == "default-src 'none'"


def test_policy_can_be_disabled():
    app = FastAPI()

    @app.get("/")
    def index():
        return PlainTextResponse("ok")

    app.add_middleware(SecurityHeadersMiddleware, csp_enabled=False)
    response = TestClient(app).get("/")
    assert CSP_HEADER not in response.headers
    assert response.headers["X-Frame-Options"] == "DENY"
