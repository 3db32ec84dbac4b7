# tests/test_require_database.py
import pytest
from fastapi import HTTPException
from fastapi.testclient import TestClient

import speculum.main as main_module
from speculum.config import settings
from speculum.database import db_status
from speculum.dependencies.database import require_database
from speculum.main import app


def test_gate_passes_when_ready():
    db_status.mark_ready()
    assert require_database() is None


def test_gate_rejects_with_retry_after():
    db_status.mark_unavailable("connection refused")
    with pytest.raises(HTTPException) as exc_info:
        require_database()
    assert exc_info.value.status_code == 503
    assert exc_info.value.headers == {
        "Retry-After": str(settings.DB_RETRY_AFTER_SECONDS)
    }


def test_lifespan_marks_database_ready(client):
    assert db_status.is_ready
    assert client.get("/api/health").json()["database"] == "ready"


@pytest.mark.parametrize(
    "path", ["/", "/about", "/sitemap.xml", "/auth/login", "/blogpost/", "/cards/"]
)
def test_db_routes_return_503_while_unavailable(client, path):
    db_status.mark_unavailable("lost connection")
    response = client.get(path)
    assert response.status_code == 503
    assert response.headers["Retry-After"] == str(settings.DB_RETRY_AFTER_SECONDS)
    assert "initializing" in response.json()["detail"]


def test_503_still_carries_security_headers(client):
    db_status.mark_unavailable()
    response = client.get("/")
    assert response.status_code == 503
    assert response.headers["X-Frame-Options"] == "DENY"
    assert "'nonce-" in response.headers["Content-Security-Policy"]


@pytest.mark.parametrize("path", ["/api/health", "/api/csrf-token", "/impressum", "/datenschutz"])
def test_db_independent_routes_work_while_unavailable(client, path):
    db_status.mark_unavailable()
    assert client.get(path).status_code == 200


def test_startup_fails_when_database_is_required(monkeypatch):
    monkeypatch.setattr(main_module, "check_connection", lambda: (False, "refused"))
    monkeypatch.setattr(settings, "DB_STARTUP_REQUIRED", True)
    with pytest.raises(RuntimeError):
        with TestClient(app):
            pass
    assert not db_status.is_ready
    assert db_status.last_error == "refused"


def test_startup_continues_when_database_is_optional(monkeypatch):
    monkeypatch.setattr(main_module, "check_connection", lambda: (False, "refused"))
    monkeypatch.setattr(settings, "DB_STARTUP_REQUIRED", False)
    with TestClient(app, base_url="https://testserver") as client:
        assert client.get("/").status_code == 503
        health = client.get("/api/health").json()
        assert health["status"] == "healthy"
        assert health["database"] == "unavailable"
