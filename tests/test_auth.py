# tests/test_auth.py
import re
from datetime import datetime, timedelta, timezone

import jwt

from speculum.config import settings
from speculum.services.auth_service import (
    AUTH_COOKIE_NAME,
    create_access_token,
    hash_password,
    verify_access_token,
    verify_admin_credentials,
)
from speculum.services.csrf_service import CSRF_COOKIE_NAME
from tests.helpers.auth import ADMIN_PASSWORD, csrf_headers, login


def test_login_page_form_carries_issued_csrf_token(client):
    response = client.get("/auth/login")
    assert response.status_code == 200

    match = re.search(r'name="csrf_token" value="([^"]+)"', response.text)
    assert match is not None
    assert match.group(1) == client.cookies.get(CSRF_COOKIE_NAME)


def test_login_success_sets_cookie_and_redirects(client):
    response = login(client, next_url="/blogpost/")
    assert response.status_code == 303
    assert response.headers["location"] == "/blogpost/"

    set_cookie = response.headers["set-cookie"]
    assert f"{AUTH_COOKIE_NAME}=" in set_cookie
    assert "HttpOnly" in set_cookie
    assert "samesite=strict" in set_cookie.lower()

    verify = client.get("/auth/verify").json()
    assert verify == {"authenticated": True, "username": "admin"}


def test_login_rejects_external_next(client):
    response = login(client, next_url="//evil.example/steal")
    assert response.status_code == 303
    assert response.headers["location"] == "/"


def test_login_wrong_password(client):
    response = login(client, password="wrong")
    assert response.status_code == 401
    assert "Invalid credentials." in response.text
    assert client.get("/auth/verify").json()["authenticated"] is False


def test_login_requires_csrf_token(client):
    client.get("/api/csrf-token")
    response = client.post(
        "/auth/login",
        data={"username": "admin", "password": ADMIN_PASSWORD},
        follow_redirects=False,
    )
    assert response.status_code == 403


def test_login_rate_limited_after_five_attempts(client):
    for _ in range(5):
        assert login(client, password="wrong").status_code == 401

    response = login(client)
    assert response.status_code == 429
    assert "Too many attempts" in response.text


def test_login_page_redirects_when_logged_in(admin_client):
    response = admin_client.get("/auth/login?next=/about", follow_redirects=False)
    assert response.status_code == 302
    assert response.headers["location"] == "/about"


def test_logout_clears_session(admin_client):
    response = admin_client.post(
        "/auth/logout", headers=csrf_headers(admin_client), follow_redirects=False
    )
    assert response.status_code == 303
    assert response.headers["location"] == "/"
    assert admin_client.get("/auth/verify").json()["authenticated"] is False


def test_verify_without_session(client):
    response = client.get("/auth/verify")
    assert response.json() == {"authenticated": False, "username": None}
    assert response.headers["cache-control"] == "no-store"


def test_password_hash_roundtrip(monkeypatch):
    monkeypatch.setattr(settings, "ADMIN_PASSWORD_HASH", hash_password("s3cret"))
    assert verify_admin_credentials("admin", "s3cret")
    assert not verify_admin_credentials("admin", "S3cret")
    assert not verify_admin_credentials("root", "s3cret")


def test_login_disabled_without_password_hash(monkeypatch):
    monkeypatch.setattr(settings, "ADMIN_PASSWORD_HASH", "")
    assert not verify_admin_credentials("admin", ADMIN_PASSWORD)


def test_access_token_roles():
    assert verify_access_token(create_access_token("admin")) == "admin"
    assert verify_access_token(create_access_token("admin", role="reader")) is None
    assert verify_access_token("not-a-jwt") is None


def test_expired_access_token_is_rejected():
    token = jwt.encode(
        {
            "sub": "admin",
            "role": "admin",
            "exp": datetime.now(timezone.utc) - timedelta(minutes=1),
        },
        settings.SECRET_KEY,
        algorithm=settings.ALGORITHM,
    )
    assert verify_access_token(token) is None
