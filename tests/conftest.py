# tests/conftest.py

import os
import tempfile
from pathlib import Path

import bcrypt
import pytest

from tests.helpers.auth import ADMIN_PASSWORD, ADMIN_USERNAME, login

# Settings are read at import time; configure the environment before any
# speculum module is imported.
_tmp_dir = Path(tempfile.mkdtemp(prefix="speculum-tests-"))
os.environ["DATABASE_URL"] = f"sqlite:///{_tmp_dir / 'test.sqlite3'}"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["ADMIN_USERNAME"] = ADMIN_USERNAME
os.environ["ADMIN_PASSWORD_HASH"] = bcrypt.hashpw(
    ADMIN_PASSWORD.encode(), bcrypt.gensalt(rounds=4)
).decode()
os.environ["UPLOAD_DIR"] = str(_tmp_dir / "uploads")
os.environ["LOG_DIR"] = str(_tmp_dir / "logs")
os.environ["DEBUG"] = "false"
os.environ["ALLOWED_REDIRECT_HOSTS"] = "speculumx.at,github.com"

from fastapi.testclient import TestClient  # noqa: E402

from speculum.database import Base, SessionLocal, db_status, engine, init_db  # noqa: E402
from speculum.main import app  # noqa: E402
from speculum.services.rate_limit_service import rate_limiter  # noqa: E402

# Auth and CSRF cookies are Secure outside DEBUG
BASE_URL = "https://testserver"


@pytest.fixture(scope="session", autouse=True)
def _create_schema():
    init_db()
    yield


@pytest.fixture(autouse=True)
def _clean_state():
    rate_limiter.reset()
    yield
    with engine.begin() as connection:
        for table in reversed(Base.metadata.sorted_tables):
            connection.execute(table.delete())
    rate_limiter.reset()
    db_status.mark_unavailable()


@pytest.fixture
def client():
    with TestClient(app, base_url=BASE_URL) as test_client:
        yield test_client


@pytest.fixture
def db_session():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def admin_client(client):
    response = login(client)
    assert response.status_code == 303
    return client
