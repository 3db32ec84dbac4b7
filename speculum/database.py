"""
Database configuration, session management and readiness tracking.

Transaction handling:
- get_db() is the only place that commits (once per request, on success)
- Repositories use db.add() / db.flush() and never commit themselves
- Any exception rolls the whole request back

Readiness:
- db_status is flipped by the application lifespan after the schema has been
  created and a round-trip query succeeded
- The require_database dependency reads it on every request
"""

import logging
from threading import Lock
from typing import Any, Optional

from sqlalchemy import create_engine, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker, DeclarativeBase

from speculum.config import settings

logger = logging.getLogger(__name__)

engine_args: dict[str, Any] = {
    "echo": settings.DEBUG,
}

if settings.DATABASE_URL.startswith("sqlite"):
    # SQLite needs check_same_thread=False for the threadpool used by sync routes
    engine_args["connect_args"] = {"check_same_thread": False}
else:
    engine_args["pool_pre_ping"] = True
    engine_args["pool_recycle"] = 3600

engine = create_engine(settings.DATABASE_URL, **engine_args)

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)


class Base(DeclarativeBase):
    """Base class for all ORM models"""

    pass


class DatabaseStatus:
    """
    Process-wide readiness flag for the persistence layer.

    The flag is written by the lifespan handler and read by the
    readiness gate on every request.
    """

    def __init__(self):
        self._lock = Lock()
        self._ready = False
        self._last_error: Optional[str] = None

    def mark_ready(self) -> None:
        with self._lock:
            self._ready = True
            self._last_error = None

    def mark_unavailable(self, error: Optional[str] = None) -> None:
        with self._lock:
            self._ready = False
            self._last_error = error

    @property
    def is_ready(self) -> bool:
        return self._ready

    @property
    def last_error(self) -> Optional[str]:
        return self._last_error


db_status = DatabaseStatus()


def get_db():
    """
    Dependency yielding a database session.

    Commits when the request finished without error, rolls back otherwise.
    """
    db = SessionLocal()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def check_connection() -> tuple[bool, Optional[str]]:
    """
    Run a trivial round-trip query.

    Returns:
        (is_available, error_message)
    """
    try:
        with engine.connect() as connection:
            connection.execute(text("SELECT 1"))
        return True, None
    except SQLAlchemyError as e:
        logger.warning(f"Database connection check failed: {e}")
        return False, str(e)


def init_db():
    """Create all tables that do not exist yet"""
    import speculum.models  # noqa: F401  (registers the models on Base.metadata)

    Base.metadata.create_all(bind=engine)


def close_db():
    """Dispose the connection pool"""
    engine.dispose()
