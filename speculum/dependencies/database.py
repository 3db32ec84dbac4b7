"""
Database readiness gate.

Used as router-level dependency for every route that needs the database
(see speculum.web.db_router).
"""

from fastapi import HTTPException, status

from speculum.config import settings
from speculum.database import db_status


def require_database() -> None:
    """
    Reject the request with 503 while the database is not usable.

    Raises:
        HTTPException: 503 Service Unavailable with Retry-After
    """
    if not db_status.is_ready:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Database is still initializing. Please try again in a moment.",
            headers={"Retry-After": str(settings.DB_RETRY_AFTER_SECONDS)},
        )
