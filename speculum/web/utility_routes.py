"""
Health check, CSRF token and outbound redirect, mounted under /api.
These routes work without the database.
"""

import time
from datetime import datetime, timezone

from fastapi import APIRouter, HTTPException, Query, Request
from fastapi.responses import RedirectResponse

from speculum.config import settings
from speculum.database import db_status
from speculum.services.csrf_service import get_csrf_token
from speculum.utils.url_utils import is_allowed_external_redirect

router = APIRouter(tags=["Utility"])

_started_at = time.monotonic()


@router.get("/health")
def health_check():
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "uptime": round(time.monotonic() - _started_at, 3),
        "environment": "development" if settings.DEBUG else "production",
        "version": settings.APP_VERSION,
        "database": "ready" if db_status.is_ready else "unavailable",
    }


@router.get("/csrf-token")
def csrf_token(request: Request):
    return {"csrfToken": get_csrf_token(request)}


@router.get("/redirect")
def redirect(url: str = Query(..., max_length=2048)):
    if not is_allowed_external_redirect(url, settings.allowed_redirect_hosts_list):
        raise HTTPException(status_code=400, detail="Unsupported redirect target")
    return RedirectResponse(url=url, status_code=302)
