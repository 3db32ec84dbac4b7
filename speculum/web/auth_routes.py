"""
Admin authentication routes - login, logout and session check.
"""

import logging

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse

from speculum.config import settings
from speculum.dependencies.auth import get_current_admin_optional
from speculum.dependencies.csrf import validate_csrf_token
from speculum.services.auth_service import (
    AUTH_COOKIE_NAME,
    create_access_token,
    verify_admin_credentials,
)
from speculum.services.rate_limit_service import check_login_rate_limit
from speculum.utils.ip_utils import get_client_ip
from speculum.utils.template_helpers import render_template
from speculum.utils.url_utils import sanitize_redirect

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Auth"])


def set_auth_cookie(response: RedirectResponse, token: str) -> RedirectResponse:
    response.set_cookie(
        key=AUTH_COOKIE_NAME,
        value=token,
        httponly=True,
        secure=not settings.DEBUG,
        samesite="strict",
        max_age=60 * 60 * settings.ACCESS_TOKEN_EXPIRE_HOURS,
        path="/",
    )
    return response


@router.get("/login", response_class=HTMLResponse)
def login_page(request: Request):
    next_url = sanitize_redirect(request.query_params.get("next", "/"))
    if get_current_admin_optional(request):
        return RedirectResponse(url=next_url, status_code=302)

    return render_template(
        request, "auth/login.html", {"next_url": next_url, "error": None}
    )


@router.post("/login", response_class=HTMLResponse)
def login_submit(
    request: Request,
    csrf_protected: None = Depends(validate_csrf_token),
    username: str = Form(..., max_length=100),
    password: str = Form(..., max_length=100),
    next: str = Form("/"),
):
    """
    Process the login form.

    Rate limited: 5 attempts per IP per 15 minutes.
    """
    safe_next = sanitize_redirect(next)
    client_ip = get_client_ip(request)

    allowed, retry_after = check_login_rate_limit(client_ip)
    if not allowed:
        logger.warning(f"[AUTH] Login rate limit hit from {client_ip}")
        minutes = (retry_after // 60 + 1) if retry_after else 1
        return render_template(
            request,
            "auth/login.html",
            {
                "next_url": safe_next,
                "error": f"Too many attempts. Try again in {minutes} minute(s).",
            },
            status_code=429,
        )

    if not verify_admin_credentials(username, password):
        logger.warning(f"[AUTH] Failed login for username: {username} from {client_ip}")
        return render_template(
            request,
            "auth/login.html",
            {"next_url": safe_next, "error": "Invalid credentials."},
            status_code=401,
        )

    logger.info(f"[AUTH] Successful login for username: {username}")
    response = RedirectResponse(url=safe_next, status_code=303)
    response.headers["Cache-Control"] = "no-cache, no-store, must-revalidate"
    return set_auth_cookie(response, create_access_token(username))


@router.post("/logout")
def logout(csrf_protected: None = Depends(validate_csrf_token)):
    response = RedirectResponse(url="/", status_code=303)
    response.delete_cookie(AUTH_COOKIE_NAME, path="/")
    return response


@router.get("/verify")
def verify(request: Request):
    username = get_current_admin_optional(request)
    return JSONResponse(
        {"authenticated": username is not None, "username": username},
        headers={"Cache-Control": "no-store"},
    )
