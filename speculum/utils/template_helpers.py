"""
Template rendering helpers.

Every page gets the per-request values the layout needs:
csp_nonce for inline <script>/<style>, csrf_token for forms,
is_admin for the navigation.
"""

from typing import Optional

from fastapi import Request

from speculum.config import settings
from speculum.dependencies.auth import get_current_admin_optional
from speculum.middleware.csp_nonce import get_csp_nonce
from speculum.services.csrf_service import get_csrf_token
from speculum.utils.template_config import templates

SITE = {
    "name": settings.APP_NAME,
    "version": settings.APP_VERSION,
}


def get_common_context(request: Request) -> dict:
    return {
        "site": SITE,
        "asset_version": settings.APP_VERSION,
        "csp_nonce": get_csp_nonce(request),
        "csrf_token": get_csrf_token(request),
        "is_admin": get_current_admin_optional(request) is not None,
    }


def render_template(
    request: Request,
    template_name: str,
    context: Optional[dict] = None,
    status_code: int = 200,
):
    common_context = get_common_context(request)
    common_context.update(context or {})
    common_context.pop("request", None)
    return templates.TemplateResponse(
        request, template_name, common_context, status_code=status_code
    )
