"""
Legal pages (Impressum, Datenschutz). No database dependency.
"""

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse

from speculum.config import settings
from speculum.utils.template_helpers import render_template

router = APIRouter(tags=["Legal"])


@router.get("/impressum", response_class=HTMLResponse)
def impressum(request: Request):
    return render_template(
        request,
        "pages/impressum.html",
        {"title": f"Impressum – {settings.APP_NAME}", "active_page": "impressum"},
    )


@router.get("/datenschutz", response_class=HTMLResponse)
def datenschutz(request: Request):
    return render_template(
        request,
        "pages/datenschutz.html",
        {
            "title": f"Datenschutzerklärung – {settings.APP_NAME}",
            "active_page": "datenschutz",
        },
    )
