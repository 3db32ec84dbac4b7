"""
sitemap.xml and robots.txt.
"""

import logging
from datetime import datetime, timezone
from typing import List, Tuple
from xml.sax.saxutils import escape

from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse, Response
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from speculum.database import get_db
from speculum.repositories.card_repository import get_published_cards
from speculum.repositories.post_repository import get_published_posts

logger = logging.getLogger(__name__)

router = APIRouter()

# (path, changefreq, priority)
STATIC_PAGES: List[Tuple[str, str, str]] = [
    ("/", "daily", "1.0"),
    ("/about", "monthly", "0.8"),
    ("/blogpost/", "daily", "0.9"),
]


def get_base_url(request: Request) -> str:
    proto = request.headers.get("x-forwarded-proto", request.url.scheme)
    scheme = "https" if proto == "https" else "http"
    return f"{scheme}://{request.url.netloc}"


def _url_entry(loc: str, lastmod: str, changefreq: str, priority: str) -> str:
    return (
        "  <url>\n"
        f"    <loc>{escape(loc)}</loc>\n"
        f"    <lastmod>{lastmod}</lastmod>\n"
        f"    <changefreq>{changefreq}</changefreq>\n"
        f"    <priority>{priority}</priority>\n"
        "  </url>\n"
    )


@router.get("/sitemap.xml")
def sitemap(request: Request, db: Session = Depends(get_db)):
    base_url = get_base_url(request)
    now = datetime.now(timezone.utc).isoformat()

    entries = [
        _url_entry(f"{base_url}{path}", now, changefreq, priority)
        for path, changefreq, priority in STATIC_PAGES
    ]

    try:
        posts = get_published_posts(db)
        logger.debug(f"Adding {len(posts)} blog posts to sitemap")
        for post in posts:
            lastmod = post.created_at.isoformat() if post.created_at else now
            entries.append(
                _url_entry(f"{base_url}/blogpost/{post.id}", lastmod, "monthly", "0.6")
            )
    except SQLAlchemyError as e:
        logger.warning(f"Could not fetch posts for sitemap: {e}")

    try:
        for card in get_published_cards(db):
            entries.append(
                _url_entry(f"{base_url}/cards/{card.id}", now, "monthly", "0.5")
            )
    except SQLAlchemyError as e:
        logger.warning(f"Could not fetch cards for sitemap: {e}")

    body = (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        '<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">\n'
        + "".join(entries)
        + "</urlset>\n"
    )
    return Response(
        content=body,
        media_type="application/xml; charset=utf-8",
        headers={
            "Cache-Control": "public, max-age=3600",
            "X-Robots-Tag": "noindex",
        },
    )


@router.get("/robots.txt", response_class=PlainTextResponse)
def robots(request: Request):
    base_url = get_base_url(request)
    body = (
        "User-agent: *\n"
        "Allow: /\n"
        "\n"
        f"Sitemap: {base_url}/sitemap.xml\n"
        "\n"
        "Crawl-delay: 1\n"
        "\n"
        "Disallow: /auth/\n"
        "Disallow: /api/\n"
        "Disallow: /upload/\n"
    )
    return PlainTextResponse(body, headers={"Cache-Control": "public, max-age=86400"})
