"""
Start page and about page.
"""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse
from sqlalchemy.orm import Session

from speculum.database import get_db
from speculum.repositories.card_repository import get_published_cards
from speculum.repositories.post_repository import get_most_read_posts, get_published_posts
from speculum.utils.template_helpers import render_template

router = APIRouter()


@router.get("/", response_class=HTMLResponse)
def home(request: Request, db: Session = Depends(get_db)):
    return render_template(
        request,
        "pages/home.html",
        {
            "posts": get_published_posts(db, limit=10),
            "most_read": get_most_read_posts(db, limit=5),
            "cards": get_published_cards(db),
        },
    )


@router.get("/about", response_class=HTMLResponse)
def about(request: Request):
    return render_template(request, "pages/about.html")
