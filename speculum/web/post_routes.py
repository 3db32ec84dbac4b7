"""
Blog post pages and JSON endpoints, mounted under /blogpost.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from fastapi.responses import HTMLResponse
from sqlalchemy.orm import Session

from speculum.database import get_db
from speculum.dependencies.auth import require_admin
from speculum.dependencies.csrf import validate_csrf_token
from speculum.repositories.category_repository import (
    get_all_categories,
    get_category,
    get_category_by_slug,
)
from speculum.repositories.comment_repository import get_approved_comments
from speculum.repositories.post_repository import (
    create_post,
    get_archive,
    get_archive_years,
    get_most_read_posts,
    get_post_by_id,
    get_posts_by_category,
    get_published_posts,
    get_visible_post,
    increment_views,
    slug_exists,
    soft_delete_post,
    update_post,
)
from speculum.schemas.category import CategoryResponse
from speculum.schemas.post import (
    ArchiveMonth,
    ArchiveResponse,
    PostCreate,
    PostResponse,
    PostSummary,
    PostUpdate,
    slugify,
)
from speculum.utils.template_helpers import render_template

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Posts"])


@router.get("/", response_class=HTMLResponse)
def post_list(request: Request, db: Session = Depends(get_db)):
    return render_template(
        request, "posts/list.html", {"posts": get_published_posts(db)}
    )


@router.get("/all", response_model=List[PostResponse])
def all_posts(db: Session = Depends(get_db)):
    return get_published_posts(db)


@router.get("/most-read", response_model=List[PostResponse])
def most_read_posts(db: Session = Depends(get_db)):
    return get_most_read_posts(db, limit=5)


@router.post(
    "/create", response_model=PostResponse, status_code=status.HTTP_201_CREATED
)
def create(
    payload: PostCreate,
    csrf_protected: None = Depends(validate_csrf_token),
    admin: str = Depends(require_admin),
    db: Session = Depends(get_db),
):
    slug = payload.slug or slugify(payload.title)
    if slug_exists(db, slug):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"A post with slug '{slug}' already exists",
        )
    _ensure_category_exists(db, payload.category_id)

    post = create_post(
        db,
        slug=slug,
        title=payload.title,
        content=payload.content,
        tags=payload.tags,
        author=admin,
        published=payload.published,
        category_id=payload.category_id,
    )
    logger.info(f"Post {post.id} ({slug}) created by {admin}")
    return post


@router.get("/archive", response_model=ArchiveResponse)
def archive(
    year: Optional[int] = Query(None, ge=1970, le=9999),
    db: Session = Depends(get_db),
):
    """Visible posts grouped by year and month, optionally for one year."""
    months = [
        ArchiveMonth(
            year=entry["year"],
            month=entry["month"],
            posts=[PostSummary.model_validate(post) for post in entry["posts"]],
        )
        for entry in get_archive(db, year=year)
    ]
    return ArchiveResponse(years=get_archive_years(db), archive=months)


@router.get("/categories", response_model=List[CategoryResponse])
def categories(db: Session = Depends(get_db)):
    return get_all_categories(db)


@router.get("/category/{slug}", response_model=List[PostResponse])
def posts_in_category(slug: str, db: Session = Depends(get_db)):
    category = get_category_by_slug(db, slug)
    if category is None:
        raise HTTPException(status_code=404, detail="Category not found")
    return get_posts_by_category(db, category.id)


@router.get("/{post_ref}", response_class=HTMLResponse)
def read_post(post_ref: str, request: Request, db: Session = Depends(get_db)):
    """Render a post by numeric id or slug."""
    post = get_visible_post(db, post_ref)
    if post is None:
        raise HTTPException(status_code=404, detail="Post not found")

    increment_views(db, post)
    return render_template(
        request,
        "posts/detail.html",
        {"post": post, "comments": get_approved_comments(db, post.id)},
    )


@router.delete("/{post_id}")
def delete(
    post_id: int,
    csrf_protected: None = Depends(validate_csrf_token),
    admin: str = Depends(require_admin),
    db: Session = Depends(get_db),
):
    post = get_post_by_id(db, post_id)
    if post is None or post.deleted:
        raise HTTPException(status_code=404, detail="Post not found")

    soft_delete_post(db, post)
    logger.info(f"Post {post_id} deleted by {admin}")
    return {"success": True, "message": "Post deleted successfully"}


@router.put("/update/{post_id}", response_model=PostResponse)
def update(
    post_id: int,
    payload: PostUpdate,
    csrf_protected: None = Depends(validate_csrf_token),
    admin: str = Depends(require_admin),
    db: Session = Depends(get_db),
):
    post = get_post_by_id(db, post_id)
    if post is None or post.deleted:
        raise HTTPException(status_code=404, detail="Post not found")

    # explicit nulls only clear the category
    changes = {
        field: value
        for field, value in payload.model_dump(exclude_unset=True).items()
        if value is not None or field == "category_id"
    }

    new_slug = changes.get("slug")
    if new_slug and new_slug != post.slug and slug_exists(db, new_slug):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"A post with slug '{new_slug}' already exists",
        )
    _ensure_category_exists(db, changes.get("category_id"))

    update_post(db, post, changes)
    logger.info(f"Post {post_id} updated by {admin}: {', '.join(sorted(changes))}")
    return post


def _ensure_category_exists(db: Session, category_id: Optional[int]) -> None:
    if category_id is not None and get_category(db, category_id) is None:
        raise HTTPException(status_code=404, detail="Category not found")
