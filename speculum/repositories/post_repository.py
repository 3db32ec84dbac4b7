"""
Query helpers for blog posts.
"""

from itertools import groupby
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from speculum.models.post import Post


def _visible_posts(db: Session):
    return db.query(Post).filter(Post.published.is_(True), Post.deleted.is_(False))


def get_published_posts(db: Session, limit: Optional[int] = None) -> List[Post]:
    """Published, not deleted posts, newest first."""
    query = _visible_posts(db).order_by(Post.created_at.desc(), Post.id.desc())
    if limit is not None:
        query = query.limit(limit)
    return query.all()


def get_most_read_posts(db: Session, limit: int = 5) -> List[Post]:
    return (
        _visible_posts(db)
        .order_by(Post.views.desc(), Post.created_at.desc())
        .limit(limit)
        .all()
    )


def get_post_by_id(db: Session, post_id: int) -> Optional[Post]:
    return db.query(Post).filter(Post.id == post_id).first()


def get_post_by_slug(db: Session, slug: str) -> Optional[Post]:
    return db.query(Post).filter(Post.slug == slug).first()


def get_visible_post(db: Session, post_ref: str) -> Optional[Post]:
    """
    Resolve a numeric id or a slug to a published, not deleted post.
    """
    if post_ref.isdigit():
        post = get_post_by_id(db, int(post_ref))
    else:
        post = get_post_by_slug(db, post_ref)

    if post is None or not post.is_visible:
        return None
    return post


def slug_exists(db: Session, slug: str) -> bool:
    return db.query(Post.id).filter(Post.slug == slug).first() is not None


def create_post(
    db: Session,
    slug: str,
    title: str,
    content: str,
    tags: List[str],
    author: str,
    published: bool = True,
    category_id: Optional[int] = None,
) -> Post:
    post = Post(
        slug=slug,
        title=title,
        content=content,
        tags=tags,
        author=author,
        published=published,
        category_id=category_id,
    )
    db.add(post)
    db.flush()
    return post


def increment_views(db: Session, post: Post) -> None:
    post.views = (post.views or 0) + 1
    db.flush()


def soft_delete_post(db: Session, post: Post) -> None:
    post.deleted = True
    db.flush()


def update_post(db: Session, post: Post, changes: Dict[str, Any]) -> Post:
    """Apply changed fields (title, content, slug, tags, published, category_id)."""
    for field, value in changes.items():
        setattr(post, field, value)
    db.flush()
    return post


def get_posts_by_category(db: Session, category_id: int) -> List[Post]:
    return (
        _visible_posts(db)
        .filter(Post.category_id == category_id)
        .order_by(Post.created_at.desc(), Post.id.desc())
        .all()
    )


def get_archive_years(db: Session) -> List[int]:
    """Years that have at least one visible post, newest first."""
    rows = _visible_posts(db).with_entities(Post.created_at).all()
    years = {created_at.year for (created_at,) in rows}
    return sorted(years, reverse=True)


def get_archive(db: Session, year: Optional[int] = None) -> List[Dict[str, Any]]:
    """
    Visible posts grouped by (year, month), newest first.
    """
    posts = get_published_posts(db)
    if year is not None:
        posts = [post for post in posts if post.created_at.year == year]

    return [
        {"year": post_year, "month": post_month, "posts": list(group)}
        for (post_year, post_month), group in groupby(
            posts, key=lambda post: (post.created_at.year, post.created_at.month)
        )
    ]
