"""
Query helpers for post categories.
"""

from typing import List, Optional

from sqlalchemy.orm import Session

from speculum.models.category import Category


def get_all_categories(db: Session) -> List[Category]:
    return db.query(Category).order_by(Category.name.asc()).all()


def get_category(db: Session, category_id: int) -> Optional[Category]:
    return db.query(Category).filter(Category.id == category_id).first()


def get_category_by_slug(db: Session, slug: str) -> Optional[Category]:
    return db.query(Category).filter(Category.slug == slug).first()


def create_category(
    db: Session, name: str, slug: str, description: Optional[str] = None
) -> Category:
    category = Category(name=name, slug=slug, description=description)
    db.add(category)
    db.flush()
    return category
