import re
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

SLUG_PATTERN = r"^[a-z0-9]+(?:-[a-z0-9]+)*$"


class PostCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    content: str = Field(..., min_length=1)
    slug: Optional[str] = Field(None, max_length=255, pattern=SLUG_PATTERN)
    tags: List[str] = Field(default_factory=list, max_length=20)
    published: bool = True
    category_id: Optional[int] = Field(None, ge=1)

    @field_validator("tags")
    @classmethod
    def strip_tags(cls, tags: List[str]) -> List[str]:
        return _clean_tags(tags)


class PostUpdate(BaseModel):
    """Partial update; only fields present in the body are changed."""

    title: Optional[str] = Field(None, min_length=1, max_length=255)
    content: Optional[str] = Field(None, min_length=1)
    slug: Optional[str] = Field(None, max_length=255, pattern=SLUG_PATTERN)
    tags: Optional[List[str]] = Field(None, max_length=20)
    published: Optional[bool] = None
    category_id: Optional[int] = Field(None, ge=1)

    @field_validator("tags")
    @classmethod
    def strip_tags(cls, tags: Optional[List[str]]) -> Optional[List[str]]:
        return None if tags is None else _clean_tags(tags)


class PostResponse(BaseModel):
    id: int
    slug: str
    title: str
    content: str
    tags: List[str]
    author: str
    views: int
    published: bool
    category_id: Optional[int] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class PostSummary(BaseModel):
    id: int
    slug: str
    title: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ArchiveMonth(BaseModel):
    year: int
    month: int
    posts: List[PostSummary]


class ArchiveResponse(BaseModel):
    years: List[int]
    archive: List[ArchiveMonth]


def _clean_tags(tags: List[str]) -> List[str]:
    return [tag.strip() for tag in tags if tag.strip()]


def slugify(title: str) -> str:
    """
    Derive a URL slug from a title.

    Examples:
        >>> slugify("Hello, World!")
        'hello-world'
        >>> slugify("Über Grüße")
        'ueber-gruesse'
    """
    value = title.lower()
    for src, dst in (("ä", "ae"), ("ö", "oe"), ("ü", "ue"), ("ß", "ss")):
        value = value.replace(src, dst)
    value = re.sub(r"[^a-z0-9]+", "-", value).strip("-")
    return value or "post"
