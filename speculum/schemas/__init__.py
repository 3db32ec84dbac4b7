from speculum.schemas.post import (
    ArchiveResponse,
    PostCreate,
    PostResponse,
    PostSummary,
    PostUpdate,
)
from speculum.schemas.category import CategoryResponse
from speculum.schemas.comment import CommentCreate, CommentResponse
from speculum.schemas.card import CardCreate, CardResponse
from speculum.schemas.media import MediaResponse

__all__ = [
    "PostCreate",
    "PostResponse",
    "PostUpdate",
    "PostSummary",
    "ArchiveResponse",
    "CategoryResponse",
    "CommentCreate",
    "CommentResponse",
    "CardCreate",
    "CardResponse",
    "MediaResponse",
]
