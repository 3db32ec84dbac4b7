from speculum.models.category import Category
from speculum.models.post import Post
from speculum.models.comment import Comment
from speculum.models.card import Card
from speculum.models.media import Media

__all__ = [
    "Category",
    "Post",
    "Comment",
    "Card",
    "Media",
]
