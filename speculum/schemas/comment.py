from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class CommentCreate(BaseModel):
    post_id: int = Field(..., ge=1)
    username: str = Field("Anonym", max_length=100)
    text: str = Field(..., min_length=1, max_length=2000)


class CommentResponse(BaseModel):
    """Public view of a comment (no IP address)."""

    id: int
    post_id: int
    username: str
    text: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
