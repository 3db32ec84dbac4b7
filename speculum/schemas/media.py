from typing import Optional

from pydantic import BaseModel, ConfigDict


class MediaResponse(BaseModel):
    id: int
    post_id: Optional[int] = None
    original_name: str
    stored_name: str
    url: str
    file_size: int
    mime_type: str
    alt_text: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)
