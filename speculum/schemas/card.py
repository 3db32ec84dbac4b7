from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, HttpUrl


class CardCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    subtitle: Optional[str] = Field(None, max_length=500)
    link: HttpUrl
    img: HttpUrl
    published: bool = True


class CardResponse(BaseModel):
    id: int
    title: str
    subtitle: Optional[str] = None
    link: str
    img: str
    published: bool

    model_config = ConfigDict(from_attributes=True)
