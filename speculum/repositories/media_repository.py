from typing import Optional

from sqlalchemy.orm import Session

from speculum.models.media import Media


def create_media(
    db: Session,
    original_name: str,
    stored_name: str,
    file_size: int,
    mime_type: str,
    uploaded_by: str,
    path: str,
    post_id: Optional[int] = None,
    alt_text: Optional[str] = None,
) -> Media:
    media = Media(
        post_id=post_id,
        original_name=original_name,
        stored_name=stored_name,
        file_size=file_size,
        mime_type=mime_type,
        uploaded_by=uploaded_by,
        path=path,
        alt_text=alt_text,
    )
    db.add(media)
    db.flush()
    return media
