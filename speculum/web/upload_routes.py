"""
Image upload, mounted under /upload.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
from sqlalchemy.orm import Session

from speculum.config import settings
from speculum.database import get_db
from speculum.dependencies.auth import require_admin
from speculum.dependencies.csrf import validate_csrf_token
from speculum.repositories.post_repository import get_post_by_id
from speculum.schemas.media import MediaResponse
from speculum.services.upload_service import UploadValidationError, save_image_upload

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Upload"])


@router.post("/image")
def upload_image(
    csrf_protected: None = Depends(validate_csrf_token),
    admin: str = Depends(require_admin),
    db: Session = Depends(get_db),
    image: UploadFile = File(...),
    post_id: Optional[int] = Form(None),
    alt_text: Optional[str] = Form(None, max_length=500),
):
    if post_id is not None and get_post_by_id(db, post_id) is None:
        raise HTTPException(status_code=404, detail="Post not found")

    # one byte over the limit is enough for validate_image to reject with 413
    content = image.file.read(settings.MAX_FILE_SIZE + 1)
    try:
        media = save_image_upload(
            db,
            content=content,
            original_name=image.filename or "",
            uploaded_by=admin,
            post_id=post_id,
            alt_text=alt_text,
        )
    except UploadValidationError as e:
        logger.info(f"Upload rejected: {e}")
        raise HTTPException(status_code=e.status_code, detail=str(e))

    return {
        "success": True,
        "message": "Image uploaded successfully",
        "media": MediaResponse.model_validate(media).model_dump(),
    }
