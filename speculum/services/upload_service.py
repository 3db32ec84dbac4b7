"""
Image Upload Service
Validation, storage and bookkeeping for images uploaded by the admin.

Pipeline:
1. Size check against MAX_FILE_SIZE
2. MIME sniffing with filetype (the client supplied type is ignored)
3. Decoding with Pillow to reject corrupt or oversized images
4. Storage under UPLOAD_DIR with a random name
5. Media row; the file is removed again if the row cannot be written
"""

import io
import logging
import os
import re
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import filetype  # type: ignore
from PIL import Image, UnidentifiedImageError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from speculum.config import settings
from speculum.models.media import Media
from speculum.repositories.media_repository import create_media

logger = logging.getLogger(__name__)

ALLOWED_MIME_TYPES = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/gif": ".gif",
    "image/webp": ".webp",
}

MAX_DIMENSION = 10000  # pixels


class UploadValidationError(Exception):
    """Raised when an uploaded file is rejected."""

    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.status_code = status_code


@dataclass
class StoredImage:
    stored_name: str
    path: Path
    file_size: int
    mime_type: str


def sanitize_filename(filename: str) -> str:
    """
    Make a client supplied filename safe for display and logging.

    Examples:
        >>> sanitize_filename("../../etc/passwd")
        'passwd'
        >>> sanitize_filename("")
        'file'
    """
    if not filename:
        return "file"

    filename = os.path.basename(filename.replace("\x00", "").replace("\\", "/"))
    filename = re.sub(r"[^\w\s\-.]", "_", filename)
    filename = re.sub(r"[_\s]+", "_", filename).strip("_. ")

    if len(filename) > 255:
        name, ext = os.path.splitext(filename)
        filename = name[: 255 - len(ext)] + ext

    return filename or "file"


def get_upload_dir() -> Path:
    """Upload directory, created on demand."""
    upload_dir = Path(settings.UPLOAD_DIR)
    upload_dir.mkdir(parents=True, exist_ok=True)
    return upload_dir


def detect_mime_type(content: bytes) -> Optional[str]:
    kind = filetype.guess(content)
    if kind is None:
        return None
    return kind.mime


def validate_image(content: bytes) -> str:
    """
    Validate raw upload bytes.

    Returns:
        The sniffed MIME type

    Raises:
        UploadValidationError: if the file is empty, too large, of a
            disallowed type or cannot be decoded
    """
    if not content:
        raise UploadValidationError("No file uploaded")

    if len(content) > settings.MAX_FILE_SIZE:
        max_mb = settings.MAX_FILE_SIZE / (1024 * 1024)
        raise UploadValidationError(
            f"File too large. Maximum size: {max_mb:.0f}MB", status_code=413
        )

    mime_type = detect_mime_type(content)
    if mime_type not in ALLOWED_MIME_TYPES:
        raise UploadValidationError(
            "File type not allowed. Use JPEG, PNG, GIF or WebP", status_code=415
        )

    try:
        with Image.open(io.BytesIO(content)) as img:
            img.verify()
            width, height = img.size
    except (UnidentifiedImageError, OSError, SyntaxError) as e:
        logger.info(f"Rejected corrupt image upload: {e}")
        raise UploadValidationError("Image is corrupt or invalid")

    if width > MAX_DIMENSION or height > MAX_DIMENSION:
        raise UploadValidationError(
            f"Image too large: {width}x{height}px. Maximum: {MAX_DIMENSION}px"
        )

    return mime_type


def store_image(content: bytes, mime_type: str) -> StoredImage:
    stored_name = f"{uuid.uuid4().hex}{ALLOWED_MIME_TYPES[mime_type]}"
    path = get_upload_dir() / stored_name
    path.write_bytes(content)
    return StoredImage(
        stored_name=stored_name,
        path=path,
        file_size=len(content),
        mime_type=mime_type,
    )


def delete_file(path: Path) -> bool:
    try:
        path.unlink(missing_ok=True)
        return True
    except OSError as e:
        logger.warning(f"Failed to delete file {path}: {e}")
        return False


def save_image_upload(
    db: Session,
    content: bytes,
    original_name: str,
    uploaded_by: str,
    post_id: Optional[int] = None,
    alt_text: Optional[str] = None,
) -> Media:
    """
    Validate, store and register an uploaded image.

    Raises:
        UploadValidationError: if validation fails
    """
    mime_type = validate_image(content)
    stored = store_image(content, mime_type)

    try:
        media = create_media(
            db,
            original_name=sanitize_filename(original_name),
            stored_name=stored.stored_name,
            file_size=stored.file_size,
            mime_type=stored.mime_type,
            uploaded_by=uploaded_by,
            path=str(stored.path),
            post_id=post_id,
            alt_text=alt_text,
        )
    except SQLAlchemyError:
        delete_file(stored.path)
        raise

    logger.info(
        f"Stored upload {stored.stored_name} ({stored.mime_type}, "
        f"{stored.file_size} bytes) by {uploaded_by}"
    )
    return media
