# tests/test_upload.py
import io
from pathlib import Path

import pytest
from PIL import Image
from sqlalchemy.exc import SQLAlchemyError

from speculum.config import settings
import speculum.services.upload_service as upload_service
import speculum.web.upload_routes as upload_routes
from speculum.services.upload_service import (
    UploadValidationError,
    get_upload_dir,
    sanitize_filename,
    save_image_upload,
    validate_image,
)
from tests.helpers.auth import csrf_headers
from tests.helpers.factories import make_post


def _png_bytes(size=(32, 24)) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", size, color=(200, 30, 30)).save(buffer, format="PNG")
    return buffer.getvalue()


def test_upload_image(admin_client, db_session):
    post = make_post(db_session)
    response = admin_client.post(
        "/upload/image",
        files={"image": ("cover photo.png", _png_bytes(), "image/png")},
        data={"post_id": str(post.id), "alt_text": "Cover"},
        headers=csrf_headers(admin_client),
    )
    assert response.status_code == 200
    media = response.json()["media"]
    assert media["post_id"] == post.id
    assert media["mime_type"] == "image/png"
    assert media["original_name"] == "cover_photo.png"
    assert media["stored_name"].endswith(".png")
    assert media["url"] == f"/media/{media['stored_name']}"
    assert (Path(settings.UPLOAD_DIR) / media["stored_name"]).is_file()

    served = admin_client.get(media["url"])
    assert served.status_code == 200
    assert served.content == _png_bytes()


def test_upload_requires_admin(client):
    response = client.post(
        "/upload/image",
        files={"image": ("a.png", _png_bytes(), "image/png")},
        headers=csrf_headers(client),
    )
    assert response.status_code == 401


def test_upload_rejects_disguised_file(admin_client):
    response = admin_client.post(
        "/upload/image",
        files={"image": ("evil.png", b"<?php echo 'hi'; ?>", "image/png")},
        headers=csrf_headers(admin_client),
    )
    assert response.status_code == 415


def test_upload_unknown_post(admin_client):
    response = admin_client.post(
        "/upload/image",
        files={"image": ("a.png", _png_bytes(), "image/png")},
        data={"post_id": "9999"},
        headers=csrf_headers(admin_client),
    )
    assert response.status_code == 404


def test_validate_image_limits(monkeypatch):
    with pytest.raises(UploadValidationError, match="No file uploaded"):
        validate_image(b"")

    monkeypatch.setattr(settings, "MAX_FILE_SIZE", 10)
    with pytest.raises(UploadValidationError) as exc_info:
        validate_image(_png_bytes())
    assert exc_info.value.status_code == 413


def test_validate_image_rejects_bad_checksum():
    content = bytearray(_png_bytes())
    # first byte of chunk data after IHDR
    content[41] ^= 0xFF
    with pytest.raises(UploadValidationError, match="corrupt"):
        validate_image(bytes(content))


def test_sanitize_filename():
    assert sanitize_filename("../../etc/passwd") == "passwd"
    assert sanitize_filename("my photo (1).jpg") == "my_photo_1_.jpg"
    assert sanitize_filename("") == "file"


def test_oversized_upload_is_read_only_up_to_the_limit(admin_client, monkeypatch):
    monkeypatch.setattr(settings, "MAX_FILE_SIZE", 32)
    seen_sizes = []
    real_save = upload_routes.save_image_upload

    def recording_save(db, **kwargs):
        seen_sizes.append(len(kwargs["content"]))
        return real_save(db, **kwargs)

    monkeypatch.setattr(upload_routes, "save_image_upload", recording_save)
    before = set(get_upload_dir().iterdir())

    response = admin_client.post(
        "/upload/image",
        files={"image": ("big.png", _png_bytes((200, 200)), "image/png")},
        headers=csrf_headers(admin_client),
    )
    assert response.status_code == 413
    assert seen_sizes == [33]
    assert set(get_upload_dir().iterdir()) == before


def test_stored_file_removed_when_media_insert_fails(db_session, monkeypatch):
    def failing_create_media(db, **kwargs):
        raise SQLAlchemyError("insert failed")

    monkeypatch.setattr(upload_service, "create_media", failing_create_media)
    before = set(get_upload_dir().iterdir())

    with pytest.raises(SQLAlchemyError):
        save_image_upload(
            db_session,
            content=_png_bytes(),
            original_name="a.png",
            uploaded_by="admin",
        )
    assert set(get_upload_dir().iterdir()) == before
