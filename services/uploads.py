from __future__ import annotations

import logging
import os
import uuid
from pathlib import Path

from fastapi import HTTPException, UploadFile

from settings import settings

logger = logging.getLogger("hrdesk.uploads")

UPLOAD_URL_PREFIX = "/uploads/"


def upload_dir() -> Path:
    path = Path(settings.UPLOAD_DIR)
    path.mkdir(parents=True, exist_ok=True)
    return path


def save_photo(file: UploadFile) -> str:
    """Store an employee photo as opaque bytes and return its public URL path."""
    content_type = (file.content_type or "").lower()
    if not content_type.startswith("image/"):
        raise HTTPException(status_code=400, detail="INVALID_PHOTO")

    data = file.file.read(settings.UPLOAD_MAX_BYTES + 1)
    if len(data) > settings.UPLOAD_MAX_BYTES:
        raise HTTPException(status_code=413, detail="PHOTO_TOO_LARGE")

    ext = os.path.splitext(file.filename or "")[1].lower()
    name = f"{uuid.uuid4().hex}{ext}"
    (upload_dir() / name).write_bytes(data)
    logger.info("photo stored name=%s bytes=%s", name, len(data))
    return UPLOAD_URL_PREFIX + name


def delete_photo(url_path: str | None) -> None:
    if not url_path or not url_path.startswith(UPLOAD_URL_PREFIX):
        return
    target = upload_dir() / os.path.basename(url_path)
    try:
        target.unlink()
    except FileNotFoundError:
        logger.info("photo already gone path=%s", url_path)
