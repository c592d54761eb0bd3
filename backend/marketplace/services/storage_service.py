"""
Local-disk storage for uploaded images.

Files are written synchronously inside the request under UPLOAD_DIR and
served back from UPLOAD_URL_PREFIX. Removing a superseded file is
best-effort: failures are logged and never fail the request.
"""

import os
import time
import uuid
from dataclasses import dataclass

from fastapi import HTTPException, UploadFile, status

from marketplace.core.config import get_settings
from marketplace.core.logging import get_logger

logger = get_logger(__name__)
settings = get_settings()

CHUNK_SIZE = 64 * 1024


@dataclass
class StoredFile:
    filename: str
    original_name: str
    size: int

    @property
    def url(self) -> str:
        return media_url(self.filename)

    def as_image(self) -> dict:
        return {"url": self.url, "name": self.original_name, "size": self.size}


def media_url(name: str) -> str:
    """Public URL for a stored file name. Absolute paths and URLs pass through."""
    if name.startswith(("/", "http://", "https://")):
        return name
    return f"{settings.UPLOAD_URL_PREFIX}/{name}"


def ensure_upload_dir() -> str:
    os.makedirs(settings.UPLOAD_DIR, exist_ok=True)
    return settings.UPLOAD_DIR


def save_upload(upload: UploadFile) -> StoredFile:
    original_name = upload.filename or ""
    ext = os.path.splitext(original_name)[1].lower()
    if ext not in settings.ALLOWED_IMAGE_EXTENSIONS:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Only image files are allowed!",
        )

    filename = f"{int(time.time() * 1000)}-{uuid.uuid4().hex[:8]}{ext}"
    path = os.path.join(ensure_upload_dir(), filename)

    size = 0
    with open(path, "wb") as out:
        while True:
            chunk = upload.file.read(CHUNK_SIZE)
            if not chunk:
                break
            size += len(chunk)
            if size > settings.MAX_UPLOAD_BYTES:
                break
            out.write(chunk)

    if size > settings.MAX_UPLOAD_BYTES:
        remove_upload(filename)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"File {original_name} exceeds the {settings.MAX_UPLOAD_BYTES} byte limit",
        )

    logger.info("upload_saved", filename=filename, original_name=original_name, size=size)
    return StoredFile(filename=filename, original_name=original_name, size=size)


def save_uploads(uploads: list[UploadFile]) -> list[StoredFile]:
    stored = []
    try:
        for upload in uploads:
            stored.append(save_upload(upload))
    except HTTPException:
        for item in stored:
            remove_upload(item.filename)
        raise
    return stored


def remove_upload(name: str) -> bool:
    """Delete a stored file by name or public URL. Returns True if a file was removed."""
    if not name:
        return False
    path = os.path.join(settings.UPLOAD_DIR, os.path.basename(name))
    try:
        os.remove(path)
    except FileNotFoundError:
        logger.info("upload_missing", path=path)
        return False
    except OSError as e:
        logger.warning("upload_remove_failed", path=path, error=str(e))
        return False
    logger.info("upload_removed", path=path)
    return True
