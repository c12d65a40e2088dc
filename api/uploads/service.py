"""
Upload "service layer".

This file contains logic that is independent of FastAPI's routing layer:
- Validate uploads
- Stream file bytes to disk with a size limit
- Move the finished file to a collision-resistant name
"""

from __future__ import annotations

import logging
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from uuid import uuid4

from fastapi import HTTPException, UploadFile

from core import settings

ALLOWED_EXTENSIONS = {".jpg", ".jpeg", ".png", ".gif", ".webp", ".bmp", ".tif", ".tiff", ".heic"}

DEFAULT_MAX_UPLOAD_BYTES = 10 * 1024 * 1024  # 10 MiB
CHUNK_SIZE = 1024 * 1024  # 1 MiB

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StoredUpload:
    filename: str
    original_name: str
    content_type: str | None
    size_bytes: int


def _file_ext(filename: str) -> str:
    return Path(filename).suffix.lower()


def validate_upload(file: UploadFile) -> str:
    """
    Return the normalized file extension if this upload is acceptable.

    Validation is by extension because `content_type` is client-supplied.
    """
    if not file.filename:
        raise HTTPException(status_code=400, detail="Missing filename.")

    ext = _file_ext(file.filename)
    if ext not in ALLOWED_EXTENSIONS:
        raise HTTPException(
            status_code=400,
            detail=f"Unsupported file type '{ext}'. Allowed: {sorted(ALLOWED_EXTENSIONS)}",
        )
    return ext


def max_upload_bytes() -> int:
    value = settings.env_int("MAX_UPLOAD_BYTES", DEFAULT_MAX_UPLOAD_BYTES)
    return value if value > 0 else DEFAULT_MAX_UPLOAD_BYTES


async def _stream_to(file: UploadFile, handle, max_bytes: int) -> int:
    written = 0
    while True:
        chunk = await file.read(CHUNK_SIZE)
        if not chunk:
            break
        written += len(chunk)
        if written > max_bytes:
            raise HTTPException(
                status_code=413,
                detail=f"File too large. Max is {max_bytes} bytes.",
            )
        handle.write(chunk)
    return written


async def store_upload(file: UploadFile) -> StoredUpload:
    """
    Write the upload to a temporary file inside the upload directory, then
    rename it to `<uuid4><ext>`. The temporary file is removed on failure.
    """
    ext = validate_upload(file)
    target_dir = Path(settings.upload_dir())
    target_dir.mkdir(parents=True, exist_ok=True)

    fd, tmp_name = tempfile.mkstemp(dir=target_dir, prefix=".upload-", suffix=".part")
    try:
        with os.fdopen(fd, "wb") as handle:
            size = await _stream_to(file, handle, max_upload_bytes())
        filename = f"{uuid4()}{ext}"
        os.replace(tmp_name, target_dir / filename)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise

    logger.info("upload_stored filename=%s size_bytes=%s", filename, size)
    return StoredUpload(
        filename=filename,
        original_name=file.filename or "",
        content_type=file.content_type,
        size_bytes=size,
    )
