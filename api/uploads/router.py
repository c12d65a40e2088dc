"""
Upload endpoint.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, File, UploadFile

from auth import dependencies as auth_dependencies

from . import service

router = APIRouter()


@router.post("/upload")
async def upload_file(
    file: UploadFile = File(...),
    _: dict = Depends(auth_dependencies.get_current_user),
) -> dict:
    stored = await service.store_upload(file)
    return {
        "message": "File Uploaded",
        "filename": stored.filename,
        "size_bytes": stored.size_bytes,
    }
