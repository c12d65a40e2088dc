"""
Album API schemas.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class AlbumRequest(BaseModel):
    # Whitespace is stripped before the length checks, so "   " is rejected.
    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(..., min_length=1, max_length=500)
    # "beach, sunset" or ["beach", "sunset"]
    tags: str | list[str] | None = None


class AlbumResponse(BaseModel):
    id: int
    title: str
    tags: list[str]
