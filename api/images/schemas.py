"""
Image API schemas.
"""

from __future__ import annotations

import datetime as dt

from pydantic import BaseModel, ConfigDict, Field


class CreateImageRequest(BaseModel):
    # Whitespace is stripped before the length checks, so "   " is rejected.
    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(..., min_length=1, max_length=500)
    date: dt.date | None = None
    # Relative path returned by POST /upload.
    path: str = Field(..., min_length=1, max_length=1000)
    tags: list[str] | str | None = None


class UpdateImageRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(..., min_length=1, max_length=500)
    date: dt.date | None = None
    path: str | None = Field(default=None, min_length=1, max_length=1000)
    tags: list[str] | str | None = None


class AlbumImageLinkRequest(BaseModel):
    albumid: int
    imageid: int


class AlbumImageUpdateRequest(BaseModel):
    title: str | None = Field(default=None, max_length=500)
    date: dt.date | None = None
    path: str | None = Field(default=None, max_length=1000)


class ImageResponse(BaseModel):
    id: int
    title: str
    date: dt.date | None
    path: str
    tags: list[str]


class AlbumImageResponse(BaseModel):
    id: int
    title: str
    date: dt.date | None
    path: str
