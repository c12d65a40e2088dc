"""
Album business logic.
"""

from __future__ import annotations

import logging

from fastapi import HTTPException, status

from tags.association import parse_tags

from . import repository, schemas

logger = logging.getLogger(__name__)


def _to_album_response(row: dict) -> schemas.AlbumResponse:
    return schemas.AlbumResponse(
        id=int(row["id"]),
        title=str(row["title"]),
        tags=[str(tag) for tag in (row.get("tags") or [])],
    )


async def list_albums(*, user_id: int) -> list[schemas.AlbumResponse]:
    rows = await repository.list_albums(user_id=user_id)
    return [_to_album_response(row) for row in rows]


async def get_album(album_id: int, *, user_id: int) -> schemas.AlbumResponse:
    row = await repository.get_album(album_id, user_id=user_id)
    if row is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Album not found.")
    return _to_album_response(row)


async def create_album(payload: schemas.AlbumRequest, *, user_id: int) -> dict:
    album_id = await repository.create_album(
        user_id=user_id,
        title=payload.title,
        tags=parse_tags(payload.tags),
    )
    if album_id is None:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Album creation failed.")
    logger.info("album_created album_id=%s user_id=%s", album_id, user_id)
    return {"message": "Album creation Success", "id": album_id}


async def update_album(album_id: int, payload: schemas.AlbumRequest, *, user_id: int) -> dict:
    updated = await repository.update_album(
        album_id,
        user_id=user_id,
        title=payload.title,
        tags=parse_tags(payload.tags),
    )
    if not updated:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Album update failed.")
    return {"message": "Album update Success"}


async def delete_album(album_id: int, *, user_id: int) -> dict:
    if not await repository.delete_album(album_id, user_id=user_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Album not found.")
    logger.info("album_deleted album_id=%s user_id=%s", album_id, user_id)
    return {"message": "Album deleted"}
