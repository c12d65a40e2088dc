"""
Image business logic.
"""

from __future__ import annotations

import logging

from fastapi import HTTPException, status

from tags.association import parse_tags

from . import repository, schemas

logger = logging.getLogger(__name__)


def _to_image_response(row: dict) -> schemas.ImageResponse:
    return schemas.ImageResponse(
        id=int(row["id"]),
        title=str(row["title"]),
        date=row.get("date"),
        path=str(row["path"]),
        tags=[str(tag) for tag in (row.get("tags") or [])],
    )


async def list_images(*, user_id: int) -> list[schemas.ImageResponse]:
    rows = await repository.list_images(user_id=user_id)
    return [_to_image_response(row) for row in rows]


async def get_image(image_id: int, *, user_id: int) -> schemas.ImageResponse:
    row = await repository.get_image(image_id, user_id=user_id)
    if row is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Image not found.")
    return _to_image_response(row)


async def create_image(payload: schemas.CreateImageRequest, *, user_id: int) -> dict:
    image_id = await repository.create_image(
        user_id=user_id,
        title=payload.title,
        taken_on=payload.date,
        path=payload.path,
        tags=parse_tags(payload.tags),
    )
    if image_id is None:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Image creation failed.")
    logger.info("image_created image_id=%s user_id=%s", image_id, user_id)
    return {"message": "Image creation Success", "id": image_id}


async def update_image(image_id: int, payload: schemas.UpdateImageRequest, *, user_id: int) -> dict:
    updated = await repository.update_image(
        image_id,
        user_id=user_id,
        title=payload.title,
        taken_on=payload.date,
        path=payload.path,
        tags=parse_tags(payload.tags),
    )
    if not updated:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Image update failed.")
    return {"message": "Image and tags update Success"}


async def delete_image(image_id: int, *, user_id: int) -> dict:
    if not await repository.delete_image(image_id, user_id=user_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Image not found.")
    logger.info("image_deleted image_id=%s user_id=%s", image_id, user_id)
    return {"message": "Image deleted"}


async def list_album_images(album_id: int, *, user_id: int) -> list[schemas.AlbumImageResponse]:
    rows = await repository.list_album_images(album_id, user_id=user_id)
    return [
        schemas.AlbumImageResponse(
            id=int(row["id"]),
            title=str(row["title"]),
            date=row.get("date"),
            path=str(row["path"]),
        )
        for row in rows
    ]


async def add_image_to_album(album_id: int, image_id: int, *, user_id: int) -> dict:
    if not await repository.add_image_to_album(album_id, image_id, user_id=user_id):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Adding image to album failed.")
    return {"message": "Image added to album"}


async def remove_image_from_album(album_id: int, image_id: int, *, user_id: int) -> dict:
    if not await repository.remove_image_from_album(album_id, image_id, user_id=user_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Image not found in album.")
    return {"message": "Image deleted from album"}


async def update_image_in_album(
    album_id: int,
    image_id: int,
    payload: schemas.AlbumImageUpdateRequest,
    *,
    user_id: int,
) -> dict:
    updated = await repository.update_image_in_album(
        album_id,
        image_id,
        user_id=user_id,
        title=payload.title,
        taken_on=payload.date,
        path=payload.path,
    )
    if not updated:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Image update in album failed.")
    return {"message": "Image update in Album Success"}
