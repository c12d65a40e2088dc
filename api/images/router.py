"""
Image API endpoints, including album membership.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from auth import dependencies as auth_dependencies

from . import schemas, service

router = APIRouter()


@router.get("/user/images", response_model=list[schemas.ImageResponse])
async def list_images(
    current_user: dict = Depends(auth_dependencies.get_current_user),
) -> list[schemas.ImageResponse]:
    return await service.list_images(user_id=int(current_user["id"]))


@router.get("/user/images/{image_id}", response_model=schemas.ImageResponse)
async def get_image(
    image_id: int,
    current_user: dict = Depends(auth_dependencies.get_current_user),
) -> schemas.ImageResponse:
    return await service.get_image(image_id, user_id=int(current_user["id"]))


@router.post("/images")
async def create_image(
    payload: schemas.CreateImageRequest,
    current_user: dict = Depends(auth_dependencies.get_current_user),
) -> dict:
    return await service.create_image(payload, user_id=int(current_user["id"]))


@router.put("/images/{image_id}")
async def update_image(
    image_id: int,
    payload: schemas.UpdateImageRequest,
    current_user: dict = Depends(auth_dependencies.get_current_user),
) -> dict:
    return await service.update_image(image_id, payload, user_id=int(current_user["id"]))


@router.delete("/images/{image_id}")
async def delete_image(
    image_id: int,
    current_user: dict = Depends(auth_dependencies.get_current_user),
) -> dict:
    return await service.delete_image(image_id, user_id=int(current_user["id"]))


@router.get("/albums/{album_id}/albumimages", response_model=list[schemas.AlbumImageResponse])
async def list_album_images(
    album_id: int,
    current_user: dict = Depends(auth_dependencies.get_current_user),
) -> list[schemas.AlbumImageResponse]:
    return await service.list_album_images(album_id, user_id=int(current_user["id"]))


@router.post("/albums/images")
async def add_image_to_album(
    payload: schemas.AlbumImageLinkRequest,
    current_user: dict = Depends(auth_dependencies.get_current_user),
) -> dict:
    return await service.add_image_to_album(
        payload.albumid,
        payload.imageid,
        user_id=int(current_user["id"]),
    )


@router.put("/albums/{album_id}/albumimages/{image_id}")
async def update_image_in_album(
    album_id: int,
    image_id: int,
    payload: schemas.AlbumImageUpdateRequest,
    current_user: dict = Depends(auth_dependencies.get_current_user),
) -> dict:
    return await service.update_image_in_album(
        album_id,
        image_id,
        payload,
        user_id=int(current_user["id"]),
    )


@router.delete("/albums/{album_id}/images/{image_id}")
async def remove_image_from_album(
    album_id: int,
    image_id: int,
    current_user: dict = Depends(auth_dependencies.get_current_user),
) -> dict:
    return await service.remove_image_from_album(
        album_id,
        image_id,
        user_id=int(current_user["id"]),
    )
