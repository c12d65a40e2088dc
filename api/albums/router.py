"""
Album API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from auth import dependencies as auth_dependencies

from . import schemas, service

router = APIRouter()


@router.get("/user/albums", response_model=list[schemas.AlbumResponse])
async def list_albums(
    current_user: dict = Depends(auth_dependencies.get_current_user),
) -> list[schemas.AlbumResponse]:
    return await service.list_albums(user_id=int(current_user["id"]))


@router.get("/user/albums/{album_id}", response_model=schemas.AlbumResponse)
async def get_album(
    album_id: int,
    current_user: dict = Depends(auth_dependencies.get_current_user),
) -> schemas.AlbumResponse:
    return await service.get_album(album_id, user_id=int(current_user["id"]))


@router.post("/albums")
async def create_album(
    payload: schemas.AlbumRequest,
    current_user: dict = Depends(auth_dependencies.get_current_user),
) -> dict:
    return await service.create_album(payload, user_id=int(current_user["id"]))


@router.put("/albums/{album_id}")
async def update_album(
    album_id: int,
    payload: schemas.AlbumRequest,
    current_user: dict = Depends(auth_dependencies.get_current_user),
) -> dict:
    return await service.update_album(album_id, payload, user_id=int(current_user["id"]))


@router.delete("/albums/{album_id}")
async def delete_album(
    album_id: int,
    current_user: dict = Depends(auth_dependencies.get_current_user),
) -> dict:
    return await service.delete_album(album_id, user_id=int(current_user["id"]))
