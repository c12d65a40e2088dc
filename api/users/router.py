"""
User API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status

from auth import dependencies as auth_dependencies

from . import schemas, service

router = APIRouter()


@router.post("/users", status_code=status.HTTP_201_CREATED)
async def create_user(payload: schemas.CreateUserRequest) -> dict:
    return await service.create_user(payload)


@router.put("/users/{user_id}")
async def update_user(
    user_id: int,
    payload: schemas.UpdateUserRequest,
    current_user: dict = Depends(auth_dependencies.get_current_user),
) -> dict:
    return await service.update_user(user_id, payload, current_user=current_user)


@router.delete("/users/{user_id}")
async def delete_user(
    user_id: int,
    current_user: dict = Depends(auth_dependencies.get_current_user),
) -> dict:
    return await service.delete_user(user_id, current_user=current_user)


@router.get("/users/p", response_model=schemas.UserPage)
async def list_users_paged(
    page: int = Query(...),
    limit: int = Query(...),
    _: dict = Depends(auth_dependencies.get_current_admin),
) -> schemas.UserPage:
    return await service.list_users_paged(page=page, limit=limit)


@router.get("/users", response_model=list[schemas.UserSummary])
async def list_users(
    _: dict = Depends(auth_dependencies.get_current_admin),
) -> list[schemas.UserSummary]:
    return await service.list_users()
