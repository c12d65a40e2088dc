"""
Auth API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response

from core import settings

from . import dependencies, schemas, service

router = APIRouter()


@router.post("/login", response_model=schemas.LoginResponse)
async def login(payload: schemas.LoginRequest, response: Response) -> schemas.LoginResponse:
    result = await service.login(payload)
    response.set_cookie(
        key=settings.session_cookie_name(),
        value=result.session_token,
        max_age=settings.session_ttl_hours() * 3600,
        httponly=True,
        samesite="lax",
        secure=settings.session_cookie_secure(),
    )
    return result


@router.post("/logout")
async def logout(
    response: Response,
    session_token: str | None = Depends(dependencies.get_session_token),
) -> dict:
    result = await service.logout(session_token)
    response.delete_cookie(settings.session_cookie_name())
    return result


@router.get("/user", response_model=schemas.CurrentUserResponse)
async def current_user(
    current_user: dict = Depends(dependencies.get_current_user),
) -> schemas.CurrentUserResponse:
    return service.me(current_user)


@router.get("/userroles", response_model=schemas.RolesResponse)
async def user_roles(
    current_user: dict = Depends(dependencies.get_current_user),
) -> schemas.RolesResponse:
    return await service.roles(int(current_user["id"]))
