"""
Session gate for protected FastAPI routes.
"""

from __future__ import annotations

from fastapi import Depends, Request

from core import settings

from . import schemas, service


def _extract_bearer_token(authorization: str | None) -> str | None:
    raw = (authorization or "").strip()
    parts = raw.split(" ", 1)
    if len(parts) != 2 or parts[0].strip().lower() != "bearer":
        return None
    return parts[1].strip() or None


def get_session_token(request: Request) -> str | None:
    """
    The session cookie wins; an `Authorization: Bearer` header is the
    fallback for non-browser clients.
    """
    cookie = (request.cookies.get(settings.session_cookie_name()) or "").strip()
    if cookie:
        return cookie
    return _extract_bearer_token(request.headers.get("authorization"))


async def get_current_user(session_token: str | None = Depends(get_session_token)) -> dict:
    return await service.resolve_session(session_token)


async def get_current_admin(current_user: dict = Depends(get_current_user)) -> dict:
    return service.require_role(current_user, schemas.Role.ADMIN)
