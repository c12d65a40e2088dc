"""
Auth business logic.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

from fastapi import HTTPException, status

from core import settings

from . import repository, schemas, security

logger = logging.getLogger(__name__)

# Same detail for unknown username and wrong password.
INVALID_CREDENTIALS = "Wrong username or password."


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _unauthorized(detail: str = "You must be logged in.") -> HTTPException:
    return HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)


async def login(payload: schemas.LoginRequest) -> schemas.LoginResponse:
    user_row = await repository.get_credentials_by_username(payload.username)
    if user_row is None:
        security.verify_password(payload.password, security.dummy_password_hash())
        raise _unauthorized(INVALID_CREDENTIALS)

    is_valid = security.verify_password(payload.password, str(user_row.get("password_hash") or ""))
    if not is_valid:
        raise _unauthorized(INVALID_CREDENTIALS)

    user_id = int(user_row["id"])
    raw_token = security.build_session_token()
    await repository.insert_session(
        user_id=user_id,
        token_hash=security.hash_session_token(raw_token),
        expires_at=_utc_now() + timedelta(hours=settings.session_ttl_hours()),
    )
    logger.info("login_succeeded user_id=%s", user_id)
    return schemas.LoginResponse(id=user_id, session_token=raw_token)


async def logout(raw_token: str | None) -> dict[str, str]:
    token = (raw_token or "").strip()
    revoked = bool(token) and await repository.revoke_session(security.hash_session_token(token))
    if not revoked:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Not logged in.",
        )
    return {"message": "Logout Success"}


async def resolve_session(raw_token: str | None) -> dict:
    """
    Map an opaque session token to the caller's identity.

    Authorized iff the token belongs to a live session whose user id is
    non-zero and still resolves to a user row.
    """
    token = (raw_token or "").strip()
    if not token:
        raise _unauthorized()

    session_row = await repository.get_live_session(security.hash_session_token(token))
    if session_row is None or not session_row.get("user_id"):
        raise _unauthorized()

    user_row = await repository.get_user_with_role(int(session_row["user_id"]))
    if user_row is None:
        raise _unauthorized()
    return user_row


def require_role(current_user: dict, role: schemas.Role) -> dict:
    # Exact, case-sensitive match against the caller's single role.
    if current_user.get("role") != role.value:
        raise _unauthorized("Insufficient role.")
    return current_user


def me(current_user: dict) -> schemas.CurrentUserResponse:
    return schemas.CurrentUserResponse(
        id=int(current_user["id"]),
        username=str(current_user["username"]),
        role=current_user.get("role"),
    )


async def roles(user_id: int) -> schemas.RolesResponse:
    return schemas.RolesResponse(roles=await repository.get_role_names(user_id))
