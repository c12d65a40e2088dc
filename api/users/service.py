"""
User business logic.
"""

from __future__ import annotations

import logging
import math

from fastapi import HTTPException, status

from auth import security
from auth.schemas import Role

from . import repository, schemas

logger = logging.getLogger(__name__)


def _bad_request(detail: str = "Invalid input.") -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


def total_pages(total_users: int, limit: int) -> int:
    return math.ceil(total_users / limit)


async def create_user(payload: schemas.CreateUserRequest) -> dict:
    username = payload.username.strip()
    if not username or not payload.password:
        raise _bad_request()

    if await repository.get_user_id_by_username(username) is not None:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Username already exists.")

    password_hash = security.hash_password(payload.password)
    try:
        user_id = await repository.create_user_with_role(
            username=username,
            password_hash=password_hash,
            role=payload.role.value,
        )
    except repository.UsernameTakenError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Username already exists.") from exc
    except repository.RoleAssignmentError as exc:
        logger.warning("role_assignment_failed username=%s role=%s", username, payload.role.value)
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="User creation failed.") from exc

    logger.info("user_created user_id=%s role=%s", user_id, payload.role.value)
    return {"message": "User created successfully", "id": user_id}


def _require_self_or_admin(user_id: int, current_user: dict) -> None:
    if int(current_user["id"]) == user_id or current_user.get("role") == Role.ADMIN.value:
        return
    raise HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="You may only change your own account.",
    )


async def update_user(user_id: int, payload: schemas.UpdateUserRequest, *, current_user: dict) -> dict:
    _require_self_or_admin(user_id, current_user)
    username = payload.username.strip()
    if not username:
        raise _bad_request()

    try:
        updated = await repository.update_user(
            user_id,
            username=username,
            password_hash=security.hash_password(payload.password),
        )
    except repository.UsernameTakenError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Username already exists.") from exc
    if not updated:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found.")
    return {"message": "User updated"}


async def delete_user(user_id: int, *, current_user: dict) -> dict:
    _require_self_or_admin(user_id, current_user)
    if not await repository.delete_user(user_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found.")
    logger.info("user_deleted user_id=%s by=%s", user_id, current_user["id"])
    return {"message": "User deleted"}


def _summary(row: dict) -> schemas.UserSummary:
    return schemas.UserSummary(id=int(row["id"]), username=str(row["username"]), role=row.get("role"))


async def list_users() -> list[schemas.UserSummary]:
    """
    Admin listing of every user with their role, ordered by id.
    """
    return [_summary(row) for row in await repository.list_all_users()]


async def list_users_paged(*, page: int, limit: int) -> schemas.UserPage:
    """
    Admin listing. Pages are 1-based; a page past the end is empty.
    """
    if page < 1 or limit < 1:
        raise _bad_request("Invalid page or limit.")

    total = await repository.count_users()
    offset = (page - 1) * limit
    rows: list[dict] = []
    # Past-the-end pages skip the query; LIMIT/OFFSET never exceed the row count.
    if offset < total:
        rows = await repository.list_users(limit=min(limit, total - offset), offset=offset)
    return schemas.UserPage(users=[_summary(row) for row in rows], totalPages=total_pages(total, limit))
