"""
User persistence (raw SQL).
"""

from __future__ import annotations

import asyncpg

from core import db


class UsernameTakenError(RuntimeError):
    pass


class RoleAssignmentError(RuntimeError):
    pass


async def create_user_with_role(*, username: str, password_hash: str, role: str) -> int:
    """
    Insert a user and its single role row in one transaction.

    Raises UsernameTakenError or RoleAssignmentError; either way nothing is
    left behind.
    """
    try:
        async with db.transaction() as conn:
            row = await conn.fetchrow(
                """
                INSERT INTO users (username, password_hash)
                VALUES ($1, $2)
                ON CONFLICT (username) DO NOTHING
                RETURNING id
                """,
                username,
                password_hash,
            )
            if row is None:
                raise UsernameTakenError("Username already exists.")

            user_id = int(row["id"])
            assigned = await conn.fetchrow(
                """
                INSERT INTO user_roles (user_id, role_id)
                SELECT $1::bigint, r.id
                FROM roles r
                WHERE r.name = $2
                RETURNING user_id
                """,
                user_id,
                role,
            )
            if assigned is None:
                raise RoleAssignmentError(f"Role {role!r} does not exist.")
            return user_id
    except asyncpg.UniqueViolationError as exc:
        raise UsernameTakenError("Username already exists.") from exc


async def get_user_id_by_username(username: str) -> int | None:
    row = await db.fetch_one("SELECT id FROM users WHERE username = $1", username)
    return int(row["id"]) if row is not None else None


async def update_user(user_id: int, *, username: str, password_hash: str) -> bool:
    try:
        row = await db.fetch_one(
            """
            UPDATE users
            SET username = $2,
                password_hash = $3
            WHERE id = $1
            RETURNING id
            """,
            user_id,
            username,
            password_hash,
        )
    except asyncpg.UniqueViolationError as exc:
        raise UsernameTakenError("Username already exists.") from exc
    return row is not None


async def delete_user(user_id: int) -> bool:
    # Albums, images, their tags/joins, role and sessions cascade.
    row = await db.fetch_one("DELETE FROM users WHERE id = $1 RETURNING id", user_id)
    return row is not None


async def count_users() -> int:
    row = await db.fetch_one("SELECT count(*) AS n FROM users")
    return int((row or {}).get("n", 0))


_USERS_WITH_ROLE_SQL = """
    SELECT u.id, u.username, r.name AS role
    FROM users u
    LEFT JOIN user_roles ur ON ur.user_id = u.id
    LEFT JOIN roles r ON r.id = ur.role_id
    ORDER BY u.id
"""


async def list_all_users() -> list[dict]:
    return await db.fetch_all(_USERS_WITH_ROLE_SQL)


async def list_users(*, limit: int, offset: int) -> list[dict]:
    return await db.fetch_all(_USERS_WITH_ROLE_SQL + "LIMIT $1 OFFSET $2", limit, offset)
