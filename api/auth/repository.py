"""
Auth persistence helpers: credentials, sessions and roles.
"""

from __future__ import annotations

from datetime import datetime, timezone

from core import db


async def get_credentials_by_username(username: str) -> dict | None:
    return await db.fetch_one(
        """
        SELECT id, password_hash
        FROM users
        WHERE username = $1
        """,
        username,
    )


async def get_user_with_role(user_id: int) -> dict | None:
    return await db.fetch_one(
        """
        SELECT u.id, u.username, r.name AS role
        FROM users u
        LEFT JOIN user_roles ur ON ur.user_id = u.id
        LEFT JOIN roles r ON r.id = ur.role_id
        WHERE u.id = $1
        """,
        user_id,
    )


async def get_role_names(user_id: int) -> list[str]:
    rows = await db.fetch_all(
        """
        SELECT r.name
        FROM roles r
        JOIN user_roles ur ON ur.role_id = r.id
        WHERE ur.user_id = $1
        ORDER BY r.name
        """,
        user_id,
    )
    return [str(row["name"]) for row in rows]


async def insert_session(*, user_id: int, token_hash: str, expires_at: datetime) -> dict:
    if expires_at.tzinfo is None:
        expires_at = expires_at.replace(tzinfo=timezone.utc)

    row = await db.fetch_one(
        """
        INSERT INTO sessions (user_id, token_hash, expires_at)
        VALUES ($1, $2, $3)
        RETURNING id, user_id, expires_at
        """,
        user_id,
        token_hash,
        expires_at,
    )
    if row is None:
        raise RuntimeError("Failed to insert session.")
    return row


async def get_live_session(token_hash: str) -> dict | None:
    return await db.fetch_one(
        """
        SELECT id, user_id, expires_at
        FROM sessions
        WHERE token_hash = $1
          AND revoked_at IS NULL
          AND expires_at > now()
        """,
        token_hash,
    )


async def revoke_session(token_hash: str) -> bool:
    row = await db.fetch_one(
        """
        UPDATE sessions
        SET revoked_at = now()
        WHERE token_hash = $1
          AND revoked_at IS NULL
        RETURNING id
        """,
        token_hash,
    )
    return row is not None
