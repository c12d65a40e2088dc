"""
Album persistence (raw SQL).

Every statement filters by owner (`user_id`) as well as by id.
"""

from __future__ import annotations

import logging

import asyncpg

from core import db
from tags.association import TagAssociation

ALBUM_TAGS = TagAssociation(tag_table="album_tags", parent_column="album_id")

logger = logging.getLogger(__name__)


async def list_albums(*, user_id: int) -> list[dict]:
    return await db.fetch_all(
        f"""
        SELECT a.id, a.title, {ALBUM_TAGS.aggregate_sql()}
        FROM albums a
        {ALBUM_TAGS.join_sql("a")}
        WHERE a.user_id = $1
        GROUP BY a.id
        ORDER BY a.id
        """,
        user_id,
    )


async def get_album(album_id: int, *, user_id: int) -> dict | None:
    return await db.fetch_one(
        f"""
        SELECT a.id, a.title, {ALBUM_TAGS.aggregate_sql()}
        FROM albums a
        {ALBUM_TAGS.join_sql("a")}
        WHERE a.id = $1
          AND a.user_id = $2
        GROUP BY a.id
        """,
        album_id,
        user_id,
    )


async def create_album(*, user_id: int, title: str, tags: list[str]) -> int | None:
    """
    Insert an album and its tags atomically. Returns the new id, or None
    when the owner row does not exist.
    """
    try:
        return await ALBUM_TAGS.create_with_tags(
            """
            INSERT INTO albums (user_id, title)
            VALUES ($1, $2)
            RETURNING id
            """,
            user_id,
            title,
            tags=tags,
        )
    except asyncpg.ForeignKeyViolationError:
        logger.warning("album_create_dangling_owner user_id=%s", user_id)
        return None


async def update_album(album_id: int, *, user_id: int, title: str, tags: list[str]) -> bool:
    async with db.transaction() as conn:
        # The UPDATE row lock serializes concurrent tag replaces on this album.
        row = await conn.fetchrow(
            """
            UPDATE albums
            SET title = $3
            WHERE id = $1
              AND user_id = $2
            RETURNING id
            """,
            album_id,
            user_id,
            title,
        )
        if row is None:
            return False
        await ALBUM_TAGS.replace_tags(conn, album_id, tags)
        return True


async def delete_album(album_id: int, *, user_id: int) -> bool:
    # album_tags and album_images rows cascade.
    row = await db.fetch_one(
        """
        DELETE FROM albums
        WHERE id = $1
          AND user_id = $2
        RETURNING id
        """,
        album_id,
        user_id,
    )
    return row is not None
