"""
Image persistence (raw SQL), including the album_images join table.

Image rows and album membership are always filtered by owner.
`album_images` carries nullable title/date/path overrides that shadow the
canonical image fields inside one album only.
"""

from __future__ import annotations

import logging
from datetime import date

import asyncpg

from core import db
from tags.association import TagAssociation

IMAGE_TAGS = TagAssociation(tag_table="image_tags", parent_column="image_id")

logger = logging.getLogger(__name__)


async def list_images(*, user_id: int) -> list[dict]:
    return await db.fetch_all(
        f"""
        SELECT i.id, i.title, i.date, i.path, {IMAGE_TAGS.aggregate_sql()}
        FROM images i
        {IMAGE_TAGS.join_sql("i")}
        WHERE i.user_id = $1
        GROUP BY i.id
        ORDER BY i.id
        """,
        user_id,
    )


async def get_image(image_id: int, *, user_id: int) -> dict | None:
    return await db.fetch_one(
        f"""
        SELECT i.id, i.title, i.date, i.path, {IMAGE_TAGS.aggregate_sql()}
        FROM images i
        {IMAGE_TAGS.join_sql("i")}
        WHERE i.id = $1
          AND i.user_id = $2
        GROUP BY i.id
        """,
        image_id,
        user_id,
    )


async def create_image(
    *,
    user_id: int,
    title: str,
    taken_on: date | None,
    path: str,
    tags: list[str],
) -> int | None:
    """
    Insert an image and its tags atomically.

    Tags are keyed by the generated image id; `path` is not unique.
    """
    try:
        return await IMAGE_TAGS.create_with_tags(
            """
            INSERT INTO images (user_id, title, date, path)
            VALUES ($1, $2, $3, $4)
            RETURNING id
            """,
            user_id,
            title,
            taken_on,
            path,
            tags=tags,
        )
    except asyncpg.ForeignKeyViolationError:
        logger.warning("image_create_dangling_owner user_id=%s", user_id)
        return None


async def update_image(
    image_id: int,
    *,
    user_id: int,
    title: str,
    taken_on: date | None,
    path: str | None,
    tags: list[str],
) -> bool:
    async with db.transaction() as conn:
        row = await conn.fetchrow(
            """
            UPDATE images
            SET title = $3,
                date = $4,
                path = COALESCE($5, path)
            WHERE id = $1
              AND user_id = $2
            RETURNING id
            """,
            image_id,
            user_id,
            title,
            taken_on,
            path,
        )
        if row is None:
            return False
        await IMAGE_TAGS.replace_tags(conn, image_id, tags)
        return True


async def delete_image(image_id: int, *, user_id: int) -> bool:
    row = await db.fetch_one(
        """
        DELETE FROM images
        WHERE id = $1
          AND user_id = $2
        RETURNING id
        """,
        image_id,
        user_id,
    )
    return row is not None


async def list_album_images(album_id: int, *, user_id: int) -> list[dict]:
    return await db.fetch_all(
        """
        SELECT i.id,
               COALESCE(ai.title, i.title) AS title,
               COALESCE(ai.date, i.date) AS date,
               COALESCE(ai.path, i.path) AS path
        FROM images i
        JOIN album_images ai ON ai.image_id = i.id
        JOIN albums a ON a.id = ai.album_id
        WHERE a.id = $1
          AND a.user_id = $2
        ORDER BY i.id
        """,
        album_id,
        user_id,
    )


async def add_image_to_album(album_id: int, image_id: int, *, user_id: int) -> bool:
    """
    Link an image to an album when both exist and belong to `user_id`.

    False for a duplicate pair or a missing/foreign album or image.
    """
    try:
        row = await db.fetch_one(
            """
            INSERT INTO album_images (album_id, image_id)
            SELECT a.id, i.id
            FROM albums a
            JOIN images i ON i.user_id = a.user_id
            WHERE a.id = $1
              AND i.id = $2
              AND a.user_id = $3
            ON CONFLICT DO NOTHING
            RETURNING album_id
            """,
            album_id,
            image_id,
            user_id,
        )
    except asyncpg.ForeignKeyViolationError:
        # Album or image deleted concurrently.
        return False
    return row is not None


async def remove_image_from_album(album_id: int, image_id: int, *, user_id: int) -> bool:
    row = await db.fetch_one(
        """
        DELETE FROM album_images ai
        USING albums a
        WHERE ai.album_id = $1
          AND ai.image_id = $2
          AND a.id = ai.album_id
          AND a.user_id = $3
        RETURNING ai.image_id
        """,
        album_id,
        image_id,
        user_id,
    )
    return row is not None


async def update_image_in_album(
    album_id: int,
    image_id: int,
    *,
    user_id: int,
    title: str | None,
    taken_on: date | None,
    path: str | None,
) -> bool:
    # Writes the album-scoped overrides only; the images row is untouched.
    row = await db.fetch_one(
        """
        UPDATE album_images ai
        SET title = $4,
            date = $5,
            path = $6
        FROM albums a
        WHERE ai.album_id = $1
          AND ai.image_id = $2
          AND a.id = ai.album_id
          AND a.user_id = $3
        RETURNING ai.image_id
        """,
        album_id,
        image_id,
        user_id,
        title,
        taken_on,
        path,
    )
    return row is not None
