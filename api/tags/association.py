"""
Tag-set persistence shared by every "parent row with tags" table.

A parent (album, image) owns a set of tags stored one row per tag in its own
tag table: `<tag_table>(<parent_column>, tag)` with a primary key on both
columns. Tag sets are never patched: an update deletes every row of the
parent and inserts the new set.

All writes here take an explicit connection so they join the caller's
transaction. `create_with_tags` opens its own.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

import asyncpg

from core import db


def parse_tags(raw: str | Iterable[str] | None) -> list[str]:
    """
    Normalize user input into an ordered, duplicate-free tag list.

    A string is split on commas; a sequence is taken item by item. Every
    token is stripped and empty tokens are dropped. The first occurrence of
    a duplicate wins.
    """
    if raw is None:
        return []
    tokens = raw.split(",") if isinstance(raw, str) else [str(item) for item in raw]
    cleaned = (token.strip() for token in tokens)
    return list(dict.fromkeys(token for token in cleaned if token))


@dataclass(frozen=True)
class TagAssociation:
    tag_table: str
    parent_column: str

    def join_sql(self, parent_alias: str, tag_alias: str = "t") -> str:
        return (
            f"LEFT JOIN {self.tag_table} {tag_alias} "
            f"ON {tag_alias}.{self.parent_column} = {parent_alias}.id"
        )

    def aggregate_sql(self, tag_alias: str = "t") -> str:
        # One row per parent after GROUP BY; parents without tags get '{}'.
        return (
            f"COALESCE(array_agg({tag_alias}.tag ORDER BY {tag_alias}.tag) "
            f"FILTER (WHERE {tag_alias}.tag IS NOT NULL), ARRAY[]::text[]) AS tags"
        )

    async def insert_tags(self, conn: asyncpg.Connection, parent_id: int, tags: list[str]) -> int:
        if not tags:
            return 0
        await conn.executemany(
            f"""
            INSERT INTO {self.tag_table} ({self.parent_column}, tag)
            VALUES ($1, $2)
            ON CONFLICT DO NOTHING
            """,
            [(parent_id, tag) for tag in tags],
        )
        return len(tags)

    async def replace_tags(self, conn: asyncpg.Connection, parent_id: int, tags: list[str]) -> int:
        """
        Delete the whole tag set of `parent_id`, then insert `tags`.

        Must run inside a transaction that already holds the parent row lock
        (see `albums.repository.update_album`), otherwise two replaces on
        the same parent can interleave.
        """
        await conn.execute(
            f"DELETE FROM {self.tag_table} WHERE {self.parent_column} = $1",
            parent_id,
        )
        return await self.insert_tags(conn, parent_id, tags)

    async def create_with_tags(self, insert_sql: str, *args: Any, tags: list[str]) -> int | None:
        """
        Insert a parent row and its tag set in a single transaction.

        `insert_sql` must return the generated key as `id`. Returns None when
        the insert produced no row. Any failure while inserting tags rolls
        the parent insert back too.
        """
        async with db.transaction() as conn:
            row = await conn.fetchrow(insert_sql, *args)
            if row is None:
                return None
            parent_id = int(row["id"])
            await self.insert_tags(conn, parent_id, tags)
            return parent_id

    async def fetch_tags(self, parent_id: int) -> list[str]:
        rows = await db.fetch_all(
            f"SELECT tag FROM {self.tag_table} WHERE {self.parent_column} = $1 ORDER BY tag",
            parent_id,
        )
        return [str(row["tag"]) for row in rows]
