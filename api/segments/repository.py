"""
Segment persistence (raw SQL). Segments are read-only through the API.
"""

from __future__ import annotations

from typing import Any

from core.db import Database


async def list_segments(db: Database) -> list[dict[str, Any]]:
    return await db.fetch_all(
        """
        SELECT id, slug, label
        FROM segments
        ORDER BY id
        """
    )


async def get_segment_by_slug(db: Database, slug: str) -> dict[str, Any] | None:
    return await db.fetch_one(
        """
        SELECT id, slug, label
        FROM segments
        WHERE slug = $1
        """,
        slug,
    )


async def get_segments_by_ids(db: Database, segment_ids: list[int]) -> list[dict[str, Any]]:
    if not segment_ids:
        return []
    return await db.fetch_all(
        """
        SELECT id, slug, label
        FROM segments
        WHERE id = ANY($1::bigint[])
        """,
        segment_ids,
    )


async def count_segments(db: Database) -> int:
    return int(await db.fetch_val("SELECT count(*) FROM segments") or 0)
