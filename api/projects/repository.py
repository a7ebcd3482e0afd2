"""
Project persistence (raw SQL).

Project rows are always returned joined with their segment
(`segment_slug`, `segment_label`). The join is a LEFT JOIN so a project
whose segment row is gone still comes back.
"""

from __future__ import annotations

from typing import Any

from core.db import Database

_SELECT = """
    SELECT p.id, p.segment_id, p.category, p.title, p.result, p.details,
           p.tags, p.image, p.image_alt, p.created_at, p.updated_at,
           s.slug AS segment_slug, s.label AS segment_label
"""


async def list_projects(
    db: Database,
    *,
    segment_slug: str | None = None,
    limit: int | None = None,
) -> list[dict[str, Any]]:
    return await db.fetch_all(
        f"""
        {_SELECT}
        FROM projects p
        LEFT JOIN segments s ON s.id = p.segment_id
        WHERE ($1::text IS NULL OR s.slug = $1)
        ORDER BY p.created_at DESC, p.id DESC
        LIMIT $2
        """,
        segment_slug,
        limit,
    )


async def get_project(db: Database, project_id: int) -> dict[str, Any] | None:
    return await db.fetch_one(
        f"""
        {_SELECT}
        FROM projects p
        LEFT JOIN segments s ON s.id = p.segment_id
        WHERE p.id = $1
        """,
        project_id,
    )


async def create_project(
    db: Database,
    *,
    segment_id: int,
    category: str,
    title: str,
    result: str,
    details: str,
    tags: str,
    image: str,
    image_alt: str,
) -> dict[str, Any]:
    row = await db.fetch_one(
        f"""
        WITH p AS (
            INSERT INTO projects (segment_id, category, title, result, details, tags, image, image_alt)
            VALUES ($1, $2, $3, $4, $5, $6, $7, $8)
            RETURNING *
        )
        {_SELECT}
        FROM p
        LEFT JOIN segments s ON s.id = p.segment_id
        """,
        segment_id,
        category,
        title,
        result,
        details,
        tags,
        image,
        image_alt,
    )
    if row is None:
        raise RuntimeError("Failed to create project.")
    return row


_UPDATABLE = ("segment_id", "category", "title", "result", "details", "tags", "image", "image_alt")


async def update_project(db: Database, project_id: int, changes: dict[str, Any]) -> dict[str, Any] | None:
    """
    Apply a partial update. Only keys present in `changes` are written.
    """
    columns = [c for c in _UPDATABLE if c in changes]
    if not columns:
        return await get_project(db, project_id)

    assignments = ", ".join(f"{c} = ${i}" for i, c in enumerate(columns, start=2))
    return await db.fetch_one(
        f"""
        WITH p AS (
            UPDATE projects
            SET {assignments},
                updated_at = now()
            WHERE id = $1
            RETURNING *
        )
        {_SELECT}
        FROM p
        LEFT JOIN segments s ON s.id = p.segment_id
        """,
        project_id,
        *[changes[c] for c in columns],
    )


async def delete_project(db: Database, project_id: int) -> bool:
    row = await db.fetch_one("DELETE FROM projects WHERE id = $1 RETURNING id", project_id)
    return row is not None


async def count_projects(db: Database) -> int:
    return int(await db.fetch_val("SELECT count(*) FROM projects") or 0)


async def count_projects_by_segment(db: Database) -> list[dict[str, Any]]:
    return await db.fetch_all(
        """
        SELECT segment_id, count(*) AS count
        FROM projects
        GROUP BY segment_id
        ORDER BY segment_id
        """
    )
