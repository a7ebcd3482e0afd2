"""
Segment API endpoints (public, read-only).
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException

from core.db import Database, get_db

from . import repository

router = APIRouter()


def to_segment_dto(row: dict[str, Any]) -> dict[str, Any]:
    return {"id": int(row["id"]), "slug": str(row["slug"]), "label": str(row["label"])}


@router.get("/segments")
async def list_segments(db: Database = Depends(get_db)) -> list[dict]:
    return [to_segment_dto(row) for row in await repository.list_segments(db)]


@router.get("/segments/{slug}")
async def get_segment(slug: str, db: Database = Depends(get_db)) -> dict:
    row = await repository.get_segment_by_slug(db, slug)
    if row is None:
        raise HTTPException(status_code=404, detail="Segment not found.")
    return to_segment_dto(row)
