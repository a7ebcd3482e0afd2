"""
Admin dashboard aggregation.

All reads are independent, so they run concurrently on separate pool
connections. Any failing read fails the whole dashboard.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from fastapi import HTTPException, status

from contact import repository as contact_repository
from core.db import Database
from projects import repository as project_repository
from projects.service import UNKNOWN_SEGMENT_SLUG
from segments import repository as segment_repository

RECENT_LIMIT = 5
UNKNOWN_SEGMENT_LABEL = "Unknown"

logger = logging.getLogger(__name__)


def _projects_by_segment(groups: list[dict], segments: list[dict]) -> list[dict[str, Any]]:
    by_id = {int(s["id"]): s for s in segments}
    result = []
    for group in groups:
        segment_id = int(group["segment_id"])
        segment = by_id.get(segment_id)
        result.append(
            {
                "segmentId": segment_id,
                "segmentSlug": segment["slug"] if segment else UNKNOWN_SEGMENT_SLUG,
                "segmentLabel": segment["label"] if segment else UNKNOWN_SEGMENT_LABEL,
                "count": int(group["count"]),
            }
        )
    return result


def _recent_project(row: dict) -> dict[str, Any]:
    return {
        "id": int(row["id"]),
        "segment": row.get("segment_slug") or UNKNOWN_SEGMENT_SLUG,
        "segmentLabel": row.get("segment_label") or UNKNOWN_SEGMENT_LABEL,
        "category": row["category"],
        "title": row["title"],
        "createdAt": row.get("created_at"),
    }


def _recent_contact(row: dict) -> dict[str, Any]:
    return {
        "id": int(row["id"]),
        "name": row["name"],
        "email": row["email"],
        "whatsapp": row.get("whatsapp"),
        "message": row["message"],
        "createdAt": row.get("created_at"),
    }


async def _collect(db: Database) -> dict[str, Any]:
    projects_count, segments_count, contacts_count, groups = await asyncio.gather(
        project_repository.count_projects(db),
        segment_repository.count_segments(db),
        contact_repository.count_messages(db),
        project_repository.count_projects_by_segment(db),
    )

    segment_ids = [int(g["segment_id"]) for g in groups]
    segments, recent_projects, recent_contacts = await asyncio.gather(
        segment_repository.get_segments_by_ids(db, segment_ids),
        project_repository.list_projects(db, limit=RECENT_LIMIT),
        contact_repository.list_messages(db, limit=RECENT_LIMIT),
    )

    return {
        "metrics": {
            "totalProjects": projects_count,
            "totalSegments": segments_count,
            "totalContacts": contacts_count,
            "projectsBySegment": _projects_by_segment(groups, segments),
        },
        "recentProjects": [_recent_project(row) for row in recent_projects],
        "recentContacts": [_recent_contact(row) for row in recent_contacts],
    }


async def dashboard(db: Database, *, current_user: dict) -> dict[str, Any]:
    try:
        summary = await _collect(db)
    except Exception as exc:
        logger.exception("dashboard_failed user_id=%s", current_user.get("id"))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to load dashboard.",
        ) from exc

    me = {
        "id": int(current_user["id"]),
        "email": current_user["email"],
        "name": current_user.get("name"),
    }
    return {"me": me, **summary}
