"""
Project business logic.

Create/update flow:
1. normalize tags (array, JSON text or comma text)
2. validate the body
3. resolve the segment slug to its id
4. resolve the image (uploaded file > URL > existing)
5. write and map the joined row to the public DTO

There is no transaction around 3-5, and an uploaded image is not removed
from Cloudinary if the write fails afterwards.
"""

from __future__ import annotations

from typing import Any

from fastapi import HTTPException, status
from pydantic import ValidationError

from core import errors
from core.db import Database
from segments import repository as segment_repository

from . import images, repository, schemas
from .tags import deserialize_tags, normalize_tags, serialize_tags

UNKNOWN_SEGMENT_SLUG = "unknown"


def to_project_dto(row: dict[str, Any]) -> dict[str, Any]:
    return {
        "id": int(row["id"]),
        "segment": row.get("segment_slug") or UNKNOWN_SEGMENT_SLUG,
        "category": row["category"],
        "title": row["title"],
        "result": row["result"],
        "details": row["details"],
        "tags": deserialize_tags(row.get("tags")),
        "image": row["image"],
        "imageAlt": row.get("image_alt"),
    }


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Project not found.")


async def _segment_id_for(db: Database, slug: str) -> int:
    segment = await segment_repository.get_segment_by_slug(db, slug)
    if segment is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Segment '{slug}' not found.",
        )
    return int(segment["id"])


async def list_projects(db: Database, *, segment: str | None = None) -> list[dict[str, Any]]:
    slug = (segment or "").strip()
    rows = await repository.list_projects(db, segment_slug=slug if slug and slug != "all" else None)
    return [to_project_dto(row) for row in rows]


async def get_project(db: Database, project_id: int) -> dict[str, Any]:
    row = await repository.get_project(db, project_id)
    if row is None:
        raise _not_found()
    return to_project_dto(row)


async def create_project(
    db: Database,
    body: dict[str, Any],
    *,
    uploaded: images.UploadedImage | None = None,
) -> dict[str, Any]:
    fields = dict(body)
    tags = normalize_tags(fields.pop("tags", None))
    if tags is not None:
        fields["tags"] = tags

    try:
        payload = schemas.ProjectCreateRequest.model_validate(fields)
    except ValidationError as exc:
        raise errors.validation_exception(exc) from exc

    segment_id = await _segment_id_for(db, payload.segment)
    image = await images.resolve_create_image(uploaded, payload.image)

    row = await repository.create_project(
        db,
        segment_id=segment_id,
        category=payload.category,
        title=payload.title,
        result=payload.result,
        details=payload.details,
        tags=serialize_tags(payload.tags),
        image=image,
        image_alt=payload.image_alt or payload.title,
    )
    return to_project_dto(row)


async def update_project(
    db: Database,
    project_id: int,
    body: dict[str, Any],
    *,
    uploaded: images.UploadedImage | None = None,
) -> dict[str, Any]:
    existing = await repository.get_project(db, project_id)
    if existing is None:
        raise _not_found()

    fields = dict(body)
    if "tags" in fields:
        # Sent but blank clears the tags; not sent keeps them.
        fields["tags"] = normalize_tags(fields["tags"]) or []

    try:
        payload = schemas.ProjectUpdateRequest.model_validate(fields)
    except ValidationError as exc:
        raise errors.validation_exception(exc) from exc

    sent = payload.model_dump(exclude_unset=True)
    changes: dict[str, Any] = {
        key: sent[key] for key in ("category", "title", "result", "details", "image_alt") if key in sent
    }
    if "tags" in sent:
        changes["tags"] = serialize_tags(sent["tags"])
    if "segment" in sent:
        changes["segment_id"] = await _segment_id_for(db, sent["segment"])

    image = await images.resolve_update_image(str(existing["image"]), uploaded, sent.get("image"))
    if image != existing["image"]:
        changes["image"] = image

    row = await repository.update_project(db, project_id, changes)
    if row is None:
        raise _not_found()
    return to_project_dto(row)


async def delete_project(db: Database, project_id: int) -> None:
    # The Cloudinary asset is left in place.
    if not await repository.delete_project(db, project_id):
        raise _not_found()
