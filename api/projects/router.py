"""
Project API endpoints.

Reads are public. Create/update/delete need a logged-in user and accept
either a JSON body or multipart/form-data with an optional `image` file.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, status
from starlette.datastructures import UploadFile

from auth import dependencies as auth_dependencies
from core.db import Database, RowId, get_db

from . import images, service

router = APIRouter()

_FORM_TYPES = ("multipart/form-data", "application/x-www-form-urlencoded")


async def _read_body(request: Request) -> tuple[dict[str, Any], images.UploadedImage | None]:
    """
    Return (text fields, uploaded image) from a JSON or form request.
    """
    content_type = request.headers.get("content-type", "").lower()

    if content_type.startswith(_FORM_TYPES):
        form = await request.form()
        fields: dict[str, Any] = {}
        uploaded: images.UploadedImage | None = None
        for key in form.keys():
            values = form.getlist(key)
            files = [v for v in values if isinstance(v, UploadFile)]
            texts = [v for v in values if isinstance(v, str)]
            if key == "image" and files and uploaded is None:
                if not images.is_empty_file_part(files[0]):
                    uploaded = await images.read_image_upload(files[0])
            if texts:
                # Repeated fields (tags=a&tags=b) arrive as a list.
                fields[key] = texts if len(texts) > 1 else texts[0]
        return fields, uploaded

    raw = await request.body()
    if not raw.strip():
        return {}, None
    try:
        body = await request.json()
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid JSON body.") from exc
    if not isinstance(body, dict):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="JSON body must be an object.")
    return body, None


@router.get("/projects")
async def list_projects(
    segment: str | None = Query(default=None, max_length=100),
    db: Database = Depends(get_db),
) -> list[dict]:
    return await service.list_projects(db, segment=segment)


@router.get("/projects/{project_id}")
async def get_project(project_id: RowId, db: Database = Depends(get_db)) -> dict:
    return await service.get_project(db, project_id)


@router.post("/projects", status_code=status.HTTP_201_CREATED)
async def create_project(
    request: Request,
    db: Database = Depends(get_db),
    _: dict = Depends(auth_dependencies.get_current_user),
) -> dict:
    body, uploaded = await _read_body(request)
    return await service.create_project(db, body, uploaded=uploaded)


@router.put("/projects/{project_id}")
async def update_project(
    project_id: RowId,
    request: Request,
    db: Database = Depends(get_db),
    _: dict = Depends(auth_dependencies.get_current_user),
) -> dict:
    body, uploaded = await _read_body(request)
    return await service.update_project(db, project_id, body, uploaded=uploaded)


@router.delete("/projects/{project_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_project(
    project_id: RowId,
    db: Database = Depends(get_db),
    _: dict = Depends(auth_dependencies.get_current_user),
) -> Response:
    await service.delete_project(db, project_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
