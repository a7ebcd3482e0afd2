"""
Contact inbox API endpoints.

Submitting a message is public; reading and managing the inbox needs a
logged-in user.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status

from auth import dependencies as auth_dependencies
from core.db import Database, RowId, get_db

from . import schemas, service

router = APIRouter()


@router.post("/contact", status_code=status.HTTP_201_CREATED)
async def submit_message(
    request: schemas.ContactCreateRequest,
    db: Database = Depends(get_db),
) -> dict:
    return await service.submit_message(db, request)


@router.get("/contact")
async def list_messages(
    db: Database = Depends(get_db),
    _: dict = Depends(auth_dependencies.get_current_user),
) -> list[dict]:
    return await service.list_messages(db)


@router.get("/contact/{message_id}")
async def get_message(
    message_id: RowId,
    db: Database = Depends(get_db),
    _: dict = Depends(auth_dependencies.get_current_user),
) -> dict:
    return await service.get_message(db, message_id)


@router.put("/contact/{message_id}")
async def update_message(
    message_id: RowId,
    request: schemas.ContactUpdateRequest,
    db: Database = Depends(get_db),
    _: dict = Depends(auth_dependencies.get_current_user),
) -> dict:
    return await service.update_message(db, message_id, request)


@router.delete("/contact/{message_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_message(
    message_id: RowId,
    db: Database = Depends(get_db),
    _: dict = Depends(auth_dependencies.get_current_user),
) -> Response:
    await service.delete_message(db, message_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
