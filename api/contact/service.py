"""
Contact inbox business logic.
"""

from __future__ import annotations

from typing import Any

from fastapi import HTTPException, status

from core.db import Database

from . import repository, schemas


def to_contact_dto(row: dict[str, Any]) -> dict[str, Any]:
    return {
        "id": int(row["id"]),
        "name": row["name"],
        "email": row["email"],
        "whatsapp": row.get("whatsapp"),
        "message": row["message"],
        "isRead": bool(row.get("is_read", False)),
        "createdAt": row.get("created_at"),
    }


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Contact message not found.")


async def submit_message(db: Database, payload: schemas.ContactCreateRequest) -> dict[str, Any]:
    row = await repository.create_message(
        db,
        name=payload.name,
        email=str(payload.email),
        whatsapp=payload.whatsapp,
        message=payload.message,
    )
    return {"message": "Message sent.", "id": int(row["id"])}


async def list_messages(db: Database) -> list[dict[str, Any]]:
    return [to_contact_dto(row) for row in await repository.list_messages(db)]


async def get_message(db: Database, message_id: int) -> dict[str, Any]:
    row = await repository.get_message(db, message_id)
    if row is None:
        raise _not_found()
    return to_contact_dto(row)


async def update_message(
    db: Database,
    message_id: int,
    payload: schemas.ContactUpdateRequest,
) -> dict[str, Any]:
    if await repository.get_message(db, message_id) is None:
        raise _not_found()

    # exclude_unset keeps "sent as false" apart from "not sent".
    changes = payload.model_dump(exclude_unset=True)
    if "email" in changes:
        changes["email"] = str(changes["email"])
    if not changes:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No fields to update.")

    row = await repository.update_message(db, message_id, changes)
    if row is None:
        raise _not_found()
    return to_contact_dto(row)


async def delete_message(db: Database, message_id: int) -> None:
    if not await repository.delete_message(db, message_id):
        raise _not_found()
