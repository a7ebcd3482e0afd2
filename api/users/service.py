"""
User-management business logic.
"""

from __future__ import annotations

from typing import Any

import asyncpg
from fastapi import HTTPException, status

from auth import security
from core.db import Database

from . import repository, schemas


def to_user_dto(row: dict[str, Any]) -> dict[str, Any]:
    return {
        "id": int(row["id"]),
        "email": str(row["email"]),
        "name": row.get("name"),
        "createdAt": row.get("created_at"),
        "updatedAt": row.get("updated_at"),
    }


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found.")


def _email_taken() -> HTTPException:
    return HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email is already registered.")


async def list_users(db: Database, *, search_query: str = "") -> list[dict[str, Any]]:
    rows = await repository.list_users(db, search_query=search_query)
    return [to_user_dto(row) for row in rows]


async def get_user(db: Database, user_id: int) -> dict[str, Any]:
    row = await repository.get_user_by_id(db, user_id)
    if row is None:
        raise _not_found()
    return to_user_dto(row)


async def create_user(db: Database, payload: schemas.CreateUserRequest) -> dict[str, Any]:
    if await repository.get_user_by_email(db, payload.email) is not None:
        raise _email_taken()

    try:
        row = await repository.create_user(
            db,
            email=payload.email,
            password_hash=security.hash_password(payload.password),
            name=payload.name or None,
        )
    except asyncpg.UniqueViolationError as exc:
        # Lost a race with a concurrent signup for the same email.
        raise _email_taken() from exc
    return to_user_dto(row)


async def update_user(db: Database, user_id: int, payload: schemas.UpdateUserRequest) -> dict[str, Any]:
    existing = await repository.get_user_by_id(db, user_id)
    if existing is None:
        raise _not_found()

    sent = payload.model_dump(exclude_unset=True)
    changes: dict[str, Any] = {}

    if "email" in sent:
        email = repository.normalize_email(sent["email"])
        if email != repository.normalize_email(existing["email"]):
            other = await repository.get_user_by_email(db, email)
            if other is not None and int(other["id"]) != user_id:
                raise HTTPException(
                    status_code=status.HTTP_409_CONFLICT,
                    detail="Email is already used by another user.",
                )
        changes["email"] = email
    if "name" in sent:
        changes["name"] = sent["name"] or None
    if "password" in sent:
        changes["password_hash"] = security.hash_password(sent["password"])

    try:
        row = await repository.update_user(db, user_id, changes)
    except asyncpg.UniqueViolationError as exc:
        raise _email_taken() from exc
    if row is None:
        raise _not_found()
    return to_user_dto(row)


async def delete_user(db: Database, user_id: int) -> None:
    if not await repository.delete_user(db, user_id):
        raise _not_found()
