"""
User-management API endpoints. Every route requires a logged-in user.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status

from auth import dependencies as auth_dependencies
from core.db import Database, RowId, get_db

from . import schemas, service

router = APIRouter(dependencies=[Depends(auth_dependencies.get_current_user)])


@router.get("/users")
async def list_users(
    q: str = Query(default="", max_length=200),
    db: Database = Depends(get_db),
) -> dict:
    return {"data": await service.list_users(db, search_query=q)}


@router.get("/users/{user_id}")
async def get_user(user_id: RowId, db: Database = Depends(get_db)) -> dict:
    return {"data": await service.get_user(db, user_id)}


@router.post("/users", status_code=status.HTTP_201_CREATED)
async def create_user(
    request: schemas.CreateUserRequest,
    db: Database = Depends(get_db),
) -> dict:
    return {"data": await service.create_user(db, request)}


@router.put("/users/{user_id}")
async def update_user(
    user_id: RowId,
    request: schemas.UpdateUserRequest,
    db: Database = Depends(get_db),
) -> dict:
    return {"data": await service.update_user(db, user_id, request)}


@router.delete("/users/{user_id}")
async def delete_user(user_id: RowId, db: Database = Depends(get_db)) -> dict:
    await service.delete_user(db, user_id)
    return {"message": "User deleted."}
