"""
Auth API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from core.db import Database, get_db
from users import service as user_service

from . import dependencies, schemas, service

router = APIRouter()


@router.post("/auth/login")
async def login(request: schemas.LoginRequest, db: Database = Depends(get_db)) -> dict:
    return await service.login(db, request)


@router.get("/auth/me")
async def me(current_user: dict = Depends(dependencies.get_current_user)) -> dict:
    return {"user": user_service.to_user_dto(current_user)}
