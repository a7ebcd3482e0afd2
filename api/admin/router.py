"""
Admin API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from auth import dependencies as auth_dependencies
from core.db import Database, get_db

from . import service

router = APIRouter()


@router.get("/admin/dashboard")
async def get_dashboard(
    db: Database = Depends(get_db),
    current_user: dict = Depends(auth_dependencies.get_current_user),
) -> dict:
    return await service.dashboard(db, current_user=current_user)
