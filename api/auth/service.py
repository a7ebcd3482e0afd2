"""
Auth business logic.

Accounts are created through the (gated) user-management API; this
module only verifies credentials and resolves bearer tokens.
"""

from __future__ import annotations

from fastapi import HTTPException, status

from core.db import Database
from users import repository as user_repository
from users import service as user_service

from . import schemas, security


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def login(db: Database, payload: schemas.LoginRequest) -> dict:
    user_row = await user_repository.get_user_by_email(db, payload.email)
    # Same message for unknown email and wrong password.
    if user_row is None or not security.verify_password(
        payload.password, str(user_row.get("password_hash") or "")
    ):
        raise _unauthorized("Invalid email or password.")

    access_token = security.build_access_token(
        user_id=int(user_row["id"]),
        email=str(user_row["email"]),
    )
    return {
        "user": user_service.to_user_dto(user_row),
        "accessToken": access_token,
        "tokenType": "bearer",
    }


async def get_user_from_access_token(db: Database, access_token: str) -> dict:
    try:
        payload = security.decode_access_token(access_token)
    except security.AuthSecurityError as exc:
        raise _unauthorized(str(exc)) from exc

    subject = str(payload.get("sub") or "").strip()
    if not subject.isdigit():
        raise _unauthorized("Invalid access token subject.")

    user_row = await user_repository.get_user_by_id(db, int(subject))
    if user_row is None:
        raise _unauthorized("User not found.")
    return user_row
