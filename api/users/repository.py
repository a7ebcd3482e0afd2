"""
User persistence (raw SQL).

`password_hash` is only selected by the lookups that auth needs;
listing queries never return it.
"""

from __future__ import annotations

from typing import Any

from core.db import Database

_PUBLIC_COLUMNS = "id, email, name, created_at, updated_at"


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


async def list_users(db: Database, *, search_query: str = "") -> list[dict[str, Any]]:
    q = (search_query or "").strip()
    return await db.fetch_all(
        f"""
        SELECT {_PUBLIC_COLUMNS}
        FROM users
        WHERE $1 = ''
           OR email ILIKE ('%' || $1 || '%')
           OR name ILIKE ('%' || $1 || '%')
        ORDER BY created_at DESC, id DESC
        """,
        q,
    )


async def get_user_by_id(db: Database, user_id: int) -> dict[str, Any] | None:
    return await db.fetch_one(
        f"""
        SELECT {_PUBLIC_COLUMNS}, password_hash
        FROM users
        WHERE id = $1
        """,
        user_id,
    )


async def get_user_by_email(db: Database, email: str) -> dict[str, Any] | None:
    return await db.fetch_one(
        f"""
        SELECT {_PUBLIC_COLUMNS}, password_hash
        FROM users
        WHERE lower(email) = lower($1)
        """,
        normalize_email(email),
    )


async def create_user(
    db: Database,
    *,
    email: str,
    password_hash: str,
    name: str | None = None,
) -> dict[str, Any]:
    row = await db.fetch_one(
        f"""
        INSERT INTO users (email, password_hash, name)
        VALUES ($1, $2, $3)
        RETURNING {_PUBLIC_COLUMNS}
        """,
        normalize_email(email),
        password_hash,
        name,
    )
    if row is None:
        raise RuntimeError("Failed to create user.")
    return row


_UPDATABLE = ("email", "name", "password_hash")


async def update_user(db: Database, user_id: int, changes: dict[str, Any]) -> dict[str, Any] | None:
    """
    Apply a partial update. Only keys present in `changes` are written.
    """
    columns = [c for c in _UPDATABLE if c in changes]
    if not columns:
        raise ValueError("update_user called without changes.")

    values = [normalize_email(changes[c]) if c == "email" else changes[c] for c in columns]
    assignments = ", ".join(f"{c} = ${i}" for i, c in enumerate(columns, start=2))
    return await db.fetch_one(
        f"""
        UPDATE users
        SET {assignments},
            updated_at = now()
        WHERE id = $1
        RETURNING {_PUBLIC_COLUMNS}
        """,
        user_id,
        *values,
    )


async def delete_user(db: Database, user_id: int) -> bool:
    row = await db.fetch_one("DELETE FROM users WHERE id = $1 RETURNING id", user_id)
    return row is not None
