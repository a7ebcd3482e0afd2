"""
Contact-message persistence (raw SQL).
"""

from __future__ import annotations

from typing import Any

from core.db import Database

_COLUMNS = "id, name, email, whatsapp, message, is_read, created_at, updated_at"


async def create_message(
    db: Database,
    *,
    name: str,
    email: str,
    message: str,
    whatsapp: str | None = None,
) -> dict[str, Any]:
    # is_read falls back to the column default (false).
    row = await db.fetch_one(
        f"""
        INSERT INTO contact_messages (name, email, whatsapp, message)
        VALUES ($1, $2, $3, $4)
        RETURNING {_COLUMNS}
        """,
        name,
        email,
        whatsapp,
        message,
    )
    if row is None:
        raise RuntimeError("Failed to create contact message.")
    return row


async def list_messages(db: Database, *, limit: int | None = None) -> list[dict[str, Any]]:
    return await db.fetch_all(
        f"""
        SELECT {_COLUMNS}
        FROM contact_messages
        ORDER BY created_at DESC, id DESC
        LIMIT $1
        """,
        limit,
    )


async def get_message(db: Database, message_id: int) -> dict[str, Any] | None:
    return await db.fetch_one(
        f"""
        SELECT {_COLUMNS}
        FROM contact_messages
        WHERE id = $1
        """,
        message_id,
    )


_UPDATABLE = ("name", "email", "whatsapp", "message", "is_read")


async def update_message(db: Database, message_id: int, changes: dict[str, Any]) -> dict[str, Any] | None:
    """
    Apply a partial update. Only keys present in `changes` are written.
    """
    columns = [c for c in _UPDATABLE if c in changes]
    if not columns:
        raise ValueError("update_message called without changes.")

    assignments = ", ".join(f"{c} = ${i}" for i, c in enumerate(columns, start=2))
    return await db.fetch_one(
        f"""
        UPDATE contact_messages
        SET {assignments},
            updated_at = now()
        WHERE id = $1
        RETURNING {_COLUMNS}
        """,
        message_id,
        *[changes[c] for c in columns],
    )


async def delete_message(db: Database, message_id: int) -> bool:
    row = await db.fetch_one("DELETE FROM contact_messages WHERE id = $1 RETURNING id", message_id)
    return row is not None


async def count_messages(db: Database) -> int:
    return int(await db.fetch_val("SELECT count(*) FROM contact_messages") or 0)
