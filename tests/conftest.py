"""
Pytest fixtures for the API test suite.

Strategy:
- the real FastAPI app is exercised through TestClient
- `get_db` is overridden with a dummy handle
- repository functions are replaced by an in-memory store, so routers,
  services, validation and the auth gate all run for real
- the Cloudinary uploader is replaced per test
"""

from __future__ import annotations

import itertools
import os
from datetime import datetime, timedelta, timezone
from typing import Any

import pytest
from fastapi.testclient import TestClient

os.environ.setdefault("JWT_SECRET", "test-secret-for-the-api-suite-0123456789")

from auth import security  # noqa: E402
from contact import repository as contact_repository  # noqa: E402
from core import cloudinary  # noqa: E402
from core.db import get_db  # noqa: E402
from projects import repository as project_repository  # noqa: E402
from segments import repository as segment_repository  # noqa: E402
from users import repository as user_repository  # noqa: E402


class FakeStore:
    """In-memory stand-in for the Postgres tables."""

    def __init__(self) -> None:
        self.users: dict[int, dict[str, Any]] = {}
        self.segments: dict[int, dict[str, Any]] = {}
        self.projects: dict[int, dict[str, Any]] = {}
        self.contacts: dict[int, dict[str, Any]] = {}
        self.writes: list[tuple[str, str]] = []
        self.fail_reads = False
        self._ids = itertools.count(1)
        self._ticks = itertools.count(1)
        self._epoch = datetime(2025, 1, 1, tzinfo=timezone.utc)

    def next_id(self) -> int:
        return next(self._ids)

    def now(self) -> datetime:
        return self._epoch + timedelta(seconds=next(self._ticks))

    # -- seeding helpers -------------------------------------------------

    def add_segment(self, slug: str, label: str) -> dict[str, Any]:
        row = {"id": self.next_id(), "slug": slug, "label": label}
        self.segments[row["id"]] = row
        return row

    def add_user(self, email: str, *, password_hash: str = "x", name: str | None = None) -> dict[str, Any]:
        ts = self.now()
        row = {
            "id": self.next_id(),
            "email": email,
            "password_hash": password_hash,
            "name": name,
            "created_at": ts,
            "updated_at": ts,
        }
        self.users[row["id"]] = row
        return row

    def add_project(self, segment_id: int, **fields: Any) -> dict[str, Any]:
        ts = self.now()
        row = {
            "id": self.next_id(),
            "segment_id": segment_id,
            "category": "Marketing",
            "title": "Launch campaign",
            "result": "Doubled leads",
            "details": "Full funnel rebuild",
            "tags": '["seo", "ads"]',
            "image": "https://cdn.example.com/old.png",
            "image_alt": "Launch campaign",
            "created_at": ts,
            "updated_at": ts,
        }
        row.update(fields)
        self.projects[row["id"]] = row
        return row

    def add_contact(self, **fields: Any) -> dict[str, Any]:
        ts = self.now()
        row = {
            "id": self.next_id(),
            "name": "Budi",
            "email": "budi@example.com",
            "whatsapp": None,
            "message": "I would like a new landing page.",
            "is_read": False,
            "created_at": ts,
            "updated_at": ts,
        }
        row.update(fields)
        self.contacts[row["id"]] = row
        return row

    # -- helpers used by the fake repositories ---------------------------

    def joined_project(self, row: dict[str, Any]) -> dict[str, Any]:
        segment = self.segments.get(row["segment_id"])
        return {
            **row,
            "segment_slug": segment["slug"] if segment else None,
            "segment_label": segment["label"] if segment else None,
        }

    def check_read(self) -> None:
        if self.fail_reads:
            raise RuntimeError("database unavailable")


def _newest_first(rows) -> list[dict[str, Any]]:
    return sorted(rows, key=lambda r: (r["created_at"], r["id"]), reverse=True)


def _public_user(row: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in row.items() if k != "password_hash"}


def _patch_all(monkeypatch, module, *fns) -> None:
    for fn in fns:
        monkeypatch.setattr(module, fn.__name__, fn)


def _install_user_repository(monkeypatch, store: FakeStore) -> None:
    async def list_users(_db, *, search_query=""):
        q = (search_query or "").strip().lower()
        rows = [
            u for u in store.users.values()
            if not q or q in u["email"].lower() or q in (u["name"] or "").lower()
        ]
        return [_public_user(u) for u in _newest_first(rows)]

    async def get_user_by_id(_db, user_id):
        row = store.users.get(user_id)
        return dict(row) if row else None

    async def get_user_by_email(_db, email):
        email = user_repository.normalize_email(email)
        for row in store.users.values():
            if row["email"].lower() == email:
                return dict(row)
        return None

    async def create_user(_db, *, email, password_hash, name=None):
        store.writes.append(("users", "insert"))
        row = store.add_user(user_repository.normalize_email(email), password_hash=password_hash, name=name)
        return _public_user(row)

    async def update_user(_db, user_id, changes):
        store.writes.append(("users", "update"))
        row = store.users.get(user_id)
        if row is None:
            return None
        row.update(changes)
        row["updated_at"] = store.now()
        return _public_user(row)

    async def delete_user(_db, user_id):
        store.writes.append(("users", "delete"))
        return store.users.pop(user_id, None) is not None

    _patch_all(
        monkeypatch, user_repository,
        list_users, get_user_by_id, get_user_by_email, create_user, update_user, delete_user,
    )


def _install_segment_repository(monkeypatch, store: FakeStore) -> None:
    async def list_segments(_db):
        return [dict(s) for s in sorted(store.segments.values(), key=lambda s: s["id"])]

    async def get_segment_by_slug(_db, slug):
        for row in store.segments.values():
            if row["slug"] == slug:
                return dict(row)
        return None

    async def get_segments_by_ids(_db, segment_ids):
        store.check_read()
        return [dict(store.segments[i]) for i in segment_ids if i in store.segments]

    async def count_segments(_db):
        store.check_read()
        return len(store.segments)

    _patch_all(
        monkeypatch, segment_repository,
        list_segments, get_segment_by_slug, get_segments_by_ids, count_segments,
    )


def _install_project_repository(monkeypatch, store: FakeStore) -> None:
    async def list_projects(_db, *, segment_slug=None, limit=None):
        store.check_read()
        rows = [store.joined_project(p) for p in store.projects.values()]
        if segment_slug is not None:
            rows = [r for r in rows if r["segment_slug"] == segment_slug]
        rows = _newest_first(rows)
        return rows[:limit] if limit is not None else rows

    async def get_project(_db, project_id):
        row = store.projects.get(project_id)
        return store.joined_project(row) if row else None

    async def create_project(_db, **fields):
        store.writes.append(("projects", "insert"))
        return store.joined_project(store.add_project(**fields))

    async def update_project(_db, project_id, changes):
        store.writes.append(("projects", "update"))
        row = store.projects.get(project_id)
        if row is None:
            return None
        row.update(changes)
        row["updated_at"] = store.now()
        return store.joined_project(row)

    async def delete_project(_db, project_id):
        store.writes.append(("projects", "delete"))
        return store.projects.pop(project_id, None) is not None

    async def count_projects(_db):
        store.check_read()
        return len(store.projects)

    async def count_projects_by_segment(_db):
        store.check_read()
        counts: dict[int, int] = {}
        for row in store.projects.values():
            counts[row["segment_id"]] = counts.get(row["segment_id"], 0) + 1
        return [{"segment_id": k, "count": v} for k, v in sorted(counts.items())]

    _patch_all(
        monkeypatch, project_repository,
        list_projects, get_project, create_project, update_project, delete_project,
        count_projects, count_projects_by_segment,
    )


def _install_contact_repository(monkeypatch, store: FakeStore) -> None:
    async def create_message(_db, *, name, email, message, whatsapp=None):
        store.writes.append(("contact_messages", "insert"))
        return dict(store.add_contact(name=name, email=email, message=message, whatsapp=whatsapp))

    async def list_messages(_db, *, limit=None):
        store.check_read()
        rows = _newest_first(dict(c) for c in store.contacts.values())
        return rows[:limit] if limit is not None else rows

    async def get_message(_db, message_id):
        row = store.contacts.get(message_id)
        return dict(row) if row else None

    async def update_message(_db, message_id, changes):
        store.writes.append(("contact_messages", "update"))
        row = store.contacts.get(message_id)
        if row is None:
            return None
        row.update(changes)
        row["updated_at"] = store.now()
        return dict(row)

    async def delete_message(_db, message_id):
        store.writes.append(("contact_messages", "delete"))
        return store.contacts.pop(message_id, None) is not None

    async def count_messages(_db):
        store.check_read()
        return len(store.contacts)

    _patch_all(
        monkeypatch, contact_repository,
        create_message, list_messages, get_message, update_message, delete_message, count_messages,
    )


@pytest.fixture
def store(monkeypatch) -> FakeStore:
    fake = FakeStore()
    _install_user_repository(monkeypatch, fake)
    _install_segment_repository(monkeypatch, fake)
    _install_project_repository(monkeypatch, fake)
    _install_contact_repository(monkeypatch, fake)
    return fake


@pytest.fixture
def client(store):
    from main import create_app

    app = create_app()
    app.dependency_overrides[get_db] = lambda: object()
    # No `with` block: the lifespan (real asyncpg pool) is not started.
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def admin_user(store) -> dict[str, Any]:
    return store.add_user("admin@example.com", name="Admin")


@pytest.fixture
def auth_headers(admin_user) -> dict[str, str]:
    token = security.build_access_token(user_id=admin_user["id"], email=admin_user["email"])
    return {"Authorization": f"Bearer {token}"}


class FakeUploader:
    def __init__(self) -> None:
        self.calls: list[dict[str, Any]] = []
        self.error: cloudinary.CloudinaryError | None = None
        self.url = "https://res.cloudinary.com/demo/image/upload/v1/triforge/projects/new.png"

    async def __call__(self, data: bytes, **kwargs: Any) -> dict[str, Any]:
        self.calls.append({"data": data, **kwargs})
        if self.error is not None:
            raise self.error
        return {"secure_url": self.url, "public_id": "triforge/projects/new"}


@pytest.fixture
def uploader(monkeypatch) -> FakeUploader:
    fake = FakeUploader()
    monkeypatch.setattr(cloudinary, "upload_image", fake)
    return fake
