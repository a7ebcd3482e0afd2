"""
Project tag normalization.

Clients send tags in several shapes:
- a JSON array:             ["seo", "ads"]
- a JSON array as text:     '["seo", "ads"]'   (multipart forms)
- comma separated text:     "seo, ads"

All of them normalize to the same ordered list of strings. `None` means
"no tags supplied" (keep existing on update, empty on create).
"""

from __future__ import annotations

import json
from typing import Any


def _tag_text(value: Any) -> str:
    # Match what a JSON client would expect to read back.
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (list, tuple)):
        return ",".join("" if v is None else _tag_text(v) for v in value)
    return str(value)


def normalize_tags(raw: Any) -> list[str] | None:
    if raw is None:
        return None

    if isinstance(raw, (list, tuple)):
        return [_tag_text(t) for t in raw]

    text = str(raw).strip()
    if not text:
        return None

    # JSON is tried first so '["a,b", "c"]' keeps "a,b" as one tag.
    try:
        parsed = json.loads(text)
    except ValueError:
        parsed = None
    if isinstance(parsed, list):
        return [_tag_text(t) for t in parsed]

    return [piece.strip() for piece in text.split(",") if piece.strip()]


def serialize_tags(tags: list[str] | None) -> str:
    return json.dumps(list(tags or []), ensure_ascii=False)


def deserialize_tags(stored: str | None) -> list[str]:
    return normalize_tags(stored) or []
