"""Helpers for the free-form ``tags`` field."""

from __future__ import annotations

import json
from typing import Iterable


def parse_tags(tags: str | None) -> list[str]:
    """Split stored tags into a list.

    Accepts a JSON-encoded list (``'["premium", "urgent"]'``) or plain
    comma-separated text (``"premium, urgent"``).
    """
    if not tags:
        return []
    try:
        decoded = json.loads(tags)
    except ValueError:
        decoded = None
    if isinstance(decoded, list):
        return [str(tag).strip() for tag in decoded if str(tag).strip()]
    return [tag.strip() for tag in tags.split(",") if tag.strip()]


def stringify_tags(tags: Iterable[str]) -> str:
    """Encode a tag list as JSON for storage."""
    return json.dumps([str(tag) for tag in tags])
