"""Shared cell serialization for CSV output."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from buyer_leads.csvio.tokenizer import DELIMITER, QUOTE

_NEEDS_QUOTING = (DELIMITER, QUOTE, "\n")


def to_row(obj: Any) -> dict[str, Any]:
    """Convert a record, stored buyer or mapping to ``{column: value}``."""
    if hasattr(obj, "as_columns"):
        return obj.as_columns()
    if isinstance(obj, Mapping):
        return dict(obj)
    raise TypeError(f"Cannot export object of type {type(obj).__name__}")


def serialize_value(value: Any) -> str:
    """Render a value as cell text; ``None`` becomes an empty cell."""
    if value is None:
        return ""
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def quote_cell(text: str) -> str:
    """Quote a cell when it contains a delimiter, quote or line break.

    Internal quotes are doubled, the inverse of ``tokenize_line``.
    """
    if any(token in text for token in _NEEDS_QUOTING):
        return QUOTE + text.replace(QUOTE, QUOTE * 2) + QUOTE
    return text
