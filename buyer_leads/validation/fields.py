"""Per-field parsers for raw buyer input.

Every parser takes the raw value exactly as it arrived from a form or a CSV
cell and returns a ``Parsed`` outcome: a normalized value, ``None`` for an
absent optional value, or an error message.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Type

from email_validator import EmailNotValidError, validate_email

from buyer_leads.models.enums import (
    BuyerStatus,
    City,
    FormBHK,
    FormSource,
    FormTimeline,
    PropertyType,
    Purpose,
)
from buyer_leads.tags import stringify_tags

FULL_NAME_MIN = 2
FULL_NAME_MAX = 80
PHONE_MIN = 10
PHONE_MAX = 15
NOTES_MAX = 1000

REQUIRED_MESSAGE = "Required"

_LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")


@dataclass(frozen=True)
class Parsed:
    value: Any = None
    error: str | None = None


ABSENT = Parsed()


def is_blank(raw: Any) -> bool:
    return raw is None or (isinstance(raw, str) and raw.strip() == "")


def _text(raw: Any) -> str:
    return raw.strip() if isinstance(raw, str) else str(raw).strip()


def parse_full_name(raw: Any) -> Parsed:
    value = _text(raw)
    if len(value) < FULL_NAME_MIN:
        return Parsed(error=f"Full name must be at least {FULL_NAME_MIN} characters")
    if len(value) > FULL_NAME_MAX:
        return Parsed(error=f"Full name must be at most {FULL_NAME_MAX} characters")
    return Parsed(value)


def parse_email(raw: Any) -> Parsed:
    value = _text(raw)
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError:
        return Parsed(error="Invalid email address")
    return Parsed(value)


def parse_phone(raw: Any) -> Parsed:
    value = _text(raw)
    if not value.isdigit():
        return Parsed(error="Phone must contain digits only")
    if len(value) < PHONE_MIN:
        return Parsed(error=f"Phone must be at least {PHONE_MIN} digits")
    if len(value) > PHONE_MAX:
        return Parsed(error=f"Phone must be at most {PHONE_MAX} digits")
    return Parsed(value)


def parse_budget(raw: Any) -> Parsed:
    """Parse a budget amount.

    Strings are read like a leading integer (``"5000000"``, ``"42 lakh"``
    -> 42); text with no leading digits counts as absent. Numbers must be
    whole and positive.
    """
    if isinstance(raw, bool):
        return Parsed(error="Budget must be a number")
    if isinstance(raw, float):
        if not raw.is_integer():
            return Parsed(error="Budget must be a whole number")
        raw = int(raw)
    if isinstance(raw, int):
        amount = raw
    else:
        match = _LEADING_INT_RE.match(str(raw))
        if not match:
            return ABSENT
        amount = int(match.group(1))
    if amount <= 0:
        return Parsed(error="Budget must be a positive number")
    return Parsed(amount)


def parse_notes(raw: Any) -> Parsed:
    value = _text(raw)
    if len(value) > NOTES_MAX:
        return Parsed(error=f"Notes must be at most {NOTES_MAX} characters")
    return Parsed(value)


def parse_tags_field(raw: Any) -> Parsed:
    if isinstance(raw, (list, tuple)):
        return Parsed(stringify_tags(raw)) if raw else ABSENT
    return Parsed(_text(raw))


def enum_parser(enum_cls: Type[Enum]) -> Callable[[Any], Parsed]:
    """Build a parser accepting exactly the values of ``enum_cls``."""
    allowed = [member.value for member in enum_cls]

    def parse(raw: Any) -> Parsed:
        value = raw.value if isinstance(raw, Enum) else _text(raw)
        try:
            return Parsed(enum_cls(value))
        except ValueError:
            return Parsed(
                error=f"Invalid value {value!r}. Expected one of: {', '.join(allowed)}"
            )

    return parse


# Column name -> parser, in CSV column order
FIELD_PARSERS: dict[str, Callable[[Any], Parsed]] = {
    "fullName": parse_full_name,
    "email": parse_email,
    "phone": parse_phone,
    "city": enum_parser(City),
    "propertyType": enum_parser(PropertyType),
    "bhk": enum_parser(FormBHK),
    "purpose": enum_parser(Purpose),
    "budgetMin": parse_budget,
    "budgetMax": parse_budget,
    "timeline": enum_parser(FormTimeline),
    "source": enum_parser(FormSource),
    "notes": parse_notes,
    "tags": parse_tags_field,
    "status": enum_parser(BuyerStatus),
}

REQUIRED_FIELDS: frozenset[str] = frozenset(
    {"fullName", "phone", "city", "propertyType", "purpose", "timeline"}
)


def parse_field(column: str, raw: Any) -> Parsed:
    """Parse one raw value; blank optional values are absent, blank required ones fail."""
    if is_blank(raw):
        return Parsed(error=REQUIRED_MESSAGE) if column in REQUIRED_FIELDS else ABSENT
    return FIELD_PARSERS[column](raw)
