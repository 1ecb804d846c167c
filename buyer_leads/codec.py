"""Bidirectional mapping between user-facing and canonical enum tokens.

Forms and CSV files speak ``0-3m``, ``2`` and ``Walk-in``; storage speaks
``ZERO_TO_THREE_MONTHS``, ``TWO`` and ``Walk_in``. Each table is built by
pairing a user-facing enum with its canonical enum member-by-member and is
checked for bijectivity at import time.

Usage::

    codec = FieldCodec()
    codec.encode("timeline", "0-3m")           # "ZERO_TO_THREE_MONTHS"
    codec.decode("bhk", "TWO")                 # "2"
    codec.encode("source", "Door-to-door")     # raises UnmappedTokenError
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Type

from buyer_leads.exceptions import ConfigurationError, UnmappedTokenError
from buyer_leads.models.buyer import CanonicalRecord, UserFacingRecord
from buyer_leads.models.enums import (
    BHK,
    BuyerStatus,
    FormBHK,
    FormSource,
    FormTimeline,
    Source,
    Timeline,
)

logger = logging.getLogger(__name__)


def _pair(user_enum: Type[Enum], canonical_enum: Type[Enum]) -> dict[str, str]:
    """Map user-facing values to canonical values by member name."""
    if set(user_enum.__members__) != set(canonical_enum.__members__):
        raise ConfigurationError(
            f"{user_enum.__name__} and {canonical_enum.__name__} have different members"
        )
    return {
        member.value: canonical_enum[name].value
        for name, member in user_enum.__members__.items()
    }


def _invert(field: str, table: dict[str, str]) -> dict[str, str]:
    inverse = {canonical: user for user, canonical in table.items()}
    if len(inverse) != len(table):
        raise ConfigurationError(f"Codec table for {field} is not bijective")
    return inverse


ENCODE_TABLES: dict[str, dict[str, str]] = {
    "bhk": _pair(FormBHK, BHK),
    "timeline": _pair(FormTimeline, Timeline),
    "source": _pair(FormSource, Source),
    # Identical vocabularies today; kept here so the two cannot drift apart
    "status": _pair(BuyerStatus, BuyerStatus),
}
DECODE_TABLES: dict[str, dict[str, str]] = {
    name: _invert(name, table) for name, table in ENCODE_TABLES.items()
}

CODEC_FIELDS: tuple[str, ...] = tuple(ENCODE_TABLES)


class FieldCodec:
    """Encode and decode the enumerated buyer fields.

    Parameters
    ----------
    lenient : bool
        When True, tokens missing from a table are returned unchanged (and
        logged) instead of raising ``UnmappedTokenError``. Intended only for
        reading legacy data.
    """

    def __init__(self, lenient: bool = False) -> None:
        self.lenient = lenient

    def encode(self, field: str, token: str | Enum) -> str:
        """Map a user-facing token to its canonical form."""
        return self._lookup(ENCODE_TABLES, field, token)

    def decode(self, field: str, token: str | Enum) -> str:
        """Map a canonical token to its user-facing form."""
        return self._lookup(DECODE_TABLES, field, token)

    def handles(self, field: str) -> bool:
        return field in ENCODE_TABLES

    def encode_record(self, record: UserFacingRecord) -> CanonicalRecord:
        """Convert a validated user-facing record to canonical form."""
        return CanonicalRecord(
            full_name=record.full_name,
            phone=record.phone,
            city=record.city,
            property_type=record.property_type,
            purpose=record.purpose,
            timeline=Timeline(self.encode("timeline", record.timeline)),
            email=record.email,
            bhk=BHK(self.encode("bhk", record.bhk)) if record.bhk is not None else None,
            budget_min=record.budget_min,
            budget_max=record.budget_max,
            source=Source(self.encode("source", record.source)) if record.source is not None else None,
            notes=record.notes,
            tags=record.tags,
            status=BuyerStatus(self.encode("status", record.status)),
        )

    def decode_record(self, record: CanonicalRecord) -> UserFacingRecord:
        """Convert a canonical record back to user-facing form."""
        return UserFacingRecord(
            full_name=record.full_name,
            phone=record.phone,
            city=record.city,
            property_type=record.property_type,
            purpose=record.purpose,
            timeline=FormTimeline(self.decode("timeline", record.timeline)),
            email=record.email,
            bhk=FormBHK(self.decode("bhk", record.bhk)) if record.bhk is not None else None,
            budget_min=record.budget_min,
            budget_max=record.budget_max,
            source=FormSource(self.decode("source", record.source)) if record.source is not None else None,
            notes=record.notes,
            tags=record.tags,
            status=BuyerStatus(self.decode("status", record.status)),
        )

    @staticmethod
    def _table(tables: dict[str, dict[str, str]], field: str) -> dict[str, str]:
        try:
            return tables[field]
        except KeyError:
            raise KeyError(f"No codec for field {field!r}") from None

    def _lookup(self, tables: dict[str, dict[str, str]], field: str, token: str | Enum) -> str:
        value = token.value if isinstance(token, Enum) else token
        table = self._table(tables, field)
        if value in table:
            return table[value]
        if self.lenient:
            logger.warning("Passing through unmapped %s token %r", field, value)
            return value
        raise UnmappedTokenError(field, value)


default_codec = FieldCodec()


def encode(field: str, token: str | Enum) -> str:
    """Encode with the strict module-level codec."""
    return default_codec.encode(field, token)


def decode(field: str, token: str | Enum) -> str:
    """Decode with the strict module-level codec."""
    return default_codec.decode(field, token)
