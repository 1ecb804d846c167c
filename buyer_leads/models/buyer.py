"""Buyer lead models."""

from __future__ import annotations

from dataclasses import dataclass, fields
from datetime import datetime
from enum import Enum
from typing import Any

from buyer_leads.models.enums import (
    BHK,
    BuyerStatus,
    City,
    FormBHK,
    FormSource,
    FormTimeline,
    PropertyType,
    Purpose,
    Source,
    Timeline,
)

# External (form / CSV) column name -> dataclass attribute
COLUMN_ATTRIBUTES: dict[str, str] = {
    "fullName": "full_name",
    "email": "email",
    "phone": "phone",
    "city": "city",
    "propertyType": "property_type",
    "bhk": "bhk",
    "purpose": "purpose",
    "budgetMin": "budget_min",
    "budgetMax": "budget_max",
    "timeline": "timeline",
    "source": "source",
    "notes": "notes",
    "tags": "tags",
    "status": "status",
}
ATTRIBUTE_COLUMNS: dict[str, str] = {attr: col for col, attr in COLUMN_ATTRIBUTES.items()}

RECORD_COLUMNS: tuple[str, ...] = tuple(COLUMN_ATTRIBUTES)


class _Unset(Enum):
    UNSET = "UNSET"

    def __repr__(self) -> str:
        return "UNSET"


UNSET = _Unset.UNSET


class _ColumnsMixin:
    """Render a record keyed by external column names."""

    def as_columns(self) -> dict[str, Any]:
        return {ATTRIBUTE_COLUMNS[f.name]: getattr(self, f.name) for f in fields(self)}


@dataclass
class UserFacingRecord(_ColumnsMixin):
    """Validated buyer in form / CSV vocabulary (e.g. ``bhk="2"``)."""

    full_name: str
    phone: str
    city: City
    property_type: PropertyType
    purpose: Purpose
    timeline: FormTimeline
    email: str | None = None
    bhk: FormBHK | None = None
    budget_min: int | None = None
    budget_max: int | None = None
    source: FormSource | None = None
    notes: str | None = None
    tags: str | None = None
    status: BuyerStatus = BuyerStatus.NEW


@dataclass
class CanonicalRecord(_ColumnsMixin):
    """Validated buyer in storage vocabulary (e.g. ``bhk=BHK.TWO``)."""

    full_name: str
    phone: str
    city: City
    property_type: PropertyType
    purpose: Purpose
    timeline: Timeline
    email: str | None = None
    bhk: BHK | None = None
    budget_min: int | None = None
    budget_max: int | None = None
    source: Source | None = None
    notes: str | None = None
    tags: str | None = None
    status: BuyerStatus = BuyerStatus.NEW


@dataclass
class PartialCanonicalRecord:
    """Subset of canonical fields supplied by an update.

    A field left at ``UNSET`` was not part of the update; ``None`` means
    the field is explicitly cleared.
    """

    full_name: str | _Unset = UNSET
    phone: str | _Unset = UNSET
    city: City | _Unset = UNSET
    property_type: PropertyType | _Unset = UNSET
    purpose: Purpose | _Unset = UNSET
    timeline: Timeline | _Unset = UNSET
    email: str | None | _Unset = UNSET
    bhk: BHK | None | _Unset = UNSET
    budget_min: int | None | _Unset = UNSET
    budget_max: int | None | _Unset = UNSET
    source: Source | None | _Unset = UNSET
    notes: str | None | _Unset = UNSET
    tags: str | None | _Unset = UNSET
    status: BuyerStatus | _Unset = UNSET

    def supplied(self) -> dict[str, Any]:
        """Return ``{attribute: value}`` for every supplied field."""
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not UNSET
        }

    def is_empty(self) -> bool:
        return not self.supplied()


@dataclass
class PartialUpdate:
    """Validated update request: the changes plus optional identity and version."""

    changes: PartialCanonicalRecord
    buyer_id: str | None = None
    expected_updated_at: datetime | None = None


@dataclass
class Buyer:
    """Persisted buyer lead."""

    buyer_id: str
    owner_id: str
    record: CanonicalRecord
    created_at: datetime
    updated_at: datetime

    def as_columns(self) -> dict[str, Any]:
        row = self.record.as_columns()
        row["createdAt"] = self.created_at
        row["updatedAt"] = self.updated_at
        return row


@dataclass
class BuyerHistoryEntry:
    """One changed field of one update."""

    buyer_id: str
    field: str  # external column name, e.g. budgetMin
    old_value: str | None
    new_value: str | None
    changed_by: str
    changed_at: datetime
