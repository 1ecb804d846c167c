"""In-memory buyer store with audit history and list queries."""

from __future__ import annotations

import logging
import math
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Mapping

from buyer_leads.config import ListConfig
from buyer_leads.exceptions import ConcurrencyConflictError, EntityNotFoundError
from buyer_leads.models.buyer import (
    ATTRIBUTE_COLUMNS,
    Buyer,
    BuyerHistoryEntry,
    CanonicalRecord,
    PartialCanonicalRecord,
)
from buyer_leads.models.enums import BuyerStatus, City, PropertyType, Timeline
from buyer_leads.validation.errors import FieldError, ValidationError, ValidationResult

logger = logging.getLogger(__name__)

SORT_KEYS: dict[str, Callable[[Buyer], Any]] = {
    "createdAt": lambda b: b.created_at,
    "updatedAt": lambda b: b.updated_at,
    "fullName": lambda b: b.record.full_name.lower(),
}
SORT_ORDERS = ("asc", "desc")

# Query-string value meaning "no filter"
ALL = "all"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return uuid.uuid4().hex


@dataclass
class BuyersQuery:
    """Filters, ordering and pagination for listing buyers.

    Enum filters use canonical values (``timeline=ZERO_TO_THREE_MONTHS``).
    """

    page: int = 1
    limit: int = 10
    search: str | None = None
    city: City | None = None
    property_type: PropertyType | None = None
    status: BuyerStatus | None = None
    timeline: Timeline | None = None
    sort_by: str = "updatedAt"
    sort_order: str = "desc"

    @classmethod
    def from_params(
        cls,
        params: Mapping[str, Any],
        config: ListConfig | None = None,
    ) -> ValidationResult["BuyersQuery"]:
        """Build a query from raw query-string parameters.

        Out-of-range paging values fall back to defaults; unknown enum values
        and sort options are reported as errors.
        """
        config = config or ListConfig()
        params = {k: v for k, v in params.items() if v is not None and v != ALL and v != ""}
        errors: list[ValidationError] = []
        search = str(params.get("search", "")).strip()

        query = cls(
            page=_page_number(params.get("page"), 1, lambda n: n >= 1),
            limit=_page_number(
                params.get("limit"),
                config.default_limit,
                lambda n: 1 <= n <= config.max_limit,
            ),
            search=search or None,
            city=_enum_filter(City, "city", params, errors),
            property_type=_enum_filter(PropertyType, "propertyType", params, errors),
            status=_enum_filter(BuyerStatus, "status", params, errors),
            timeline=_enum_filter(Timeline, "timeline", params, errors),
        )

        sort_by = params.get("sortBy", query.sort_by)
        if sort_by in SORT_KEYS:
            query.sort_by = sort_by
        else:
            errors.append(FieldError("sortBy", f"Invalid sort field {sort_by!r}"))
        sort_order = params.get("sortOrder", query.sort_order)
        if sort_order in SORT_ORDERS:
            query.sort_order = sort_order
        else:
            errors.append(FieldError("sortOrder", f"Invalid sort order {sort_order!r}"))

        if errors:
            return ValidationResult(errors=errors)
        return ValidationResult(query)

    def matches(self, buyer: Buyer) -> bool:
        record = buyer.record
        if self.city is not None and record.city != self.city:
            return False
        if self.property_type is not None and record.property_type != self.property_type:
            return False
        if self.status is not None and record.status != self.status:
            return False
        if self.timeline is not None and record.timeline != self.timeline:
            return False
        if self.search:
            needle = self.search.lower()
            haystack = (record.full_name, record.email or "", record.phone, record.city.value)
            return any(needle in text.lower() for text in haystack)
        return True


def _page_number(raw: Any, default: int, valid: Callable[[int], bool]) -> int:
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return default
    return value if valid(value) else default


def _enum_filter(
    enum_cls: type[Enum],
    name: str,
    params: Mapping[str, Any],
    errors: list[ValidationError],
) -> Any:
    if name not in params:
        return None
    try:
        return enum_cls(params[name])
    except ValueError:
        errors.append(FieldError(name, f"Invalid value {params[name]!r}"))
        return None


@dataclass
class BuyerPage:
    """One page of a buyer listing."""

    buyers: list[Buyer]
    page: int
    limit: int
    total: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0

    @property
    def has_next(self) -> bool:
        return self.page * self.limit < self.total

    @property
    def has_prev(self) -> bool:
        return self.page > 1


def _history_text(value: Any) -> str | None:
    """Render a field value for the audit trail; empty values become None."""
    if isinstance(value, Enum):
        value = value.value
    if value is None or value == "" or value == 0:
        return None
    return str(value)


@dataclass
class BuyerStore:
    """In-memory store for buyers with owner and history indexes."""

    buyers: dict[str, Buyer] = field(default_factory=dict)
    clock: Callable[[], datetime] = field(default=_utcnow, repr=False)
    id_factory: Callable[[], str] = field(default=_new_id, repr=False)

    _owner_buyers: dict[str, list[str]] = field(default_factory=dict, repr=False)
    _history: dict[str, list[BuyerHistoryEntry]] = field(default_factory=dict, repr=False)

    def add(self, record: CanonicalRecord, owner_id: str) -> Buyer:
        """Persist a validated record for ``owner_id``."""
        now = self.clock()
        buyer = Buyer(
            buyer_id=self.id_factory(),
            owner_id=owner_id,
            record=record,
            created_at=now,
            updated_at=now,
        )
        self.buyers[buyer.buyer_id] = buyer
        self._owner_buyers.setdefault(owner_id, []).append(buyer.buyer_id)
        self._history[buyer.buyer_id] = []
        return buyer

    def add_many(self, records: list[CanonicalRecord], owner_id: str) -> list[Buyer]:
        """Persist several records in order."""
        return [self.add(record, owner_id) for record in records]

    def get(self, buyer_id: str) -> Buyer:
        try:
            return self.buyers[buyer_id]
        except KeyError:
            raise EntityNotFoundError(f"Buyer {buyer_id} not found") from None

    def update(
        self,
        buyer_id: str,
        changes: PartialCanonicalRecord,
        actor_id: str,
        expected_updated_at: datetime | None = None,
    ) -> tuple[Buyer, list[BuyerHistoryEntry]]:
        """Apply supplied fields and record one history entry per changed field.

        Raises
        ------
        EntityNotFoundError
            If the buyer does not exist.
        ConcurrencyConflictError
            If the buyer changed after ``expected_updated_at``.
        """
        buyer = self.get(buyer_id)
        if expected_updated_at is not None and expected_updated_at < buyer.updated_at:
            raise ConcurrencyConflictError(
                f"Buyer {buyer_id} was modified by another user. Please refresh and try again."
            )

        now = self.clock()
        entries: list[BuyerHistoryEntry] = []
        for attr, new_value in changes.supplied().items():
            old_value = getattr(buyer.record, attr)
            if old_value == new_value:
                continue
            setattr(buyer.record, attr, new_value)
            entries.append(
                BuyerHistoryEntry(
                    buyer_id=buyer_id,
                    field=ATTRIBUTE_COLUMNS[attr],
                    old_value=_history_text(old_value),
                    new_value=_history_text(new_value),
                    changed_by=actor_id,
                    changed_at=now,
                )
            )

        buyer.updated_at = now
        self._history[buyer_id].extend(entries)
        return buyer, entries

    def delete(self, buyer_id: str) -> Buyer:
        buyer = self.get(buyer_id)
        del self.buyers[buyer_id]
        self._owner_buyers[buyer.owner_id].remove(buyer_id)
        self._history.pop(buyer_id, None)
        return buyer

    def history(self, buyer_id: str, limit: int | None = None) -> list[BuyerHistoryEntry]:
        """History of a buyer, newest first."""
        self.get(buyer_id)
        entries = list(reversed(self._history[buyer_id]))
        return entries[:limit] if limit is not None else entries

    def owned_by(self, owner_id: str) -> list[Buyer]:
        return [self.buyers[bid] for bid in self._owner_buyers.get(owner_id, [])]

    def count(self, query: BuyersQuery | None = None) -> int:
        if query is None:
            return len(self.buyers)
        return sum(1 for buyer in self.buyers.values() if query.matches(buyer))

    def select(self, query: BuyersQuery) -> list[Buyer]:
        """All buyers matching ``query`` in its sort order, unpaginated."""
        matched = [buyer for buyer in self.buyers.values() if query.matches(buyer)]
        matched.sort(key=SORT_KEYS[query.sort_by], reverse=query.sort_order == "desc")
        return matched

    def list(self, query: BuyersQuery) -> BuyerPage:
        """One page of buyers matching ``query``."""
        matched = self.select(query)
        start = (query.page - 1) * query.limit
        return BuyerPage(
            buyers=matched[start : start + query.limit],
            page=query.page,
            limit=query.limit,
            total=len(matched),
        )

    def summary(self) -> dict[str, int]:
        """Return summary counts."""
        return {
            "buyers": len(self.buyers),
            "owners": sum(1 for ids in self._owner_buyers.values() if ids),
            "history_entries": sum(len(entries) for entries in self._history.values()),
        }
