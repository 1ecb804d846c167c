"""Buyer lead operations: validation, policy checks and persistence together.

``BuyerService`` is what an HTTP layer calls. It never sees requests or
responses; failures surface as ``BuyerLeadsError`` subclasses that map
one-to-one onto status codes (validation -> 400, permission -> 403,
not found -> 404, conflict -> 409, rate limit -> 429).
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping

from buyer_leads.codec import FieldCodec
from buyer_leads.config import BuyerLeadsConfig, ImportMode
from buyer_leads.csvio.exporter import CsvExporter
from buyer_leads.csvio.importer import CsvImporter, ImportResult
from buyer_leads.exceptions import (
    ConcurrencyConflictError,
    ImportRejectedError,
    PermissionDeniedError,
    RateLimitExceededError,
    RecordValidationError,
)
from buyer_leads.models.buyer import Buyer, BuyerHistoryEntry, UserFacingRecord
from buyer_leads.ratelimit import RateLimiter
from buyer_leads.store.buyers import BuyerPage, BuyersQuery, BuyerStore
from buyer_leads.validation.errors import FieldError
from buyer_leads.validation.validator import RecordValidator

logger = logging.getLogger(__name__)

OWNER_COLUMNS = ("ownerName", "ownerEmail")


@dataclass(frozen=True)
class Owner:
    """Display details of a buyer's owner, used for export join columns."""

    name: str | None = None
    email: str | None = None


@dataclass
class RateLimiters:
    """One limiter per rate-limited operation."""

    create: RateLimiter
    update: RateLimiter
    import_csv: RateLimiter

    @classmethod
    def from_config(
        cls,
        config: BuyerLeadsConfig,
        clock: Callable[[], float] = time.time,
    ) -> "RateLimiters":
        # Each limiter keeps its own windows; identifiers are not namespaced
        rules = config.rate_limits
        return cls(
            create=RateLimiter.from_rule(rules.create, clock=clock),
            update=RateLimiter.from_rule(rules.update, clock=clock),
            import_csv=RateLimiter.from_rule(rules.import_csv, clock=clock),
        )


@dataclass
class ImportOutcome:
    """Result of an applied bulk import."""

    result: ImportResult
    imported: list[Buyer] = field(default_factory=list)

    @property
    def skipped(self) -> int:
        return self.result.total_rows - len(self.imported)

    def to_dict(self) -> dict[str, Any]:
        summary = self.result.to_dict()
        summary["imported"] = len(self.imported)
        summary["skipped"] = self.skipped
        return summary


class BuyerService:
    """Create, update, list, import and export buyer leads.

    Parameters
    ----------
    store : BuyerStore | None
        Backing store.
    config : BuyerLeadsConfig | None
        Import policy, codec leniency and listing defaults.
    limiters : RateLimiters | None
        Per-operation rate limiters; built from ``config`` when omitted.
    owners : Mapping[str, Owner] | None
        Owner directory for the export join columns.
    """

    def __init__(
        self,
        store: BuyerStore | None = None,
        config: BuyerLeadsConfig | None = None,
        limiters: RateLimiters | None = None,
        owners: Mapping[str, Owner] | None = None,
    ) -> None:
        self.config = config or BuyerLeadsConfig()
        self.store = store if store is not None else BuyerStore()
        self.limiters = limiters or RateLimiters.from_config(self.config)
        self.owners = dict(owners or {})

        codec = FieldCodec(lenient=self.config.codec.lenient)
        self.validator = RecordValidator(codec)
        self.importer = CsvImporter(self.validator, self.config.imports)
        self.exporter = CsvExporter(codec, join_columns=OWNER_COLUMNS)

    def create(self, raw: Mapping[str, Any], owner_id: str, client_id: str | None = None) -> Buyer:
        """Validate and persist a new buyer."""
        self._throttle(self.limiters.create, client_id)

        result = self.validator.validate_and_encode(raw)
        if not result.ok:
            raise RecordValidationError(result.errors)

        buyer = self.store.add(result.value, owner_id)
        logger.info("Created buyer %s for owner %s", buyer.buyer_id, owner_id)
        return buyer

    def update(
        self,
        buyer_id: str,
        raw: Mapping[str, Any],
        actor_id: str,
        is_admin: bool = False,
        client_id: str | None = None,
    ) -> tuple[Buyer, list[BuyerHistoryEntry]]:
        """Apply a partial update on behalf of ``actor_id``.

        ``raw`` may carry ``updatedAt`` (the version the client last read);
        a newer stored version raises ``ConcurrencyConflictError``.
        """
        self._throttle(self.limiters.update, client_id)

        result = self.validator.validate_partial_and_encode(raw)
        if not result.ok:
            raise RecordValidationError(result.errors)
        request = result.value
        if request.buyer_id is not None and request.buyer_id != buyer_id:
            raise RecordValidationError([FieldError("id", "Does not match the buyer being updated")])

        self._check_owner(self.store.get(buyer_id), actor_id, is_admin)

        try:
            buyer, entries = self.store.update(
                buyer_id,
                request.changes,
                actor_id,
                expected_updated_at=request.expected_updated_at,
            )
        except ConcurrencyConflictError:
            logger.warning("Stale update of buyer %s by %s rejected", buyer_id, actor_id)
            raise

        logger.info("Updated buyer %s: %d field(s) changed", buyer_id, len(entries))
        return buyer, entries

    def delete(self, buyer_id: str, actor_id: str, is_admin: bool = False) -> Buyer:
        self._check_owner(self.store.get(buyer_id), actor_id, is_admin)
        buyer = self.store.delete(buyer_id)
        logger.info("Deleted buyer %s", buyer_id)
        return buyer

    def get(self, buyer_id: str) -> Buyer:
        return self.store.get(buyer_id)

    def history(self, buyer_id: str, limit: int | None = 5) -> list[BuyerHistoryEntry]:
        return self.store.history(buyer_id, limit=limit)

    def list(self, params: Mapping[str, Any]) -> BuyerPage:
        """List buyers from raw query-string parameters."""
        return self.store.list(self._query(params))

    def my_buyers(self, owner_id: str, actor_id: str, is_admin: bool = False) -> list[Buyer]:
        """Buyers owned by ``owner_id``, in creation order."""
        if owner_id != actor_id and not is_admin:
            raise PermissionDeniedError(f"{actor_id} may not view buyers of {owner_id}")
        return self.store.owned_by(owner_id)

    def form_values(self, buyer_id: str) -> UserFacingRecord:
        """A stored buyer in form vocabulary, for pre-filling the edit form."""
        return self.validator.codec.decode_record(self.store.get(buyer_id).record)

    def import_csv(
        self,
        text: str,
        owner_id: str,
        client_id: str | None = None,
    ) -> ImportOutcome:
        """Parse a CSV document and persist its rows per the configured mode.

        Raises
        ------
        ImportRejectedError
            If the upload or row count exceeds its limit, the header is
            incomplete, or any row is invalid in all-or-nothing mode.
        """
        self._throttle(self.limiters.import_csv, client_id)
        policy = self.config.imports

        if text is not None and len(text.encode("utf-8")) > policy.max_upload_bytes:
            raise ImportRejectedError(
                f"File too large. Maximum {policy.max_upload_bytes} bytes allowed."
            )

        result = self.importer.import_csv(text)
        if result.exceeds(policy.max_rows):
            raise ImportRejectedError(
                f"Too many rows. Maximum {policy.max_rows} rows allowed.", result
            )
        if result.header_errors:
            raise ImportRejectedError("CSV header is missing required columns", result)
        if not result.success and policy.mode is ImportMode.ALL_OR_NOTHING:
            logger.warning(
                "Rejecting import for %s: %d invalid row(s)", owner_id, result.invalid_rows
            )
            raise ImportRejectedError("CSV validation failed", result)

        imported = self.store.add_many(result.records, owner_id)
        logger.info(
            "Imported %d buyer(s) for %s, %d row(s) reported invalid",
            len(imported),
            owner_id,
            result.invalid_rows,
        )
        return ImportOutcome(result, imported)

    def export_csv(self, params: Mapping[str, Any] | None = None) -> str:
        """Export every buyer matching the list filters, unpaginated."""
        query = self._query(params or {})
        return self.exporter.export(self.store.select(query), join=self._owner_columns)

    def _query(self, params: Mapping[str, Any]) -> BuyersQuery:
        result = BuyersQuery.from_params(params, self.config.listing)
        if not result.ok:
            raise RecordValidationError(result.errors)
        return result.value

    def _owner_columns(self, buyer: Buyer) -> dict[str, Any]:
        owner = self.owners.get(buyer.owner_id, Owner())
        return {"ownerName": owner.name, "ownerEmail": owner.email}

    @staticmethod
    def _check_owner(buyer: Buyer, actor_id: str, is_admin: bool) -> None:
        if buyer.owner_id != actor_id and not is_admin:
            raise PermissionDeniedError(f"{actor_id} may not modify buyer {buyer.buyer_id}")

    @staticmethod
    def _throttle(limiter: RateLimiter, client_id: str | None) -> None:
        if client_id is None:
            return
        decision = limiter.check(client_id)
        if not decision.allowed:
            retry_after = decision.retry_after(limiter.clock())
            logger.warning("Rate limited %s for %ds", client_id, retry_after)
            raise RateLimitExceededError(client_id, retry_after)
