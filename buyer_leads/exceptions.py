"""Custom exception hierarchy for buyer-leads.

Invalid *input data* is never raised: validators and the CSV importer
return error values instead. The exceptions below signal programming
errors, policy rejections and store conflicts.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from buyer_leads.csvio.importer import ImportResult
    from buyer_leads.validation.errors import ValidationError


class BuyerLeadsError(Exception):
    """Base exception for all buyer-leads errors."""


class ConfigurationError(BuyerLeadsError):
    """Raised when configuration is invalid or missing."""


class UnmappedTokenError(BuyerLeadsError):
    """Raised when the field codec is asked to map a token it does not know."""

    def __init__(self, field: str, token: str) -> None:
        super().__init__(f"Unmapped {field} token: {token!r}")
        self.field = field
        self.token = token


class EntityNotFoundError(BuyerLeadsError):
    """Raised when a referenced buyer does not exist."""


class ConcurrencyConflictError(BuyerLeadsError):
    """Raised when a buyer was modified after the client last read it."""


class PermissionDeniedError(BuyerLeadsError):
    """Raised when an actor may not modify a buyer it does not own."""


class RateLimitExceededError(BuyerLeadsError):
    """Raised when a client exceeded its request window."""

    def __init__(self, identifier: str, retry_after: int) -> None:
        super().__init__(f"Too many requests; retry in {retry_after}s")
        self.identifier = identifier
        self.retry_after = retry_after


class RecordValidationError(BuyerLeadsError):
    """Raised by the service layer when asked to persist invalid data."""

    def __init__(self, errors: Sequence[ValidationError]) -> None:
        super().__init__("Validation failed: " + "; ".join(str(e) for e in errors))
        self.errors = list(errors)


class ImportRejectedError(BuyerLeadsError):
    """Raised when a bulk import is rejected as a whole."""

    def __init__(self, message: str, result: ImportResult | None = None) -> None:
        super().__init__(message)
        self.result = result
