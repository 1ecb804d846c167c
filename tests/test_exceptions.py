"""Tests for custom exception hierarchy."""

from buyer_leads.csvio.importer import ImportResult
from buyer_leads.exceptions import (
    BuyerLeadsError,
    ConcurrencyConflictError,
    ConfigurationError,
    EntityNotFoundError,
    ImportRejectedError,
    PermissionDeniedError,
    RateLimitExceededError,
    RecordValidationError,
    UnmappedTokenError,
)
from buyer_leads.validation import CrossFieldError, FieldError


class TestExceptionHierarchy:
    """Test exception inheritance chain."""

    def test_base_is_exception(self) -> None:
        assert isinstance(BuyerLeadsError("test"), Exception)

    def test_all_derive_from_base(self) -> None:
        for err in (
            ConfigurationError("test"),
            EntityNotFoundError("test"),
            ConcurrencyConflictError("test"),
            PermissionDeniedError("test"),
            UnmappedTokenError("bhk", "9"),
            RateLimitExceededError("client", 30),
            RecordValidationError([]),
            ImportRejectedError("test"),
        ):
            assert isinstance(err, BuyerLeadsError)

    def test_exception_message(self) -> None:
        err = EntityNotFoundError("Buyer b-001 not found")
        assert str(err) == "Buyer b-001 not found"


class TestExceptionDetails:
    """Test attributes carried by exceptions."""

    def test_unmapped_token(self) -> None:
        err = UnmappedTokenError("timeline", "soon")

        assert err.field == "timeline"
        assert err.token == "soon"
        assert str(err) == "Unmapped timeline token: 'soon'"

    def test_rate_limit(self) -> None:
        err = RateLimitExceededError("1.2.3.4-agent", 42)

        assert err.retry_after == 42
        assert "42s" in str(err)

    def test_record_validation(self) -> None:
        errors = [FieldError("phone", "Required"), CrossFieldError("bhk", "BHK is required")]

        err = RecordValidationError(errors)

        assert err.errors == errors
        assert str(err) == "Validation failed: phone: Required; bhk: BHK is required"

    def test_import_rejected_carries_result(self) -> None:
        result = ImportResult(total_rows=3)

        err = ImportRejectedError("CSV validation failed", result)

        assert err.result is result
        assert ImportRejectedError("File too large").result is None
