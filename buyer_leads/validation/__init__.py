"""Record validation for buyer leads."""

from buyer_leads.validation.errors import (
    CrossFieldError,
    FieldError,
    HeaderError,
    RowError,
    ValidationError,
    ValidationResult,
)
from buyer_leads.validation.validator import (
    RecordValidator,
    validate_and_encode,
    validate_form,
    validate_partial_and_encode,
)

__all__ = [
    "CrossFieldError",
    "FieldError",
    "HeaderError",
    "RecordValidator",
    "RowError",
    "ValidationError",
    "ValidationResult",
    "validate_and_encode",
    "validate_form",
    "validate_partial_and_encode",
]
