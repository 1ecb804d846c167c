"""Buyer lead validation, field codec and CSV import/export."""

from buyer_leads.codec import FieldCodec, decode, encode
from buyer_leads.config import BuyerLeadsConfig, ImportMode
from buyer_leads.csvio import CsvExporter, CsvImporter, ImportResult, export_csv, import_csv
from buyer_leads.exceptions import BuyerLeadsError
from buyer_leads.service import BuyerService, ImportOutcome
from buyer_leads.validation import (
    RecordValidator,
    ValidationResult,
    validate_and_encode,
    validate_form,
    validate_partial_and_encode,
)

__version__ = "0.1.0"

__all__ = [
    "BuyerLeadsConfig",
    "BuyerLeadsError",
    "BuyerService",
    "CsvExporter",
    "CsvImporter",
    "FieldCodec",
    "ImportMode",
    "ImportOutcome",
    "ImportResult",
    "RecordValidator",
    "ValidationResult",
    "decode",
    "encode",
    "export_csv",
    "import_csv",
    "validate_and_encode",
    "validate_form",
    "validate_partial_and_encode",
]
