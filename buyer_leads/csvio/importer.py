"""Bulk CSV import: document -> validated canonical records + per-row errors."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from buyer_leads.config import ImportConfig
from buyer_leads.csvio.tokenizer import split_records, tokenize_line
from buyer_leads.models.buyer import RECORD_COLUMNS, CanonicalRecord
from buyer_leads.validation.errors import HeaderError, RowError
from buyer_leads.validation.validator import RecordValidator

logger = logging.getLogger(__name__)

IMPORT_COLUMNS: tuple[str, ...] = RECORD_COLUMNS
OPTIONAL_IMPORT_COLUMNS: frozenset[str] = frozenset({"status"})


@dataclass
class ImportResult:
    """Outcome of parsing one CSV document.

    ``records`` always holds every row that validated, even when
    ``success`` is False, so callers may apply the valid subset.
    """

    records: list[CanonicalRecord] = field(default_factory=list)
    row_errors: list[RowError] = field(default_factory=list)
    header_errors: list[HeaderError] = field(default_factory=list)
    total_rows: int = 0

    @property
    def valid_rows(self) -> int:
        return len(self.records)

    @property
    def invalid_rows(self) -> int:
        return len(self.row_errors)

    @property
    def success(self) -> bool:
        return not self.header_errors and not self.row_errors

    def exceeds(self, max_rows: int) -> bool:
        return self.total_rows > max_rows

    def to_dict(self) -> dict[str, Any]:
        """Summary in the camelCase shape the HTTP layer returns."""
        return {
            "success": self.success,
            "totalRows": self.total_rows,
            "validRows": self.valid_rows,
            "invalidRows": self.invalid_rows,
            "headerErrors": [str(e) for e in self.header_errors],
            "rowErrors": [{"row": e.row, "messages": e.messages} for e in self.row_errors],
        }


class CsvImporter:
    """Parse and validate CSV documents of buyer leads.

    Rows are processed in order, one at a time; a failing row never affects
    the processing or numbering of the rows after it. Row numbers are the
    0-based source line on which the record starts, so the first data row
    under the header is row 1.

    Parameters
    ----------
    validator : RecordValidator | None
        Validator used for each row (API mode).
    config : ImportConfig | None
        Import policy; only ``require_status_column`` and
        ``multiline_fields`` are used here. Row ceilings and
        all-or-nothing handling are left to the caller.
    """

    def __init__(
        self,
        validator: RecordValidator | None = None,
        config: ImportConfig | None = None,
    ) -> None:
        self.validator = validator or RecordValidator()
        self.config = config or ImportConfig()

    @property
    def required_columns(self) -> tuple[str, ...]:
        if self.config.require_status_column:
            return IMPORT_COLUMNS
        return tuple(c for c in IMPORT_COLUMNS if c not in OPTIONAL_IMPORT_COLUMNS)

    def import_csv(self, text: str) -> ImportResult:
        """Parse a CSV document.

        Parameters
        ----------
        text : str
            Complete CSV content, header first.

        Returns
        -------
        ImportResult
            Valid records, row errors and counts.
        """
        if text is None:
            raise TypeError("CSV document must be a string, not None")

        document = text.lstrip("\ufeff").strip()
        records = split_records(document, multiline=self.config.multiline_fields)
        data_records = [r for r in records[1:] if r.text.strip()]

        header = tokenize_line(records[0].text)
        missing = tuple(c for c in self.required_columns if c not in header)
        if missing:
            logger.info(
                "Rejecting CSV import: missing columns %s",
                ", ".join(missing),
                extra={"extra": {"missing_columns": list(missing)}},
            )
            # Blank lines are never data rows, so the count matches the
            # total reported when the header is accepted
            return ImportResult(
                header_errors=[
                    HeaderError(
                        "header",
                        "Missing required column(s): " + ", ".join(missing),
                        missing_columns=missing,
                    )
                ],
                total_rows=len(data_records),
            )

        result = ImportResult(total_rows=len(data_records))
        for record in data_records:
            values = tokenize_line(record.text.strip())
            row = {
                column: values[j] if j < len(values) else ""
                for j, column in enumerate(header)
            }
            outcome = self.validator.validate_and_encode(row)
            if outcome.ok:
                result.records.append(outcome.value)
            else:
                logger.debug(
                    "Row %d invalid: %s",
                    record.line_number,
                    outcome.messages(),
                    extra={"extra": {"row": record.line_number, "errors": outcome.messages()}},
                )
                result.row_errors.append(RowError(record.line_number, outcome.errors))

        logger.info(
            "Parsed CSV import: total=%d, valid=%d, invalid=%d",
            result.total_rows,
            result.valid_rows,
            result.invalid_rows,
            extra={
                "extra": {
                    "total_rows": result.total_rows,
                    "valid_rows": result.valid_rows,
                    "invalid_rows": result.invalid_rows,
                }
            },
        )
        return result


def import_csv(text: str, config: ImportConfig | None = None) -> ImportResult:
    """Parse a CSV document with a default importer."""
    return CsvImporter(config=config).import_csv(text)
