"""Record validator: raw field map -> normalized record or field errors.

One rule set serves every calling convention. Validation runs in three
stages, parse -> cross-field rules -> optional encode:

* form mode (``validate_form``) stops after the rules and returns
  user-facing tokens;
* API mode (``validate_and_encode``) also runs the field codec;
* update mode (``validate_partial_and_encode``) only checks supplied fields
  and encodes them into a ``PartialCanonicalRecord``.

Validation never stops at the first problem: every field is parsed and both
cross-field rules are evaluated against whatever parsed cleanly.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Iterable, Mapping

from buyer_leads.codec import FieldCodec
from buyer_leads.models.buyer import (
    COLUMN_ATTRIBUTES,
    CanonicalRecord,
    PartialCanonicalRecord,
    PartialUpdate,
    UserFacingRecord,
)
from buyer_leads.models.enums import BHK, BHK_REQUIRED_FOR, BuyerStatus, Source, Timeline
from buyer_leads.validation.errors import (
    CrossFieldError,
    FieldError,
    ValidationError,
    ValidationResult,
)
from buyer_leads.validation.fields import FIELD_PARSERS, is_blank, parse_field

logger = logging.getLogger(__name__)

RawFields = Mapping[str, Any]

BHK_REQUIRED_MESSAGE = "BHK is required for Apartment and Villa property types"
BUDGET_ORDER_MESSAGE = "Minimum budget must be less than or equal to maximum budget"

# Update requests may carry these alongside the record fields
ID_KEY = "id"
VERSION_KEY = "updatedAt"

# Codec-mapped columns and the canonical enum each encodes to
CANONICAL_ENUMS = {"bhk": BHK, "timeline": Timeline, "source": Source, "status": BuyerStatus}


class RecordValidator:
    """Validate raw buyer field maps.

    Parameters
    ----------
    codec : FieldCodec | None
        Codec used by the encoding modes (strict by default).
    """

    def __init__(self, codec: FieldCodec | None = None) -> None:
        self.codec = codec or FieldCodec()

    def validate_form(self, raw: RawFields) -> ValidationResult[UserFacingRecord]:
        """Validate a complete record, keeping user-facing tokens."""
        values, errors = self._parse(raw, FIELD_PARSERS)
        errors.extend(self._cross_field_errors(values, errors))
        if errors:
            return ValidationResult(errors=errors)

        if values.get("status") is None:
            values["status"] = BuyerStatus.NEW
        return ValidationResult(
            UserFacingRecord(
                **{COLUMN_ATTRIBUTES[column]: value for column, value in values.items()}
            )
        )

    def validate_and_encode(self, raw: RawFields) -> ValidationResult[CanonicalRecord]:
        """Validate a complete record and convert it to canonical tokens."""
        result = self.validate_form(raw)
        if not result.ok:
            return ValidationResult(errors=result.errors)
        return ValidationResult(self.codec.encode_record(result.value))

    def validate_partial_and_encode(self, raw: RawFields) -> ValidationResult[PartialUpdate]:
        """Validate the supplied subset of fields of an update request.

        Absent keys are left untouched. A blank value for an optional field
        clears it; a blank value for a required field is an error.
        """
        supplied = [column for column in FIELD_PARSERS if column in raw]
        values, errors = self._parse(raw, supplied)
        errors.extend(self._cross_field_errors(values, errors))

        buyer_id = self._parse_id(raw.get(ID_KEY), errors)
        expected_updated_at = self._parse_version(raw.get(VERSION_KEY), errors)

        if errors:
            return ValidationResult(errors=errors)

        changes = PartialCanonicalRecord()
        for column, value in values.items():
            if column == "status" and value is None:
                continue  # status cannot be cleared
            if value is not None and column in CANONICAL_ENUMS:
                value = CANONICAL_ENUMS[column](self.codec.encode(column, value))
            setattr(changes, COLUMN_ATTRIBUTES[column], value)

        return ValidationResult(
            PartialUpdate(
                changes=changes,
                buyer_id=buyer_id,
                expected_updated_at=expected_updated_at,
            )
        )

    def _parse(
        self, raw: RawFields, columns: Iterable[str]
    ) -> tuple[dict[str, Any], list[ValidationError]]:
        values: dict[str, Any] = {}
        errors: list[ValidationError] = []
        for column in columns:
            parsed = parse_field(column, raw.get(column))
            if parsed.error is not None:
                errors.append(FieldError(column, parsed.error))
            else:
                values[column] = parsed.value
        return values, errors

    @staticmethod
    def _cross_field_errors(
        values: dict[str, Any], field_errors: list[ValidationError]
    ) -> list[ValidationError]:
        """Evaluate the relational rules against the fields that parsed cleanly.

        A rule is not reported on a field that already has its own error.
        """
        errors: list[ValidationError] = []
        failed = {e.path for e in field_errors}

        property_type = values.get("propertyType")
        if (
            property_type in BHK_REQUIRED_FOR
            and values.get("bhk") is None
            and "bhk" not in failed
        ):
            errors.append(CrossFieldError("bhk", BHK_REQUIRED_MESSAGE))

        budget_min = values.get("budgetMin")
        budget_max = values.get("budgetMax")
        if budget_min is not None and budget_max is not None and budget_min > budget_max:
            errors.append(CrossFieldError("budgetMin", BUDGET_ORDER_MESSAGE))

        return errors

    @staticmethod
    def _parse_id(raw: Any, errors: list[ValidationError]) -> str | None:
        if is_blank(raw):
            return None
        if not isinstance(raw, str):
            errors.append(FieldError(ID_KEY, "Invalid id"))
            return None
        return raw.strip()

    @staticmethod
    def _parse_version(raw: Any, errors: list[ValidationError]) -> datetime | None:
        if is_blank(raw):
            return None
        if isinstance(raw, datetime):
            parsed = raw
        else:
            text = str(raw).strip()
            if text.endswith("Z"):
                text = text[:-1] + "+00:00"
            try:
                parsed = datetime.fromisoformat(text)
            except ValueError:
                errors.append(FieldError(VERSION_KEY, "Invalid datetime"))
                return None
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return parsed


default_validator = RecordValidator()


def validate_form(raw: RawFields) -> ValidationResult[UserFacingRecord]:
    """Validate with user-facing output (client-side pre-submit checks)."""
    return default_validator.validate_form(raw)


def validate_and_encode(raw: RawFields) -> ValidationResult[CanonicalRecord]:
    """Validate and encode to canonical form (before persistence)."""
    return default_validator.validate_and_encode(raw)


def validate_partial_and_encode(raw: RawFields) -> ValidationResult[PartialUpdate]:
    """Validate and encode the supplied fields of an update."""
    return default_validator.validate_partial_and_encode(raw)
