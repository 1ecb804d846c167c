"""Tests for synthetic buyer lead generation."""

import pytest

from buyer_leads.csvio import IMPORT_COLUMNS, import_csv
from buyer_leads.csvio.serialization import quote_cell
from buyer_leads.generators import BuyerLeadGenerator
from buyer_leads.models import BHK_REQUIRED_FOR, UserFacingRecord
from buyer_leads.validation import validate_form


def _to_csv(rows: list[dict]) -> str:
    lines = [",".join(IMPORT_COLUMNS)]
    lines.extend(",".join(quote_cell(row[c]) for c in IMPORT_COLUMNS) for row in rows)
    return "\n".join(lines)


class TestBuyerLeadGenerator:
    """Tests for BuyerLeadGenerator."""

    def test_generate(self, seed: int) -> None:
        lead = BuyerLeadGenerator(seed=seed).generate()

        assert isinstance(lead, UserFacingRecord)
        assert lead.phone.isdigit()
        assert len(lead.phone) == 10

    def test_seed_is_reproducible(self, seed: int) -> None:
        first = list(BuyerLeadGenerator(seed=seed).generate_batch(5))
        second = list(BuyerLeadGenerator(seed=seed).generate_batch(5))

        assert first == second

    def test_bhk_present_when_required(self, seed: int) -> None:
        for lead in BuyerLeadGenerator(seed=seed).generate_batch(100):
            if lead.property_type in BHK_REQUIRED_FOR:
                assert lead.bhk is not None
            if lead.budget_min is not None and lead.budget_max is not None:
                assert lead.budget_min <= lead.budget_max

    def test_generated_leads_validate(self, seed: int) -> None:
        for lead in BuyerLeadGenerator(seed=seed).generate_batch(50):
            row = {column: value for column, value in lead.as_columns().items()}
            assert validate_form(row).ok

    def test_rows_import_cleanly(self, seed: int) -> None:
        rows = list(BuyerLeadGenerator(seed=seed).generate_rows(50))

        result = import_csv(_to_csv(rows))

        assert result.success
        assert result.valid_rows == 50

    def test_invalid_rate(self, seed: int) -> None:
        rows = list(BuyerLeadGenerator(seed=seed, invalid_rate=1.0).generate_rows(20))

        result = import_csv(_to_csv(rows))

        assert result.invalid_rows == 20
        assert result.valid_rows == 0

    def test_rows_are_strings_in_column_order(self, seed: int) -> None:
        row = next(BuyerLeadGenerator(seed=seed).generate_rows(1))

        assert tuple(row) == IMPORT_COLUMNS
        assert all(isinstance(value, str) for value in row.values())

    def test_invalid_rate_bounds(self) -> None:
        with pytest.raises(ValueError):
            BuyerLeadGenerator(invalid_rate=1.5)
