"""Tests for the bulk CSV import pipeline."""

import logging

import pytest

from buyer_leads.config import ImportConfig
from buyer_leads.csvio import CsvImporter, import_csv
from buyer_leads.models import BHK, BuyerStatus, Source, Timeline
from buyer_leads.validation import HeaderError

LEGACY_HEADER = (
    "fullName,email,phone,city,propertyType,bhk,purpose,budgetMin,budgetMax,"
    "timeline,source,notes,tags"
)


def _legacy_importer() -> CsvImporter:
    """Importer that, like older export files, does not require ``status``."""
    return CsvImporter(config=ImportConfig(require_status_column=False))


class TestImportCsv:
    """Tests for import_csv."""

    def test_valid_rows(self, csv_header: str) -> None:
        text = "\n".join(
            [
                csv_header,
                "John Doe,john@example.com,1234567890,Chandigarh,Apartment,2,Buy,"
                "5000000,8000000,0-3m,Website,Interested in 2BHK,premium,New",
                "Jane Smith,jane@example.com,9876543210,Mohali,Plot,,Buy,,,3-6m,,,,",
            ]
        )

        result = import_csv(text)

        assert result.success
        assert result.total_rows == 2
        assert result.valid_rows == 2
        assert result.invalid_rows == 0
        first, second = result.records
        assert first.full_name == "John Doe"
        assert first.bhk is BHK.TWO
        assert first.timeline is Timeline.ZERO_TO_THREE_MONTHS
        assert first.source is Source.WEBSITE
        assert second.full_name == "Jane Smith"
        assert second.bhk is None
        assert second.status is BuyerStatus.NEW

    def test_row_errors_do_not_stop_the_batch(self, csv_header: str) -> None:
        text = "\n".join(
            [
                csv_header,
                "John Doe,invalid-email,1234567890,Chandigarh,Apartment,2,Buy,"
                "5000000,8000000,0-3m,Website,Interested in 2BHK,premium,New",
                "Jane Smith,jane@example.com,9876543210,Mohali,Plot,,Buy,,,3-6m,,,,",
            ]
        )

        result = import_csv(text)

        assert not result.success
        assert result.total_rows == 2
        assert result.valid_rows == 1
        assert result.invalid_rows == 1
        assert result.records[0].full_name == "Jane Smith"
        assert result.row_errors[0].row == 1
        assert result.row_errors[0].messages == ["email: Invalid email address"]

    def test_row_numbers_follow_source_lines(self, csv_header: str) -> None:
        bad = "X,,1,Chandigarh,Plot,,Buy,,,3-6m,,,,"
        good = "Jane Smith,,9876543210,Mohali,Plot,,Buy,,,3-6m,,,,"
        text = "\n".join([csv_header, good, bad, "", good, bad])

        result = import_csv(text)

        assert [e.row for e in result.row_errors] == [2, 5]
        assert result.total_rows == 4

    def test_row_count_conservation(self, csv_header: str) -> None:
        rows = [
            "Jane Smith,,9876543210,Mohali,Plot,,Buy,,,3-6m,,,,",
            "J,,98765,Mohali,Villa,,Sell,,,soon,,,,",
            "Ravi Kumar,ravi@example.com,9876501234,Other,Retail,,Rent,9,1,>6m,Call,,,Dropped",
            "Anil Singh,,9876512345,Zirakpur,Villa,Studio,Rent,,,Exploring,Referral,,,Visited",
        ]

        result = import_csv("\n".join([csv_header, *rows]))

        assert result.total_rows == result.valid_rows + result.invalid_rows == 4
        assert len(result.records) == result.valid_rows == 2
        assert len(result.row_errors) == result.invalid_rows == 2

    def test_all_errors_of_a_row_reported(self, csv_header: str) -> None:
        text = csv_header + "\nJ,bad,98765,Mohali,Villa,,Sell,9,1,soon,,,,"

        errors = import_csv(text).row_errors[0]

        assert {e.path for e in errors.errors} == {
            "fullName",
            "email",
            "phone",
            "purpose",
            "timeline",
            "bhk",
            "budgetMin",
        }

    def test_missing_trailing_values_default_to_blank(self, csv_header: str) -> None:
        result = import_csv(csv_header + "\nJane Smith,,9876543210,Mohali,Plot,,Buy,,,3-6m")

        assert result.success
        assert result.records[0].notes is None

    def test_quoted_fields(self, csv_header: str) -> None:
        text = csv_header + (
            '\n"John Doe","john@example.com","1234567890","Chandigarh","Apartment","2","Buy",'
            '"5000000","8000000","0-3m","Website","Interested in 2BHK, premium location",'
            '"premium,urgent","New"'
        )

        result = import_csv(text)

        assert result.success
        assert result.records[0].notes == "Interested in 2BHK, premium location"
        assert result.records[0].tags == "premium,urgent"

    def test_escaped_quotes(self, csv_header: str) -> None:
        text = csv_header + (
            '\n"John ""The Buyer"" Doe","john@example.com","1234567890","Chandigarh",'
            '"Apartment","2","Buy","5000000","8000000","0-3m","Website","","premium","New"'
        )

        assert import_csv(text).records[0].full_name == 'John "The Buyer" Doe'

    def test_multiline_notes(self, csv_header: str) -> None:
        text = csv_header + (
            '\nJane Smith,,9876543210,Mohali,Plot,,Buy,,,3-6m,,"first line\nsecond line",,\n'
            "Ravi Kumar,,9876501234,Other,Plot,,Rent,,,>6m,,,,"
        )

        result = import_csv(text)

        assert result.success
        assert result.records[0].notes == "first line\nsecond line"
        assert result.total_rows == 2

    def test_column_order_independent(self) -> None:
        header = (
            "status,tags,notes,source,timeline,budgetMax,budgetMin,purpose,bhk,"
            "propertyType,city,phone,email,fullName,extra"
        )
        row = "Qualified,,,,0-3m,,,Buy,3,Apartment,Panchkula,9876543210,,Meera Nair,ignored"

        result = import_csv(header + "\n" + row)

        record = result.records[0]
        assert record.full_name == "Meera Nair"
        assert record.bhk is BHK.THREE
        assert record.status is BuyerStatus.QUALIFIED

    def test_bom_and_crlf(self, csv_header: str) -> None:
        text = "\ufeff" + csv_header + "\r\nJane Smith,,9876543210,Mohali,Plot,,Buy,,,3-6m,,,,\r\n"

        result = import_csv(text)

        assert result.success
        assert result.total_rows == 1

    def test_crlf_multiline_notes(self, csv_header: str) -> None:
        text = "\r\n".join(
            [
                csv_header,
                'Jane Smith,,9876543210,Mohali,Plot,,Buy,,,3-6m,,"a\r\nb",,',
                "Ravi Kumar,,9876501234,Other,Plot,,Rent,,,>6m,,,,",
            ]
        )

        result = import_csv(text)

        assert result.success
        assert result.records[0].notes == "a\nb"
        assert result.total_rows == 2

    def test_stray_quote_does_not_swallow_later_rows(self, csv_header: str) -> None:
        good = "Jane Smith,,9876543210,Mohali,Plot,,Buy,,,3-6m,,,,"
        stray = 'Ravi Kumar,,9876501234,Other,Plot,,Rent,,,>6m,,5" pipe fitting,,'
        text = "\n".join([csv_header, good, stray, good, good, good])

        result = import_csv(text)

        assert result.total_rows == 5
        assert result.valid_rows == 5
        assert result.records[1].full_name == "Ravi Kumar"

    def test_unterminated_quote_only_affects_its_own_row(self, csv_header: str) -> None:
        good = "Jane Smith,,9876543210,Mohali,Plot,,Buy,,,3-6m,,,,"
        broken = 'Ravi Kumar,,9876501234,Other,Plot,,Rent,,,>6m,,"never closed,,'
        bad = "X,,1,Chandigarh,Plot,,Buy,,,3-6m,,,,"
        text = "\n".join([csv_header, good, broken, bad])

        result = import_csv(text)

        assert result.total_rows == 3
        assert result.valid_rows == 2
        assert result.records[1].notes == "never closed,,"
        assert [e.row for e in result.row_errors] == [3]

    def test_invalid_rows_logged_with_row_context(
        self, csv_header: str, caplog: pytest.LogCaptureFixture
    ) -> None:
        text = csv_header + "\nA,,123,Mohali,Plot,,Buy,,,3-6m,,,,"

        with caplog.at_level(logging.DEBUG, logger="buyer_leads.csvio.importer"):
            import_csv(text)

        importer_logs = [r for r in caplog.records if r.name == "buyer_leads.csvio.importer"]
        row_logs = [r for r in importer_logs if r.levelno == logging.DEBUG]
        assert row_logs[0].extra["row"] == 1
        assert row_logs[0].extra["errors"]
        summary = [r for r in importer_logs if r.levelno == logging.INFO][-1]
        assert summary.extra == {"total_rows": 1, "valid_rows": 0, "invalid_rows": 1}

    def test_none_document_is_a_programming_error(self) -> None:
        with pytest.raises(TypeError):
            import_csv(None)


class TestHeaderValidation:
    """Tests for header checks."""

    def test_missing_city_aborts(self, csv_header: str) -> None:
        header = csv_header.replace("city,", "")
        text = "\n".join([header, "a,b,c", "d,e,f", "g,h,i"])

        result = import_csv(text)

        assert not result.success
        assert result.total_rows == 3
        assert result.valid_rows == 0
        assert result.invalid_rows == 0
        assert result.header_errors == [
            HeaderError("header", "Missing required column(s): city", missing_columns=("city",))
        ]

    def test_empty_document(self) -> None:
        result = import_csv("")

        assert not result.success
        assert result.total_rows == 0
        assert "Missing required column" in result.header_errors[0].message

    def test_lists_every_missing_column(self) -> None:
        text = "fullName,email,phone,city,propertyType,purpose,timeline\n"
        text += "John Doe,john@example.com,1234567890,Chandigarh,Apartment,Buy,0-3m"

        result = import_csv(text)

        assert result.header_errors[0].missing_columns == (
            "bhk",
            "budgetMin",
            "budgetMax",
            "source",
            "notes",
            "tags",
            "status",
        )

    def test_status_required_by_default(self) -> None:
        result = import_csv(LEGACY_HEADER + "\nJane Smith,,9876543210,Mohali,Plot,,Buy,,,3-6m,,,")
        assert result.header_errors[0].missing_columns == ("status",)

    def test_status_optional_when_configured(self) -> None:
        text = "\n".join(
            [
                LEGACY_HEADER,
                "John Doe,john@example.com,1234567890,Chandigarh,Apartment,2,Buy,"
                "5000000,8000000,0-3m,Website,Interested in 2BHK,premium",
                "Jane Smith,jane@example.com,9876543210,Mohali,Plot,,Buy,,,3-6m,,,",
            ]
        )

        result = _legacy_importer().import_csv(text)

        assert result.success
        assert result.valid_rows == 2
        assert all(r.status is BuyerStatus.NEW for r in result.records)


class TestImportResult:
    """Tests for ImportResult helpers."""

    def test_to_dict(self, csv_header: str) -> None:
        text = csv_header + "\nJ,,9876543210,Mohali,Plot,,Buy,,,3-6m,,,,"

        summary = import_csv(text).to_dict()

        assert summary == {
            "success": False,
            "totalRows": 1,
            "validRows": 0,
            "invalidRows": 1,
            "headerErrors": [],
            "rowErrors": [
                {"row": 1, "messages": ["fullName: Full name must be at least 2 characters"]}
            ],
        }

    def test_exceeds(self) -> None:
        from buyer_leads.csvio.importer import ImportResult

        assert ImportResult(total_rows=201).exceeds(200)
        assert not ImportResult(total_rows=200).exceeds(200)
