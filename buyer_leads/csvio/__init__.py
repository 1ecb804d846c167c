"""CSV import and export for buyer leads."""

from buyer_leads.csvio.exporter import EXPORT_COLUMNS, CsvExporter, export_csv
from buyer_leads.csvio.importer import IMPORT_COLUMNS, CsvImporter, ImportResult, import_csv
from buyer_leads.csvio.tokenizer import split_records, tokenize_line

__all__ = [
    "CsvExporter",
    "CsvImporter",
    "EXPORT_COLUMNS",
    "IMPORT_COLUMNS",
    "ImportResult",
    "export_csv",
    "import_csv",
    "split_records",
    "tokenize_line",
]
