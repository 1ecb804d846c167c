"""CSV export: canonical records -> user-facing CSV text."""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, Mapping, Sequence

from buyer_leads.codec import FieldCodec
from buyer_leads.csvio.importer import IMPORT_COLUMNS
from buyer_leads.csvio.serialization import quote_cell, serialize_value, to_row

logger = logging.getLogger(__name__)

EXPORT_COLUMNS: tuple[str, ...] = IMPORT_COLUMNS + ("createdAt", "updatedAt")


class CsvExporter:
    """Render buyers as CSV in the same vocabulary the importer accepts.

    Parameters
    ----------
    codec : FieldCodec | None
        Codec used to decode bhk/timeline/source/status cells. A strict codec
        raises ``UnmappedTokenError`` on values outside the canonical enums.
    join_columns : Sequence[str]
        Extra columns (e.g. ``ownerName``) appended after ``updatedAt``.
    """

    def __init__(
        self,
        codec: FieldCodec | None = None,
        join_columns: Sequence[str] = (),
    ) -> None:
        self.codec = codec or FieldCodec()
        self.join_columns = tuple(join_columns)

    @property
    def columns(self) -> tuple[str, ...]:
        return EXPORT_COLUMNS + tuple(c for c in self.join_columns if c not in EXPORT_COLUMNS)

    def export(
        self,
        records: Iterable[Any],
        join: Callable[[Any], Mapping[str, Any]] | None = None,
    ) -> str:
        """Render records as CSV text.

        Parameters
        ----------
        records : Iterable[Any]
            ``CanonicalRecord``, ``Buyer`` or plain mappings keyed by column.
        join : Callable | None
            Returns the join-column values for one record.

        Returns
        -------
        str
            Header line plus one line per record, ``\\n``-separated.
        """
        columns = self.columns
        lines = [",".join(columns)]
        for record in records:
            row = to_row(record)
            if join is not None:
                row.update(join(record))
            lines.append(",".join(self._cell(column, row.get(column)) for column in columns))

        logger.info("Exported %d buyers to CSV", len(lines) - 1)
        return "\n".join(lines)

    def _cell(self, column: str, value: Any) -> str:
        if value is not None and self.codec.handles(column):
            value = self.codec.decode(column, value)
        return quote_cell(serialize_value(value))


def export_csv(
    records: Iterable[Any],
    join_columns: Sequence[str] = (),
    join: Callable[[Any], Mapping[str, Any]] | None = None,
) -> str:
    """Render records as CSV with a default strict exporter."""
    return CsvExporter(join_columns=join_columns).export(records, join=join)
