"""Quote-aware CSV splitting.

``tokenize_line`` splits one record into fields; ``split_records`` splits a
document into records without breaking quoted fields that contain newlines.
Inside a quoted field a doubled quote is a literal quote. ``tokenize_line``
toggles quoting on any other quote; ``split_records`` only treats a quote at
the start of a field as opening one.
"""

from __future__ import annotations

from dataclasses import dataclass

QUOTE = '"'
DELIMITER = ","


def tokenize_line(line: str) -> list[str]:
    """Split a single CSV record into trimmed field strings.

    Always returns at least one field; an empty line yields ``[""]``.

    Examples
    --------
    >>> tokenize_line('a, "b, c" ,"x ""y"" z"')
    ['a', 'b, c', 'x "y" z']
    """
    fields: list[str] = []
    current: list[str] = []
    in_quotes = False
    i = 0
    length = len(line)

    while i < length:
        char = line[i]
        if char == QUOTE:
            if in_quotes and i + 1 < length and line[i + 1] == QUOTE:
                current.append(QUOTE)
                i += 2
                continue
            in_quotes = not in_quotes
        elif char == DELIMITER and not in_quotes:
            fields.append("".join(current).strip())
            current = []
        else:
            current.append(char)
        i += 1

    fields.append("".join(current).strip())
    return fields


@dataclass(frozen=True)
class RawRecord:
    """One CSV record and the 0-based source line it starts on."""

    line_number: int
    text: str


def _ends_inside_quotes(line: str, in_quotes: bool) -> bool:
    """Scan one physical line and report whether a quoted field is still open.

    A quote opens a field only at the start of that field (leading spaces
    allowed); a stray quote inside an unquoted cell does not.
    """
    at_field_start = not in_quotes
    i = 0
    length = len(line)

    while i < length:
        char = line[i]
        if in_quotes:
            if char == QUOTE:
                if i + 1 < length and line[i + 1] == QUOTE:
                    i += 2
                    continue
                in_quotes = False
        elif char == DELIMITER:
            at_field_start = True
        elif char == QUOTE and at_field_start:
            in_quotes = True
            at_field_start = False
        elif not char.isspace():
            at_field_start = False
        i += 1

    return in_quotes


def split_records(document: str, multiline: bool = True) -> list[RawRecord]:
    """Split a CSV document into records.

    Parameters
    ----------
    document : str
        Full CSV text.
    multiline : bool
        When True, newlines inside quoted fields stay part of the field.
        When False, every physical line is a record (quoted newlines are
        not supported).

    Returns
    -------
    list[RawRecord]
        Records with carriage returns at line ends removed.
    """
    lines = [line.rstrip("\r") for line in document.split("\n")]
    if not multiline:
        return [RawRecord(n, line) for n, line in enumerate(lines)]

    records: list[RawRecord] = []
    pending: list[str] = []
    start = 0
    in_quotes = False

    for n, line in enumerate(lines):
        if not pending:
            start = n
        pending.append(line)
        in_quotes = _ends_inside_quotes(line, in_quotes)
        if not in_quotes:
            records.append(RawRecord(start, "\n".join(pending)))
            pending = []

    # A quote that never closes must not swallow the rows after it
    records.extend(RawRecord(start + k, line) for k, line in enumerate(pending))

    return records
