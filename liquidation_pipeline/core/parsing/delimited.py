"""
Delimited text splitting.

Quoting follows the csv module's excel dialect: quoted fields may contain
the delimiter and newlines, and a doubled quote escapes a quote.
"""

import csv
import io

from pydantic import BaseModel, Field

CANDIDATE_DELIMITERS = (",", "\t", ";", "|")
BOM = "\ufeff"


class DelimitedTable(BaseModel):
    """
    Header list plus the data rows of one extract.

    Every row is a list of trimmed string cells; short rows are allowed and
    read as blank for the missing trailing cells.
    """

    headers: list[str]
    rows: list[list[str]] = Field(default_factory=list)
    delimiter: str = ","

    @property
    def row_count(self) -> int:
        return len(self.rows)

    def cell(self, row: list[str], index: int) -> str:
        if index < len(row):
            return row[index]
        return ""


def detect_delimiter(header_line: str) -> str:
    """
    Pick the candidate delimiter that occurs most often outside quotes in
    the header line; comma wins ties and header lines without any.
    """
    counts = dict.fromkeys(CANDIDATE_DELIMITERS, 0)
    in_quotes = False
    for char in header_line:
        if char == '"':
            in_quotes = not in_quotes
        elif not in_quotes and char in counts:
            counts[char] += 1

    best = ","
    for delimiter in CANDIDATE_DELIMITERS:
        if counts[delimiter] > counts[best]:
            best = delimiter
    return best


def _first_line(text: str) -> str:
    for line in text.splitlines():
        if line.strip():
            return line
    return ""


def split_table(text: str, delimiter: str | None = None) -> DelimitedTable:
    """
    Split delimited text into a header row and data rows.

    Args:
        text: Decoded file contents
        delimiter: Explicit delimiter; detected from the header line if None

    Returns:
        DelimitedTable with trimmed cells and blank lines removed. Empty
        input yields a table with no headers and no rows.
    """
    if text.startswith(BOM):
        text = text[len(BOM):]

    if delimiter is None:
        delimiter = detect_delimiter(_first_line(text))

    reader = csv.reader(io.StringIO(text, newline=""), delimiter=delimiter)

    headers: list[str] | None = None
    rows: list[list[str]] = []
    for raw in reader:
        cells = [cell.strip() for cell in raw]
        if not any(cells):
            continue
        if headers is None:
            headers = cells
        else:
            rows.append(cells)

    return DelimitedTable(headers=headers or [], rows=rows, delimiter=delimiter)
