"""
Turn an uploaded ICF log spreadsheet into header-keyed row dicts.

ICF log templates carry a title block above the table, so the header row
is located by content rather than assumed to be the first row.
"""

import csv
import io
from typing import Any, Optional
from zipfile import BadZipFile

from libs.common.errors import ValidationFailed
from libs.common.logging import get_logger
from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

logger = get_logger(__name__)

HEADER_MARKER = "client name"
CSV_DELIMITERS = ",;\t"
XLSX_EXTENSIONS = (".xlsx", ".xlsm")

Grid = list[list[Any]]


def _is_blank(cell: Any) -> bool:
    return cell is None or (isinstance(cell, str) and not cell.strip())


def find_header_row(grid: Grid) -> int:
    """Index of the first row with a cell mentioning "Client Name", else 0."""
    for index, row in enumerate(grid):
        for cell in row:
            if isinstance(cell, str) and HEADER_MARKER in cell.strip().lower():
                return index
    return 0


def extract_rows(grid: Grid) -> list[dict[str, Any]]:
    """Rows below the header as dicts keyed by header text.

    Rows above the header and rows with every cell blank are dropped.
    Columns without a header are ignored.
    """
    if not grid:
        return []

    header_index = find_header_row(grid)
    headers = [
        str(cell).strip() if not _is_blank(cell) else None
        for cell in grid[header_index]
    ]

    rows = []
    for raw in grid[header_index + 1:]:
        if all(_is_blank(cell) for cell in raw):
            continue
        row: dict[str, Any] = {}
        for position, header in enumerate(headers):
            if header is None:
                continue
            value = raw[position] if position < len(raw) else None
            if isinstance(value, str):
                value = value.strip()
            row[header] = value
        rows.append(row)
    return rows


def _read_xlsx(content: bytes) -> Grid:
    try:
        workbook = load_workbook(io.BytesIO(content), read_only=True, data_only=True)
    except (InvalidFileException, BadZipFile, KeyError, ValueError, OSError) as e:
        raise ValidationFailed(f"Could not read spreadsheet: {e}") from e
    try:
        sheet = workbook.worksheets[0]
        return [list(row) for row in sheet.iter_rows(values_only=True)]
    finally:
        workbook.close()


def _decode(content: bytes) -> str:
    try:
        return content.decode("utf-8-sig")
    except UnicodeDecodeError:
        return content.decode("latin-1")


def _sniff_delimiter(text: str) -> str:
    first_line = text.split("\n", 1)[0]
    counts = {d: first_line.count(d) for d in CSV_DELIMITERS}
    best = max(counts, key=counts.get)
    return best if counts[best] else ","


def _read_csv(content: bytes) -> Grid:
    text = _decode(content)
    reader = csv.reader(io.StringIO(text), delimiter=_sniff_delimiter(text))
    return [list(row) for row in reader]


def read_grid(content: bytes, filename: Optional[str]) -> Grid:
    """Read the first sheet of an xlsx upload, or a CSV upload, as a 2-D list."""
    name = (filename or "").lower()
    if name.endswith(XLSX_EXTENSIONS):
        grid = _read_xlsx(content)
    elif name.endswith((".csv", ".txt")):
        grid = _read_csv(content)
    else:
        raise ValidationFailed("Unsupported file type. Upload an .xlsx or .csv file.")
    logger.debug(f"Read {len(grid)} rows from {filename}")
    return grid
