from __future__ import annotations

from collections.abc import Iterator, Sequence
from typing import IO, Any

from openpyxl import load_workbook
from openpyxl.workbook.workbook import Workbook
from openpyxl.worksheet.worksheet import Worksheet

from .cells import cell_text, extract

"""Workbook access for BIIS exports.

- open an .xlsx stream (formulas kept as source text)
- select the sheet by 1-based number or by title (number wins)
- build the header index from row 0
- iterate rows with their 0-based index
"""

__all__ = [
    "DocumentError",
    "open_workbook",
    "select_sheet",
    "build_header_index",
    "iter_sheet_rows",
]


class DocumentError(Exception):
    """Workbook cannot be opened or the selected sheet does not exist."""


def open_workbook(stream: IO[bytes] | Any) -> Workbook:
    """Open an .xlsx workbook from a binary stream or path.

    ``data_only=False`` keeps formula cells as formulas so the extractor can
    return their source text.

    Raises:
        DocumentError: stream missing or not a readable workbook
    """
    if stream is None:
        raise DocumentError("no BIIS workbook stream given")
    try:
        return load_workbook(stream, data_only=False)
    except Exception as e:
        raise DocumentError(f"cannot open workbook: {e}") from e


def select_sheet(workbook: Workbook, sheet_number: int | None, sheet_name: str | None) -> Worksheet:
    """Return the worksheet selected by number (1-based) or title.

    Raises:
        DocumentError: no selector given, number out of range, unknown title
    """
    if sheet_number is not None:
        titles = workbook.sheetnames
        if not 1 <= sheet_number <= len(titles):
            raise DocumentError(
                f"sheet number {sheet_number} out of range (workbook has {len(titles)} sheets)"
            )
        return workbook.worksheets[sheet_number - 1]
    if sheet_name is not None:
        if sheet_name not in workbook.sheetnames:
            raise DocumentError(f"sheet '{sheet_name}' not found (available: {workbook.sheetnames})")
        return workbook[sheet_name]
    raise DocumentError("neither sheet number nor sheet name given")


def build_header_index(header_cells: Sequence[Any]) -> dict[int, str]:
    """Map column index -> header name for every non-empty header cell."""
    headers: dict[int, str] = {}
    for column_index, cell in enumerate(header_cells):
        name = cell_text(extract(cell))
        if name is None:
            continue
        name = name.strip()
        if name:
            headers[column_index] = name
    return headers


def iter_sheet_rows(sheet: Worksheet) -> Iterator[tuple[int, tuple[Any, ...]]]:
    """Yield ``(row_index, cells)`` for every row, row_index 0-based."""
    for row_index, cells in enumerate(sheet.iter_rows()):
        yield row_index, cells
