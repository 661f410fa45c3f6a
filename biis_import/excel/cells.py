from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from enum import Enum
from typing import Any

from openpyxl.utils import get_column_letter

"""Cell value extraction.

Turns an openpyxl cell into a typed ``CellValue`` using only the cell's
declared kind and number format. Text is never parsed here: a numeric
looking string stays a string, a date typed as text stays a string.

openpyxl data types handled:
- 's' / 'str' / 'inlineStr' -> STRING
- 'n' -> NUMBER, or DATE when the number format is a date format
- 'd' -> DATE
- 'b' -> BOOLEAN
- 'f' -> FORMULA (source text; workbooks are opened with data_only=False)
- 'e' (error) and empty cells -> None
"""

__all__ = [
    "CellKind",
    "CellValue",
    "extract",
    "cell_text",
    "cell_reference",
]


class CellKind(Enum):
    STRING = "string"
    NUMBER = "number"
    DATE = "date"
    BOOLEAN = "boolean"
    FORMULA = "formula"


@dataclass(frozen=True)
class CellValue:
    """Typed content of one cell.

    ``value`` is a ``str`` for STRING/FORMULA, ``float`` for NUMBER, ``bool``
    for BOOLEAN and ``datetime``/``date``/``time`` for DATE.
    """
    kind: CellKind
    value: Any

    def __str__(self) -> str:
        return cell_text(self) or ""


def _formula_text(raw: Any) -> str:
    # ArrayFormula / DataTableFormula objects carry the source in .text
    text = getattr(raw, "text", None)
    return str(text if text is not None else raw)


def extract(cell: Any) -> CellValue | None:
    """Extract the typed value of ``cell``.

    Never raises; blank, error and unknown cells yield None.
    """
    if cell is None:
        return None
    raw = getattr(cell, "value", None)
    if raw is None:
        return None

    data_type = getattr(cell, "data_type", None)
    if data_type == "f":
        return CellValue(CellKind.FORMULA, _formula_text(raw))
    if data_type == "b":
        return CellValue(CellKind.BOOLEAN, bool(raw))
    if data_type in ("n", "d"):
        if getattr(cell, "is_date", False) or isinstance(raw, (datetime, date, time)):
            return CellValue(CellKind.DATE, raw)
        if isinstance(raw, bool):
            return CellValue(CellKind.BOOLEAN, raw)
        if isinstance(raw, (int, float)):
            return CellValue(CellKind.NUMBER, float(raw))
        return None
    if data_type in ("s", "str", "inlineStr"):
        return CellValue(CellKind.STRING, str(raw))
    return None


def cell_text(value: CellValue | None) -> str | None:
    """Render a typed value as text (header names, string fields, logs).

    Whole numbers render without a trailing ``.0`` so that numeric ids and
    postcodes read as typed in the sheet.
    """
    if value is None:
        return None
    raw = value.value
    if value.kind is CellKind.NUMBER and float(raw).is_integer():
        return str(int(raw))
    if value.kind is CellKind.BOOLEAN:
        return "TRUE" if raw else "FALSE"
    if value.kind is CellKind.DATE and hasattr(raw, "isoformat"):
        return raw.isoformat()
    return str(raw)


def cell_reference(row_index: int, column_index: int) -> str:
    """A1 style reference from 0-based row/column indexes (``(2, 0)`` -> ``A3``)."""
    return f"{get_column_letter(column_index + 1)}{row_index + 1}"
