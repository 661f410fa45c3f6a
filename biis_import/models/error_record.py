from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime

"""ErrorRecord model for the structured import error log.

One record per contained failure: a cell that could not be coerced, a row
that could not be assembled or was rejected by the validator, or a
document-level failure. ``row`` is the 1-based sheet row; -1 marks
document-level errors where no row applies.

Error types (UPPER_SNAKE):
- CELL_COERCION_ERROR: cell skipped, row continues
- CONTEXT_COLUMN_ERROR: currency / areal unit cell failed, row aborted
- ROW_ASSEMBLY_ERROR: row finished without an attached valuation or id
- VALIDATION_ERROR: valuation rejected by the subset validator (data kept)
- ROW_ERROR: any other failure while reading a row
- DOCUMENT_ERROR: workbook or sheet unusable, import aborted
"""

__all__ = [
    "ErrorRecord",
]

ERROR_TYPES = frozenset({
    "CELL_COERCION_ERROR",
    "CONTEXT_COLUMN_ERROR",
    "ROW_ASSEMBLY_ERROR",
    "VALIDATION_ERROR",
    "ROW_ERROR",
    "DOCUMENT_ERROR",
})


@dataclass(frozen=True)
class ErrorRecord:
    """Structured error record for JSON Lines logging.

    Attributes:
        timestamp: ISO8601 UTC timestamp with 'Z' suffix
        file: workbook name being imported
        sheet: sheet title (or the requested selector if the sheet is missing)
        row: 1-based row number, -1 for document-level errors
        column: column letters of the failing cell, "" for row/document errors
        header: BIIS header of the failing cell, "" when not cell related
        error_type: error classification in UPPER_SNAKE_CASE format
        message: human readable failure description
        value: raw cell value as text, None when not cell related
    """
    timestamp: str  # ISO8601 UTC
    file: str
    sheet: str
    row: int  # -1 for document level
    column: str
    header: str
    error_type: str  # UPPER_SNAKE
    message: str
    value: str | None = None

    @staticmethod
    def create(
        file: str,
        sheet: str,
        row: int,
        error_type: str,
        message: str,
        *,
        column: str = "",
        header: str = "",
        value: str | None = None,
    ) -> ErrorRecord:
        """Create a new ErrorRecord stamped with the current UTC time."""
        ts = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        return ErrorRecord(
            timestamp=ts,
            file=file,
            sheet=sheet,
            row=row,
            column=column,
            header=header,
            error_type=error_type,
            message=message,
            value=value,
        )

    def to_json_line(self) -> str:
        """Serialize to one JSON Lines entry with the fixed key set."""
        return json.dumps(asdict(self), ensure_ascii=False)
