from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

"""Import result model: row counters and timing of one sheet import.

Filled in by the orchestrator while rows are processed and rendered by
services.summary into the SUMMARY line.
"""


@dataclass
class ImportResult:
    """Aggregated counters of one import run.

    ``failed_rows`` counts rows that did not import cleanly (row aborted, no
    valuation attached, validator rejection, unconvertible cells).
    ``cell_errors`` counts the skipped cells themselves. ``rejected_rows`` is
    the subset of failed rows whose data is nevertheless kept in the
    Container: the row was assembled, but the validator rejected it or some
    of its cells were left out.
    """
    file_name: str
    sheet_name: str
    total_rows: int = 0  # data rows visited (blank rows excluded)
    imported_rows: int = 0
    failed_rows: int = 0
    rejected_rows: int = 0
    cell_errors: int = 0
    property_count: int = 0
    valuation_count: int = 0
    start_time: datetime | None = None
    end_time: datetime | None = None
    failed_row_numbers: list[int] = field(default_factory=list)  # 1-based

    @property
    def elapsed_seconds(self) -> float:
        if self.start_time is None or self.end_time is None:
            return 0.0
        return (self.end_time - self.start_time).total_seconds()

    @property
    def has_failures(self) -> bool:
        return self.failed_rows > 0

    def record_failure(self, row_number: int, *, rejected: bool = False) -> None:
        self.failed_rows += 1
        self.failed_row_numbers.append(row_number)
        if rejected:
            self.rejected_rows += 1
