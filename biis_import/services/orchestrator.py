from __future__ import annotations

import logging
from datetime import UTC, datetime

from openpyxl.worksheet.worksheet import Worksheet

from ..excel.workbook import build_header_index, iter_sheet_rows
from ..logging.error_log import ErrorLogBuffer, ErrorRecord
from ..models.entities import Container
from ..models.import_result import ImportResult
from .identity import IdentityResolver
from .progress import ProgressTracker
from .row_processor import CellFailure, RowError, RowProcessor
from .validator import SubsetValidator, ValuationValidationError

logger = logging.getLogger(__name__)

"""Sheet import orchestration.

Drives one selected worksheet through the row state machine:

    HeaderRow (row 0) -> DataRows (row 1..n, rows with an empty first cell
    skipped) -> Done

Every data row runs in its own failure domain. A failing row is logged,
recorded in the error log and counted; the import continues with the next
row and the Container keeps everything earlier rows produced.
"""

__all__ = [
    "import_sheet",
]


def import_sheet(
    sheet: Worksheet,
    container: Container,
    *,
    file_name: str,
    validator: SubsetValidator | None = None,
    error_log: ErrorLogBuffer | None = None,
) -> ImportResult:
    """Import all data rows of ``sheet`` into ``container``.

    Args:
        sheet: the selected worksheet; row 0 holds the BIIS headers
        container: receives properties and valuations (mutated in place)
        file_name: workbook name used in error records
        validator: subset validator run on every assembled valuation;
            None skips validation
        error_log: buffer for contained failures (not flushed here)

    Returns:
        ImportResult with row counters and timing
    """
    error_log = error_log if error_log is not None else ErrorLogBuffer()
    result = ImportResult(file_name=file_name, sheet_name=sheet.title, start_time=datetime.now(UTC))
    resolver = IdentityResolver(container.properties)

    def record_cell_failure(failure: CellFailure) -> None:
        result.cell_errors += 1
        error_log.append(
            ErrorRecord.create(
                file_name,
                sheet.title,
                failure.row_index + 1,
                "CELL_COERCION_ERROR",
                str(failure.error),
                column=failure.column,
                header=failure.header,
                value=failure.value,
            )
        )

    processor: RowProcessor | None = None
    with ProgressTracker(sheet.max_row - 1, description=f"Reading {sheet.title}") as progress:
        for row_index, cells in iter_sheet_rows(sheet):
            if row_index == 0:
                # a header row with an empty first cell is skipped like any other row
                headers = {} if _first_cell_empty(cells) else build_header_index(cells)
                logger.debug(f"sheet '{sheet.title}': {len(headers)} header columns")
                processor = RowProcessor(headers, resolver, on_cell_error=record_cell_failure)
                continue
            if processor is None or _first_cell_empty(cells):
                continue

            row_number = row_index + 1
            result.total_rows += 1
            ok = _import_row(processor, row_index, cells, validator, error_log, result)
            if ok:
                result.imported_rows += 1
            progress.finish_row(success=ok)
            logger.debug(f"row {row_number} {'imported' if ok else 'failed'}")

    result.end_time = datetime.now(UTC)
    result.property_count = len(container.properties)
    result.valuation_count = container.valuation_count
    return result


def _first_cell_empty(cells: tuple) -> bool:
    """True if the row has no value in column A. Error cells (#N/A, ...) count as present."""
    return not cells or cells[0].value is None


def _import_row(
    processor: RowProcessor,
    row_index: int,
    cells: tuple,
    validator: SubsetValidator | None,
    error_log: ErrorLogBuffer,
    result: ImportResult,
) -> bool:
    """Process one data row; contain and record its failure. Returns success."""
    row_number = row_index + 1

    def record(error_type: str, e: Exception, **cell: str | None) -> None:
        error_log.append(
            ErrorRecord.create(result.file_name, result.sheet_name, row_number, error_type, str(e), **cell)
        )

    try:
        state = processor.process(row_index, cells)
    except RowError as e:
        logger.error(f"cannot read row {row_number}: {e}")
        record(e.error_type, e, column=e.column, header=e.header, value=e.value)
        result.record_failure(row_number)
        return False
    except Exception as e:
        logger.error(f"cannot read row {row_number}: {e}", exc_info=True)
        record("ROW_ERROR", e)
        result.record_failure(row_number)
        return False

    # from here on the row's data stays in the Container even if the row fails
    if validator is not None:
        try:
            validator.validate(state.valuation)
        except ValuationValidationError as e:
            logger.error(f"cannot read row {row_number}: {e}")
            record("VALIDATION_ERROR", e)
            result.record_failure(row_number, rejected=True)
            return False
    if state.skipped_cells:
        logger.error(f"cannot read row {row_number}: {state.skipped_cells} cell(s) could not be converted")
        result.record_failure(row_number, rejected=True)
        return False
    return True
