from __future__ import annotations

from ..models.import_result import ImportResult

"""SUMMARY line rendering for the BIIS import CLI.

Format (one line, keys in fixed order):

    SUMMARY rows=<n> imported=<n> failed=<n> cell_errors=<n> properties=<n> valuations=<n> elapsed_sec=<x>
"""


def _format_seconds(seconds: float) -> str:
    if seconds == 0:
        return "0"
    if seconds == int(seconds):
        return str(int(seconds))
    if seconds < 0.01:
        # avoid scientific notation
        return f"{seconds:.6f}".rstrip('0').rstrip('.')
    return f"{seconds:.3f}".rstrip('0').rstrip('.')


def render_summary_line(result: ImportResult) -> str:
    """Render the SUMMARY line of one import.

    Args:
        result: counters of the finished import

    Returns:
        Formatted SUMMARY line, ``"SUMMARY "`` prefix included

    Examples:
        >>> from datetime import datetime, timezone
        >>> r = ImportResult(file_name="a.xlsx", sheet_name="Objekte", total_rows=3,
        ...     imported_rows=2, failed_rows=1, property_count=1, valuation_count=2,
        ...     start_time=datetime(2024, 1, 1, tzinfo=timezone.utc),
        ...     end_time=datetime(2024, 1, 1, 0, 0, 2, tzinfo=timezone.utc))
        >>> render_summary_line(r)
        'SUMMARY rows=3 imported=2 failed=1 cell_errors=0 properties=1 valuations=2 elapsed_sec=2'
    """
    return (
        f"SUMMARY rows={result.total_rows} "
        f"imported={result.imported_rows} "
        f"failed={result.failed_rows} "
        f"cell_errors={result.cell_errors} "
        f"properties={result.property_count} "
        f"valuations={result.valuation_count} "
        f"elapsed_sec={_format_seconds(result.elapsed_seconds)}"
    )
