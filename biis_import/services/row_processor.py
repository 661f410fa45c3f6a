from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from ..excel.cells import cell_reference, cell_text, extract
from ..models.entities import Address
from .field_map import lookup_handler
from .identity import IdentityResolver
from .row_context import RowState

"""Row processor: one BIIS data row -> Property + Valuation.

Cells are visited in ascending column order and dispatched through the field
map. A failing cell is reported and skipped, unless it belongs to a context
column (Currency, ArealUnit): later amounts and areas of that row would carry
the wrong unit, so the whole row is aborted.

After the last cell the row is finished:
1. attach the valuation under "<expert id>_<ISO date>"
2. synthesize the property label from the address if none was given
3. require at least one valuation on the property
4. require the property to be registered under an object id
"""

logger = logging.getLogger(__name__)

__all__ = [
    "CellFailure",
    "ContextColumnError",
    "RowAssemblyError",
    "RowError",
    "RowProcessor",
    "synthesize_label",
]


class RowError(Exception):
    """Raised when a row cannot be imported. The import continues."""
    error_type = "ROW_ERROR"

    def __init__(self, message: str, *, column: str = "", header: str = "", value: str | None = None) -> None:
        super().__init__(message)
        self.column = column
        self.header = header
        self.value = value


class ContextColumnError(RowError):
    """Currency or areal unit of the row could not be determined."""
    error_type = "CONTEXT_COLUMN_ERROR"


class RowAssemblyError(RowError):
    """Row read completely but no usable Property/Valuation came out of it."""
    error_type = "ROW_ASSEMBLY_ERROR"


@dataclass(frozen=True)
class CellFailure:
    row_index: int
    column_index: int
    header: str
    value: str | None
    error: Exception

    @property
    def reference(self) -> str:
        return cell_reference(self.row_index, self.column_index)

    @property
    def column(self) -> str:
        return self.reference.rstrip("0123456789")


def synthesize_label(address: Address) -> str | None:
    """``"{street}[ {housenumber}], {zip} {city}"``; None without any address part."""
    if not any((address.street, address.zip, address.city)):
        return None
    head = " ".join(p for p in (address.street, address.housenumber) if p)
    tail = " ".join(p for p in (address.zip, address.city) if p)
    return ", ".join(p for p in (head, tail) if p)


class RowProcessor:
    """Reads data rows against a fixed header index.

    Args:
        headers: column index -> BIIS header, built from row 0
        resolver: property table shared by all rows of the import
        on_cell_error: called for every skipped cell (not for context columns)
    """

    def __init__(
        self,
        headers: Mapping[int, str],
        resolver: IdentityResolver,
        on_cell_error: Callable[[CellFailure], None] | None = None,
    ) -> None:
        self.headers = dict(headers)
        self.resolver = resolver
        self.on_cell_error = on_cell_error

    def process(self, row_index: int, cells: Sequence[Any]) -> RowState:
        """Read one data row.

        Returns:
            The finished RowState; its Property is registered and holds the
            row's Valuation.

        Raises:
            ContextColumnError: Currency or ArealUnit cell failed
            RowAssemblyError: no valuation attached, no label, no object id
        """
        state = RowState(row_index=row_index, resolver=self.resolver)
        for column_index, cell in enumerate(cells):
            header = self.headers.get(column_index)
            handler = lookup_handler(header)
            if handler is None:
                continue
            value = extract(cell)
            if value is None:
                continue
            try:
                handler.apply(value, state)
            except Exception as e:
                failure = CellFailure(row_index, column_index, header, cell_text(value), e)
                logger.warning(
                    f"cannot convert '{header}' of cell [{failure.reference}], value='{failure.value}': {e}"
                )
                if handler.context_column:
                    raise ContextColumnError(
                        f"cannot determine {header} of row {state.row_number}: {e}",
                        column=failure.column,
                        header=header,
                        value=failure.value,
                    ) from e
                state.skipped_cells += 1
                if self.on_cell_error is not None:
                    self.on_cell_error(failure)
        self.finish(state)
        return state

    def finish(self, state: RowState) -> None:
        prop = state.prop
        self.resolver.attach_valuation(prop, state.valuation)

        if prop.label is None:
            label = synthesize_label(state.address)
            if label is None:
                raise RowAssemblyError(
                    f"cannot build property label in row {state.row_number}: address has no street, zip or city"
                )
            prop.label = label

        if not prop.valuations:
            logger.error(f"cannot append valuation for property in row {state.row_number}. IDs correct?")
            raise RowAssemblyError("cannot append valuation for property. IDs correct?")

        if not self.resolver.is_registered(prop):
            raise RowAssemblyError(f"row {state.row_number} has no object id (ObjNoOwner)")
