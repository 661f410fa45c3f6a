from __future__ import annotations

from dataclasses import dataclass, field

from ..models.entities import Address, Property, Valuation
from ..models.enums import AreaMeasurement
from .identity import IdentityResolver

"""Per-row state threaded through every field handler.

RowContext holds the sticky conversion parameters set by the ``Currency``
and ``ArealUnit`` columns. Handlers only see values set by columns to their
left: cells are visited in ascending column order.
"""

__all__ = [
    "RowContext",
    "RowState",
]


@dataclass
class RowContext:
    currency: str | None = None
    area_measurement: AreaMeasurement | None = None


@dataclass
class RowState:
    """Everything a handler may read or mutate while one data row is read.

    A fresh RowState (new Property, Valuation, Address and empty RowContext)
    is created for every data row; only ``resolver`` is shared.
    """
    row_index: int  # 0-based sheet row
    resolver: IdentityResolver
    context: RowContext = field(default_factory=RowContext)
    prop: Property = field(default_factory=Property)
    valuation: Valuation = field(default_factory=Valuation)
    skipped_cells: int = 0  # cells that failed coercion and were left out

    @property
    def address(self) -> Address:
        return self.valuation.address

    @property
    def row_number(self) -> int:
        """1-based row number as shown by spreadsheet applications."""
        return self.row_index + 1
