from __future__ import annotations

from dataclasses import dataclass

from .enums import AreaMeasurement, AreaType

"""Value types of the GIF model (Amount, Area, Period).

All three are immutable; a coercion builds a new instance for every cell.
"""

__all__ = [
    "Amount",
    "Area",
    "Period",
]


@dataclass(frozen=True)
class Amount:
    """Monetary amount. ``currency`` is an ISO 4217 code or None when the
    currency column was not seen before the amount column."""
    value: float
    currency: str | None


@dataclass(frozen=True)
class Area:
    value: float
    measurement: AreaMeasurement | None
    area_type: AreaType = AreaType.NOT_SPECIFIED


@dataclass(frozen=True)
class Period:
    """Duration in whole years."""
    years: int
