from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Generic, TypeVar

import pycountry

from ..excel.cells import CellKind, CellValue, cell_text
from ..models.datatypes import Amount, Area, Period
from ..models.enums import (
    AreaMeasurement,
    AreaType,
    ConstructionPhase,
    InteriorQuality,
    ObjectCondition,
    OwnershipType,
    RetailLocationType,
    UseType,
    ValuationType1,
    ValuationType2,
)

"""Coercion library: typed cell values -> GIF values.

Every coercion accepts ``CellValue | None`` and returns the domain value or
None. None always propagates. Two failure policies exist side by side:

- lenient: wrong kind -> None (dates, numbers, booleans, amounts, areas)
- strict: malformed input -> CoercionError (year, strict period, currency,
  country, closed enumerations)

Closed enumerations distinguish "no code" (None) from "unknown code"
(UnknownCodeError). Unknown codes are never mapped to a default member.
"""

__all__ = [
    "CoercionError",
    "UnknownCodeError",
    "CodeTable",
    "to_string",
    "to_date",
    "to_year",
    "to_boolean",
    "to_number",
    "to_integer",
    "to_amount",
    "to_area",
    "to_period",
    "to_period_lenient",
    "to_currency",
    "to_country",
    "to_area_measurement",
    "to_use_type",
    "to_ownership_type",
    "to_valuation_type1",
    "to_valuation_type2",
    "to_retail_location",
    "to_condition",
    "to_interior_quality",
    "to_construction_phase",
]

E = TypeVar("E", bound=Enum)

YEAR_PATTERN = re.compile(r"[0-9.-]+")


class CoercionError(Exception):
    """A non-null cell value cannot be converted to its target type."""


class UnknownCodeError(CoercionError):
    """A code is absent from a closed enumeration table."""

    def __init__(self, enumeration: str, code: str) -> None:
        super().__init__(f"unknown {enumeration} code: {code!r}")
        self.enumeration = enumeration
        self.code = code


@dataclass(frozen=True)
class CodeTable(Generic[E]):
    """Closed lookup table from raw BIIS codes to one enumeration member."""
    name: str
    codes: Mapping[str, E]

    def lookup(self, code: str | None) -> E | None:
        if code is None:
            return None
        try:
            return self.codes[code]
        except KeyError:
            raise UnknownCodeError(self.name, code) from None

    def __contains__(self, code: object) -> bool:
        return code in self.codes


AREA_MEASUREMENTS: CodeTable[AreaMeasurement] = CodeTable("area measurement", {
    "sqft": AreaMeasurement.SQFT,
    "qm": AreaMeasurement.SQM,
    "tsubo": AreaMeasurement.TSUBO,
    "pyeong": AreaMeasurement.TSUBO,
})

USE_TYPES: CodeTable[UseType] = CodeTable("use type", {
    "Buero": UseType.OFFICE,
    "Handel": UseType.RETAIL,
    "Industrie(Lager,Hallen)": UseType.INDUSTRY,
    "Keller/Archiv": UseType.OTHER,
    "Gastronomie": UseType.GASTRONOMY,
    "Hotel": UseType.HOTEL,
    "Wohnen": UseType.RESIDENTIAL,
    "Freizeit": UseType.LEISURE,
    "Garage/TG": UseType.PARKING,
    "Aussenstellplaetze": UseType.PARKING,
    "unbekannt": UseType.NOT_SPECIFIED,
})

# keyed by the leading digit of e.g. "5 - Volleigentum"
OWNERSHIP_TYPES: CodeTable[OwnershipType] = CodeTable("ownership type", {
    "0": OwnershipType.OTHER,  # unbekannt
    "1": OwnershipType.OTHER,  # Dingliches Nutzungsrecht
    "2": OwnershipType.LEASEHOLD,  # Erbbaurecht
    "3": OwnershipType.OTHER,  # gemischte Eigentumsform
    "4": OwnershipType.OTHER,  # Teileigentum
    "5": OwnershipType.FREEHOLDER,  # Volleigentum
    "6": OwnershipType.OTHER,  # Volumeneigentum
})

VALUATION_TYPES_1: CodeTable[ValuationType1] = CodeTable("valuation type 1", {
    "Fondsgutachten": ValuationType1.FUND,
    "Privatgutachten": ValuationType1.PRIVATE,
    "Gerichtsgutachten": ValuationType1.COURT,
    "Fremdgutachten": ValuationType1.THIRD_PERSON,
})

VALUATION_TYPES_2: CodeTable[ValuationType2] = CodeTable("valuation type 2", {
    "U": ValuationType2.UNKNOWN,
    "E": ValuationType2.FIRST_VALUATION,
    "N": ValuationType2.REVALUATION,
    "V": ValuationType2.MARKET_VALUATION_REPORT,
})

RETAIL_LOCATIONS: CodeTable[RetailLocationType] = CodeTable("retail location", {
    "1a": RetailLocationType.HIGH_STREET,
    "1b": RetailLocationType.CITY_CENTRE_OTHER,
    "2a": RetailLocationType.MAJOR_ROUTE,
    "2b": RetailLocationType.SUBURBAN_OTHER,
    "c": RetailLocationType.NON_URBAN,
    "unbekannt": RetailLocationType.UNKNOWN,
    "(unbekannt)": RetailLocationType.UNKNOWN,
})

CONDITIONS: CodeTable[ObjectCondition] = CodeTable("structural condition", {
    "sehr gut": ObjectCondition.NEW,
    "gut": ObjectCondition.AGE_APPROPRIATE,
    "durchschnittlich": ObjectCondition.AGE_APPROPRIATE,
    "schlecht": ObjectCondition.IN_NEED_OF_REPAIR,
    "(unbekannt)": ObjectCondition.NOT_AVAILABLE,
})

INTERIOR_QUALITIES: CodeTable[InteriorQuality] = CodeTable("fit-out quality", {
    "stark gehoben": InteriorQuality.LUXURY,
    "gehoben": InteriorQuality.SOPHISTICATED,
    "mittel": InteriorQuality.NORMAL,
    "einfach": InteriorQuality.SIMPLE,
    "(unbekannt)": InteriorQuality.SIMPLE,
})

CONSTRUCTION_PHASES: CodeTable[ConstructionPhase] = CodeTable("state of completion", {
    "F": ConstructionPhase.COMPLETED,
    "I": ConstructionPhase.IN_COMPLETION,
    "P": ConstructionPhase.PLANNED,
})


# --- scalar coercions -------------------------------------------------------

def to_string(value: CellValue | None) -> str | None:
    return cell_text(value)


def to_date(value: CellValue | None) -> date | None:
    """Date from a date-typed cell only; strings are never parsed."""
    if value is None or value.kind is not CellKind.DATE:
        return None
    raw = value.value
    if isinstance(raw, datetime):
        return raw.date()
    if isinstance(raw, date):
        return raw
    # a bare time of day carries no date
    return None


def to_year(value: CellValue | None) -> date | None:
    """January 1 of the year in the first four characters of ``"1987"``,
    ``"1987.0"`` or ``"1987-1990"``.

    Raises:
        CoercionError: text does not match ``[0-9.-]+`` or has no 4-digit year
    """
    text = cell_text(value)
    if text is None:
        return None
    if value.kind not in (CellKind.STRING, CellKind.NUMBER) or not YEAR_PATTERN.fullmatch(text):
        raise CoercionError(f"cell value doesn't match pattern [0-9.-]+: {text!r}")
    year = text[:4]
    if len(year) != 4 or not year.isdigit():
        raise CoercionError(f"no four digit year at start of {text!r}")
    return date(int(year), 1, 1)


def to_boolean(value: CellValue | None) -> bool | None:
    if value is None:
        return None
    if value.kind is CellKind.BOOLEAN:
        return bool(value.value)
    text = (cell_text(value) or "").upper()
    if text == "TRUE":
        return True
    if text == "FALSE":
        return False
    return None


def to_number(value: CellValue | None) -> float | None:
    """Number from a numeric cell only; numeric looking strings yield None."""
    if value is None or value.kind is not CellKind.NUMBER:
        return None
    return float(value.value)


def to_integer(value: CellValue | None) -> int | None:
    number = to_number(value)
    if number is None:
        return None
    return int(number)


def to_amount(value: CellValue | None, currency: str | None) -> Amount | None:
    number = to_number(value)
    if number is None:
        return None
    return Amount(number, currency)


def to_area(value: CellValue | None, measurement: AreaMeasurement | None) -> Area | None:
    number = to_number(value)
    if number is None:
        return None
    return Area(number, measurement, AreaType.NOT_SPECIFIED)


def to_period(value: CellValue | None) -> Period:
    """Whole years from a numeric cell.

    Raises:
        CoercionError: the cell holds no number
    """
    number = to_number(value)
    if number is None:
        raise CoercionError(f"period requires a number, got {cell_text(value)!r}")
    return Period(int(number))


def to_period_lenient(value: CellValue | None) -> Period | None:
    number = to_number(value)
    if number is None:
        return None
    return Period(int(number))


def to_currency(value: CellValue | None) -> str | None:
    """ISO 4217 alphabetic code such as ``EUR``.

    Raises:
        CoercionError: value is not an existing ISO 4217 code
    """
    text = cell_text(value)
    if text is None:
        return None
    code = text.strip()
    if len(code) != 3 or not code.isupper() or pycountry.currencies.get(alpha_3=code) is None:
        raise CoercionError(f"invalid currency code: {text!r}")
    return code


def to_country(value: CellValue | None) -> str | None:
    """ISO 3166-1 alpha-2 country code; an empty cell text means no country.

    Raises:
        CoercionError: value is not an existing ISO 3166-1 alpha-2 code
    """
    text = cell_text(value)
    if text is None or text.strip() == "":
        return None
    code = text.strip()
    if len(code) != 2 or not code.isupper() or pycountry.countries.get(alpha_2=code) is None:
        raise CoercionError(f"invalid country code: {text!r}")
    return code


# --- closed enumerations ----------------------------------------------------

def to_area_measurement(value: CellValue | None) -> AreaMeasurement | None:
    return AREA_MEASUREMENTS.lookup(cell_text(value))


def to_use_type(value: CellValue | None) -> UseType | None:
    return USE_TYPES.lookup(cell_text(value))


def to_ownership_type(value: CellValue | None) -> OwnershipType | None:
    text = cell_text(value)
    if text is None:
        return None
    return OWNERSHIP_TYPES.lookup(text[:1])


def to_valuation_type1(value: CellValue | None) -> ValuationType1 | None:
    return VALUATION_TYPES_1.lookup(cell_text(value))


def to_valuation_type2(value: CellValue | None) -> ValuationType2 | None:
    return VALUATION_TYPES_2.lookup(cell_text(value))


def to_retail_location(value: CellValue | None) -> RetailLocationType | None:
    return RETAIL_LOCATIONS.lookup(cell_text(value))


def to_condition(value: CellValue | None) -> ObjectCondition | None:
    return CONDITIONS.lookup(cell_text(value))


def to_interior_quality(value: CellValue | None) -> InteriorQuality | None:
    return INTERIOR_QUALITIES.lookup(cell_text(value))


def to_construction_phase(value: CellValue | None) -> ConstructionPhase | None:
    """F/I/P, or any code starting with ``0`` (e.g. ``"0 - sonstige"``) -> OTHER."""
    text = cell_text(value)
    if text is None:
        return None
    if text in CONSTRUCTION_PHASES:
        return CONSTRUCTION_PHASES.lookup(text)
    if text.startswith("0"):
        return ConstructionPhase.OTHER
    raise UnknownCodeError(CONSTRUCTION_PHASES.name, text)
