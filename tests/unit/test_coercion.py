from __future__ import annotations

from datetime import date, datetime, time

import pytest

from biis_import.excel.cells import CellKind, CellValue
from biis_import.models.datatypes import Amount, Area, Period
from biis_import.models.enums import (
    AreaMeasurement,
    ConstructionPhase,
    InteriorQuality,
    ObjectCondition,
    OwnershipType,
    RetailLocationType,
    UseType,
    ValuationType1,
    ValuationType2,
)
from biis_import.services import coercion as c
from biis_import.services.coercion import CoercionError, UnknownCodeError


def s(text: str) -> CellValue:
    return CellValue(CellKind.STRING, text)


def n(number: float) -> CellValue:
    return CellValue(CellKind.NUMBER, float(number))


def d(value) -> CellValue:
    return CellValue(CellKind.DATE, value)


ALL_COERCIONS = [
    c.to_string, c.to_date, c.to_year, c.to_boolean, c.to_number, c.to_integer,
    c.to_period_lenient, c.to_currency, c.to_country, c.to_area_measurement,
    c.to_use_type, c.to_ownership_type, c.to_valuation_type1, c.to_valuation_type2,
    c.to_retail_location, c.to_condition, c.to_interior_quality, c.to_construction_phase,
]


@pytest.mark.parametrize("fn", ALL_COERCIONS, ids=lambda f: f.__name__)
def test_none_propagates(fn):
    assert fn(None) is None


# --- dates & years ---

def test_date_only_from_date_kind():
    assert c.to_date(d(datetime(2020, 3, 1, 12, 30))) == date(2020, 3, 1)
    assert c.to_date(d(date(2020, 3, 1))) == date(2020, 3, 1)
    assert c.to_date(s("2020-03-01")) is None
    assert c.to_date(n(43891)) is None
    assert c.to_date(d(time(8, 0))) is None


@pytest.mark.parametrize("text,year", [("1987", 1987), ("1987.0", 1987), ("1987-1990", 1987)])
def test_year_from_text(text, year):
    assert c.to_year(s(text)) == date(year, 1, 1)


def test_year_from_numeric_cell():
    assert c.to_year(n(1995)) == date(1995, 1, 1)


@pytest.mark.parametrize("value", [s("ca. 1990"), s("87"), s(""), d(datetime(1990, 1, 1))])
def test_year_malformed_is_hard_failure(value):
    with pytest.raises(CoercionError):
        c.to_year(value)


# --- booleans & numbers ---

def test_boolean():
    assert c.to_boolean(CellValue(CellKind.BOOLEAN, True)) is True
    assert c.to_boolean(s("false")) is False
    assert c.to_boolean(s("True")) is True
    assert c.to_boolean(s("ja")) is None
    assert c.to_boolean(n(1)) is None


def test_number_only_from_numeric_kind():
    assert c.to_number(n(12.5)) == 12.5
    assert c.to_number(s("12.5")) is None
    assert c.to_number(CellValue(CellKind.FORMULA, "=1+1")) is None


def test_integer_truncates():
    assert c.to_integer(n(7.9)) == 7


# --- context dependent values ---

def test_amount_and_area_null_iff_number_null():
    assert c.to_amount(None, "EUR") is None
    assert c.to_amount(s("n/a"), "EUR") is None
    assert c.to_amount(n(1000), None) == Amount(1000.0, None)
    assert c.to_amount(n(1000), "EUR") == Amount(1000.0, "EUR")

    assert c.to_area(None, AreaMeasurement.SQM) is None
    assert c.to_area(n(250), None) == Area(250.0, None)
    assert c.to_area(n(250), AreaMeasurement.SQFT).measurement is AreaMeasurement.SQFT


def test_period_strict_and_lenient():
    assert c.to_period(n(12.7)) == Period(12)
    with pytest.raises(CoercionError):
        c.to_period(None)
    with pytest.raises(CoercionError):
        c.to_period(s("zehn"))
    assert c.to_period_lenient(s("zehn")) is None
    assert c.to_period_lenient(n(30)) == Period(30)


# --- codes ---

def test_currency():
    assert c.to_currency(s("EUR")) == "EUR"
    assert c.to_currency(s(" CHF ")) == "CHF"
    for bad in ("eur", "Euro", "€", "", "XYZ", "ABC"):
        with pytest.raises(CoercionError):
            c.to_currency(s(bad))


def test_country():
    assert c.to_country(s("DE")) == "DE"
    assert c.to_country(s("")) is None
    assert c.to_country(s("  ")) is None
    assert c.to_country(s("AT")) == "AT"
    for bad in ("Deutschland", "XX", "de", "QQ"):
        with pytest.raises(CoercionError):
            c.to_country(s(bad))


# --- closed enumerations ---

@pytest.mark.parametrize("fn,code,member", [
    (c.to_area_measurement, "qm", AreaMeasurement.SQM),
    (c.to_area_measurement, "pyeong", AreaMeasurement.TSUBO),
    (c.to_use_type, "Buero", UseType.OFFICE),
    (c.to_use_type, "Garage/TG", UseType.PARKING),
    (c.to_use_type, "unbekannt", UseType.NOT_SPECIFIED),
    (c.to_ownership_type, "5 - Volleigentum", OwnershipType.FREEHOLDER),
    (c.to_ownership_type, "2 - Erbbaurecht", OwnershipType.LEASEHOLD),
    (c.to_ownership_type, "4", OwnershipType.OTHER),
    (c.to_valuation_type1, "Fondsgutachten", ValuationType1.FUND),
    (c.to_valuation_type2, "N", ValuationType2.REVALUATION),
    (c.to_retail_location, "1a", RetailLocationType.HIGH_STREET),
    (c.to_retail_location, "(unbekannt)", RetailLocationType.UNKNOWN),
    (c.to_condition, "durchschnittlich", ObjectCondition.AGE_APPROPRIATE),
    (c.to_interior_quality, "stark gehoben", InteriorQuality.LUXURY),
    (c.to_construction_phase, "F", ConstructionPhase.COMPLETED),
    (c.to_construction_phase, "0 - sonstige", ConstructionPhase.OTHER),
])
def test_enumeration_lookup(fn, code, member):
    assert fn(s(code)) is member


@pytest.mark.parametrize("fn,code", [
    (c.to_area_measurement, "m2"),
    (c.to_use_type, "Buro"),
    (c.to_ownership_type, "9 - anders"),
    (c.to_valuation_type1, "Gutachten"),
    (c.to_valuation_type2, "X"),
    (c.to_retail_location, "3"),
    (c.to_condition, "ok"),
    (c.to_interior_quality, "luxus"),
    (c.to_construction_phase, "Z"),
])
def test_unknown_code_fails_instead_of_defaulting(fn, code):
    with pytest.raises(UnknownCodeError) as exc:
        fn(s(code))
    # ownership codes are looked up by their leading character
    expected = code[:1] if fn is c.to_ownership_type else code
    assert exc.value.code == expected
    assert isinstance(exc.value, CoercionError)


def test_ownership_numeric_cell_uses_leading_digit():
    assert c.to_ownership_type(n(5)) is OwnershipType.FREEHOLDER
