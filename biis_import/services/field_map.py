from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, Protocol

from ..excel.cells import CellValue
from ..models.entities import AREA_RENTAL_CATEGORIES, COUNT_RENTAL_CATEGORIES
from . import coercion as c
from .row_context import RowContext, RowState

"""BIIS header -> field handler table.

Each recognised BIIS column header maps to exactly one handler. A handler
coerces the cell value and stores the result on the row's in-progress
entities, updates the row context, or resolves identity. Headers missing
from FIELD_MAP are ignored by the row processor.

Coercers take ``(value, context)`` so that amount and area columns read the
currency / areal unit set by columns to their left in the same row.
"""

__all__ = [
    "CONTEXT_HEADERS",
    "FIELD_MAP",
    "Coercer",
    "Handler",
    "HandlerKind",
    "lookup_handler",
]

Coercer = Callable[[CellValue | None, RowContext], Any]


class HandlerKind(Enum):
    IGNORE = "ignore"
    ASSIGN_VALUATION = "assign-valuation"
    ASSIGN_PROPERTY = "assign-property"
    ASSIGN_ADDRESS = "assign-address"
    ASSIGN_RENTAL = "assign-rental"
    SET_CURRENCY = "set-currency"
    SET_AREA_UNIT = "set-area-unit"
    PROPERTY_IDENTITY = "property-identity"
    VALUATION_IDENTITY = "valuation-identity"
    COMPOUND = "compound"


class Handler(Protocol):
    kind: ClassVar[HandlerKind]
    # a failing context column aborts the whole row
    context_column: ClassVar[bool]

    def apply(self, value: CellValue | None, state: RowState) -> None: ...


def plain(fn: Callable[[CellValue | None], Any]) -> Coercer:
    """Adapt a context-free coercion to the ``(value, context)`` signature."""
    def coerce(value: CellValue | None, context: RowContext) -> Any:
        return fn(value)
    coerce.__name__ = fn.__name__
    return coerce


def amount(value: CellValue | None, context: RowContext) -> Any:
    return c.to_amount(value, context.currency)


def area(value: CellValue | None, context: RowContext) -> Any:
    return c.to_area(value, context.area_measurement)


TEXT = plain(c.to_string)
DATE = plain(c.to_date)
YEAR = plain(c.to_year)
NUMBER = plain(c.to_number)
INTEGER = plain(c.to_integer)
BOOLEAN = plain(c.to_boolean)
PERIOD = plain(c.to_period)
PERIOD_OR_NONE = plain(c.to_period_lenient)
COUNTRY = plain(c.to_country)


@dataclass(frozen=True)
class Ignore:
    kind: ClassVar[HandlerKind] = HandlerKind.IGNORE
    context_column: ClassVar[bool] = False

    def apply(self, value: CellValue | None, state: RowState) -> None:
        return None


@dataclass(frozen=True)
class AssignValuation:
    kind: ClassVar[HandlerKind] = HandlerKind.ASSIGN_VALUATION
    context_column: ClassVar[bool] = False
    field: str
    coerce: Coercer

    def apply(self, value: CellValue | None, state: RowState) -> None:
        result = self.coerce(value, state.context)
        if result is not None:
            setattr(state.valuation, self.field, result)


@dataclass(frozen=True)
class AssignProperty:
    """Set a field of the row's current Property.

    With ``keep_existing`` an already set value wins (a merged Property keeps
    the label of the row that created it).
    """
    kind: ClassVar[HandlerKind] = HandlerKind.ASSIGN_PROPERTY
    context_column: ClassVar[bool] = False
    field: str
    coerce: Coercer
    keep_existing: bool = False

    def apply(self, value: CellValue | None, state: RowState) -> None:
        if self.keep_existing and getattr(state.prop, self.field) is not None:
            return
        result = self.coerce(value, state.context)
        if result is not None:
            setattr(state.prop, self.field, result)


@dataclass(frozen=True)
class AssignAddress:
    kind: ClassVar[HandlerKind] = HandlerKind.ASSIGN_ADDRESS
    context_column: ClassVar[bool] = False
    field: str
    coerce: Coercer

    def apply(self, value: CellValue | None, state: RowState) -> None:
        result = self.coerce(value, state.context)
        if result is not None:
            setattr(state.address, self.field, result)


@dataclass(frozen=True)
class AssignRental:
    kind: ClassVar[HandlerKind] = HandlerKind.ASSIGN_RENTAL
    context_column: ClassVar[bool] = False
    category: str
    field: str
    coerce: Coercer

    def apply(self, value: CellValue | None, state: RowState) -> None:
        result = self.coerce(value, state.context)
        if result is not None:
            setattr(state.valuation.rental(self.category), self.field, result)


@dataclass(frozen=True)
class SetCurrency:
    """Sticky currency for later amount columns; also the valuation currency."""
    kind: ClassVar[HandlerKind] = HandlerKind.SET_CURRENCY
    context_column: ClassVar[bool] = True

    def apply(self, value: CellValue | None, state: RowState) -> None:
        currency = c.to_currency(value)
        state.context.currency = currency
        state.valuation.currency = currency


@dataclass(frozen=True)
class SetAreaUnit:
    kind: ClassVar[HandlerKind] = HandlerKind.SET_AREA_UNIT
    context_column: ClassVar[bool] = True

    def apply(self, value: CellValue | None, state: RowState) -> None:
        state.context.area_measurement = c.to_area_measurement(value)


@dataclass(frozen=True)
class PropertyIdentity:
    """Switch the row to the Property registered under the object id."""
    kind: ClassVar[HandlerKind] = HandlerKind.PROPERTY_IDENTITY
    context_column: ClassVar[bool] = False

    def apply(self, value: CellValue | None, state: RowState) -> None:
        object_id = c.to_string(value)
        if object_id is None or not object_id.strip():
            return
        state.prop = state.resolver.resolve_property(object_id.strip(), state.prop)


@dataclass(frozen=True)
class ValuationIdentity:
    """Record one part of the valuation key (expert id or appraisal date).

    The key itself is derived once per row by the row processor.
    """
    kind: ClassVar[HandlerKind] = HandlerKind.VALUATION_IDENTITY
    context_column: ClassVar[bool] = False
    field: str
    coerce: Coercer

    def apply(self, value: CellValue | None, state: RowState) -> None:
        result = self.coerce(value, state.context)
        if result is not None:
            setattr(state.valuation, self.field, result)


@dataclass(frozen=True)
class Compound:
    """Apply several handlers to the same cell, in order."""
    kind: ClassVar[HandlerKind] = HandlerKind.COMPOUND
    context_column: ClassVar[bool] = False
    handlers: tuple[Any, ...]

    def apply(self, value: CellValue | None, state: RowState) -> None:
        for handler in self.handlers:
            handler.apply(value, state)


IGNORE = Ignore()

# BIIS category -> RentalSituation key, in the order of the entity constants
_AREA_CATEGORIES = dict(zip(
    ("Office", "Retail", "Storage", "Archive", "Gastro", "Residential", "Hotel", "Leisure", "MiscArea1", "MiscArea2"),
    AREA_RENTAL_CATEGORIES,
    strict=True,
))
_COUNT_CATEGORIES = dict(zip(
    ("Indoorparking", "Outsideparking", "Miscnumbers1", "Miscnumbers2"),
    COUNT_RENTAL_CATEGORIES,
    strict=True,
))
_AREA_COLUMNS: dict[str, tuple[str, Coercer]] = {
    "LetArea": ("let_area", area),
    "ContractualAnnualRent": ("contractual_annual_rent", amount),
    "EstimatedAnnualRentForLetArea": ("estimated_annual_rent_for_let_area", amount),
    "VacantArea": ("vacant_area", area),
    "EstimatedAnnualRentForVacantArea": ("estimated_annual_rent_for_vacant_area", amount),
}
_COUNT_COLUMNS: dict[str, tuple[str, Coercer]] = {
    "LetNumbers": ("let_numbers", INTEGER),
    "ContractualAnnualRent": ("contractual_annual_rent", amount),
    "EstimatedAnnualRentForLetNumbers": ("estimated_annual_rent_for_let_numbers", amount),
    "VacantNumbers": ("vacant_numbers", INTEGER),
    "EstimatedAnnualRentForVacantNumbers": ("estimated_annual_rent_for_vacant_numbers", amount),
}


def _rental_handlers() -> dict[str, Handler]:
    handlers: dict[str, Handler] = {}
    for categories, columns in (
        (_AREA_CATEGORIES, _AREA_COLUMNS),
        (_COUNT_CATEGORIES, _COUNT_COLUMNS),
    ):
        for biis_category, category in categories.items():
            for suffix, (field, coerce) in columns.items():
                header = f"RentalSituation{biis_category}{suffix}"
                handlers[header] = AssignRental(category, field, coerce)
    return handlers


FIELD_MAP: dict[str, Handler] = {
    # ignored
    "Date": IGNORE,  # see DateOfAppraisal
    "TypeOfDataSupplier": IGNORE,
    "QualityDateOfAppraisal": IGNORE,
    # row context
    "Currency": SetCurrency(),
    "ArealUnit": SetAreaUnit(),
    # identity
    "ObjNoOwner": PropertyIdentity(),
    "DateOfAppraisal": ValuationIdentity("valid_from", DATE),
    "DataSupplierNumber": ValuationIdentity("expert_id", TEXT),
    # address
    "AddressType_Street": AssignAddress("street", TEXT),
    "AddressType_PostCode": AssignAddress("zip", TEXT),
    "AddressType_Town": AssignAddress("city", TEXT),
    "AddressType_ISOCountryCodeType_Country": AssignAddress("country", COUNTRY),
    "AddressType_Text": Compound((
        AssignProperty("label", TEXT, keep_existing=True),
        AssignAddress("label", TEXT),
    )),
    "ObjKoWGS84Longitude": AssignAddress("longitude", NUMBER),
    "ObjKoWGS84Latitude": AssignAddress("latitude", NUMBER),
    # general
    "CompletionDate": AssignValuation("valuation_date", DATE),
    "DataSupplier": Compound((
        AssignValuation("label", TEXT),
        AssignValuation("expert_name", TEXT),
    )),
    "Owner": AssignValuation("owner", TEXT),
    "RebaseType1": AssignValuation("valuation_type1", plain(c.to_valuation_type1)),
    "RebaseType2": AssignValuation("valuation_type2", plain(c.to_valuation_type2)),
    "RebaseObjAdditionalInformation": AssignValuation("note", TEXT),
    "ExchangeRate1EUR": AssignValuation("exchange_rate_to_eur", NUMBER),
    "DateExchangeRate": AssignValuation("exchange_rate_date", DATE),
    # use & ownership
    "MainTypeOfUse": AssignValuation("use_type_primary", plain(c.to_use_type)),
    "ShareMainTypeOfUse": AssignValuation("use_type_primary_share", NUMBER),
    "AncillaryTypeOfUse": AssignValuation("use_type_secondary", plain(c.to_use_type)),
    "ShareAncillaryTypeOfUse": AssignValuation("use_type_secondary_share", NUMBER),
    "TypeOfOwnership": AssignValuation("ownership_type", plain(c.to_ownership_type)),
    "SingleTenant": AssignValuation("single_tenant", BOOLEAN),
    # transactions
    "PurchasePrice": AssignValuation("purchase_net_price", amount),
    "DateOfPurchase": AssignValuation("purchase_date", DATE),
    "PriceOfSale": AssignValuation("sale_net_price", amount),
    "DateOfSale": AssignValuation("sale_date", DATE),
    # quality
    "LocationQuality": AssignValuation("retail_location", plain(c.to_retail_location)),
    "StructuralCondition": AssignValuation("condition", plain(c.to_condition)),
    "FitOutQuality": AssignValuation("interior_quality", plain(c.to_interior_quality)),
    "StateOfCompletion": AssignValuation("construction_phase", plain(c.to_construction_phase)),
    "MaintenanceBacklog": AssignValuation("maintenance_backlog", BOOLEAN),
    "Floors": AssignValuation("floor_description", TEXT),
    # economic life
    "NormalTotalEconomicLife": AssignValuation("normal_total_economic_life", PERIOD_OR_NONE),
    "RemainingEconomicLife": AssignValuation("remaining_economic_life", PERIOD_OR_NONE),
    "OriginalYearOfConstruction": AssignValuation("construction_date", YEAR),
    "CalculatedYearOfConstruction": AssignValuation("economic_construction_date", YEAR),
    "DateOfChangeForRemainingEconomicLife": AssignValuation("change_date_for_remaining_economic_life", DATE),
    # site & areas
    "LandSize": AssignValuation("plot_area", area),
    "FloorToAreaRatio": AssignValuation("gfz", NUMBER),
    "SiteCoverageRatio": AssignValuation("grz", NUMBER),
    "GrossFloorSpaceOverground": AssignValuation("gross_floor_space_overground", area),
    "GrossFloorSpaceBelowGround": AssignValuation("gross_floor_space_below_ground", area),
    "TotalGrossFloorSpace": AssignValuation("total_gross_floor_space", area),
    "TotalRentableArea": AssignValuation("total_rentable_area", area),
    # costs
    "RunningCosts": AssignValuation("running_costs", amount),
    "ManagementCosts": AssignValuation("management_costs", amount),
    "MaintenanceExpenses": AssignValuation("maintenance_expenses", amount),
    "RentAllowance": AssignValuation("rent_allowance", amount),
    "OtherOperatingExpenses": AssignValuation("other_operating_expenses", amount),
    # values
    "CapitalizationRate": AssignValuation("capitalization_rate", NUMBER),
    "ValueByIncomeApproachWithoutPremiumsDiscounts": AssignValuation(
        "value_by_income_approach_without_premiums_discounts", amount
    ),
    "DiscountsPremiums": AssignValuation("discounts_premiums", amount),
    "DeductionForVacancy": AssignValuation("deduction_for_vacancy", amount),
    "DeductionConstructionWorks": AssignValuation("deduction_construction_works", amount),
    "OthersDiscountsPremiums": AssignValuation("others_discounts_premiums", amount),
    "ValueByIncomeApproach": AssignValuation("value_by_income_approach", amount),
    "CostApproach": AssignValuation("cost_approach", amount),
    "LandValue": AssignValuation("land_value", amount),
    "MarketValue": AssignValuation("fair_value", amount),
    # ground lease
    "GroundLease": AssignValuation("ground_lease", BOOLEAN),
    "RemainingLifeOfGroundLease": AssignValuation("remaining_life_of_ground_lease", PERIOD),
    "GroundRent": AssignValuation("ground_rent", amount),
    "GroundLeaseRemarks": AssignValuation("ground_lease_remarks", TEXT),
}
FIELD_MAP.update(_rental_handlers())

CONTEXT_HEADERS = frozenset(h for h, handler in FIELD_MAP.items() if handler.context_column)


def lookup_handler(header: str | None) -> Handler | None:
    if header is None:
        return None
    return FIELD_MAP.get(header)
