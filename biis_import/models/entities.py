from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any

from .datatypes import Amount, Area, Period
from .enums import (
    ConstructionPhase,
    InteriorQuality,
    ObjectCondition,
    OwnershipType,
    RetailLocationType,
    UseType,
    ValuationType1,
    ValuationType2,
)

"""GIF entity model produced by the BIIS import.

Container
 └─ properties: object id -> Property
      └─ valuations: "<expert id>_<ISO date>" -> Valuation
           ├─ address: Address
           └─ rental_situations: use category -> RentalSituation

Entities are plain mutable dataclasses. A Property is shared by every row
carrying its object id, so rows mutate the same instance.
"""

__all__ = [
    "AREA_RENTAL_CATEGORIES",
    "COUNT_RENTAL_CATEGORIES",
    "Address",
    "Container",
    "Meta",
    "Property",
    "RentalSituation",
    "Valuation",
]

# Use categories reported with let/vacant areas
AREA_RENTAL_CATEGORIES: tuple[str, ...] = (
    "office",
    "retail",
    "storage",
    "archive",
    "gastro",
    "residential",
    "hotel",
    "leisure",
    "misc_area_1",
    "misc_area_2",
)

# Use categories reported with let/vacant unit counts (parking lots etc.)
COUNT_RENTAL_CATEGORIES: tuple[str, ...] = (
    "indoor_parking",
    "outside_parking",
    "misc_numbers_1",
    "misc_numbers_2",
)


def _json_value(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return value


def _json_dict(items: list[tuple[str, Any]]) -> dict[str, Any]:
    return {k: _json_value(v) for k, v in items}


@dataclass
class Address:
    street: str | None = None
    housenumber: str | None = None
    zip: str | None = None
    city: str | None = None
    country: str | None = None  # ISO 3166-1 alpha-2
    latitude: float | None = None
    longitude: float | None = None
    label: str | None = None


@dataclass
class RentalSituation:
    """Rental figures of one use category.

    Area based categories fill the ``*_area`` fields, count based ones
    (parking) the ``*_numbers`` fields. Rents are annual amounts.
    """
    let_area: Area | None = None
    vacant_area: Area | None = None
    let_numbers: int | None = None
    vacant_numbers: int | None = None
    contractual_annual_rent: Amount | None = None
    estimated_annual_rent_for_let_area: Amount | None = None
    estimated_annual_rent_for_vacant_area: Amount | None = None
    estimated_annual_rent_for_let_numbers: Amount | None = None
    estimated_annual_rent_for_vacant_numbers: Amount | None = None


@dataclass
class Valuation:
    """One appraisal event of a property (one BIIS data row)."""
    # identity
    object_id_sender: str | None = None  # "<expert_id>_<valid_from ISO>"
    expert_id: str | None = None
    valid_from: date | None = None
    # general
    label: str | None = None
    expert_name: str | None = None
    owner: str | None = None
    note: str | None = None
    valuation_date: date | None = None
    valuation_type1: ValuationType1 | None = None
    valuation_type2: ValuationType2 | None = None
    address: Address = field(default_factory=Address)
    # currency
    currency: str | None = None
    exchange_rate_to_eur: float | None = None
    exchange_rate_date: date | None = None
    # use & ownership
    use_type_primary: UseType | None = None
    use_type_primary_share: float | None = None
    use_type_secondary: UseType | None = None
    use_type_secondary_share: float | None = None
    ownership_type: OwnershipType | None = None
    single_tenant: bool | None = None
    # transactions
    purchase_net_price: Amount | None = None
    purchase_date: date | None = None
    sale_net_price: Amount | None = None
    sale_date: date | None = None
    # quality
    retail_location: RetailLocationType | None = None
    condition: ObjectCondition | None = None
    interior_quality: InteriorQuality | None = None
    construction_phase: ConstructionPhase | None = None
    maintenance_backlog: bool | None = None
    floor_description: str | None = None
    # economic life
    normal_total_economic_life: Period | None = None
    remaining_economic_life: Period | None = None
    construction_date: date | None = None
    economic_construction_date: date | None = None
    change_date_for_remaining_economic_life: date | None = None
    # site & areas
    plot_area: Area | None = None
    gfz: float | None = None  # floor to area ratio
    grz: float | None = None  # site coverage ratio
    gross_floor_space_overground: Area | None = None
    gross_floor_space_below_ground: Area | None = None
    total_gross_floor_space: Area | None = None
    total_rentable_area: Area | None = None
    # costs
    running_costs: Amount | None = None
    management_costs: Amount | None = None
    maintenance_expenses: Amount | None = None
    rent_allowance: Amount | None = None
    other_operating_expenses: Amount | None = None
    # values
    capitalization_rate: float | None = None
    value_by_income_approach_without_premiums_discounts: Amount | None = None
    discounts_premiums: Amount | None = None
    deduction_for_vacancy: Amount | None = None
    deduction_construction_works: Amount | None = None
    others_discounts_premiums: Amount | None = None
    value_by_income_approach: Amount | None = None
    cost_approach: Amount | None = None
    land_value: Amount | None = None
    fair_value: Amount | None = None
    # ground lease
    ground_lease: bool | None = None
    remaining_life_of_ground_lease: Period | None = None
    ground_rent: Amount | None = None
    ground_lease_remarks: str | None = None
    # rental situation per use category
    rental_situations: dict[str, RentalSituation] = field(default_factory=dict)

    def rental(self, category: str) -> RentalSituation:
        """Return the rental situation of ``category``, creating it on first use."""
        situation = self.rental_situations.get(category)
        if situation is None:
            situation = RentalSituation()
            self.rental_situations[category] = situation
        return situation

    def to_dict(self) -> dict[str, Any]:
        return asdict(self, dict_factory=_json_dict)


@dataclass
class Property:
    object_id_sender: str | None = None
    object_id_receiver: str | None = None
    label: str | None = None
    valuations: dict[str, Valuation] = field(default_factory=dict)


@dataclass
class Meta:
    created: datetime | None = None
    creator: str | None = None
    format: str | None = None
    version: str | None = None


@dataclass
class Container:
    """Top-level output of one import: metadata plus properties by object id."""
    meta: Meta = field(default_factory=Meta)
    properties: dict[str, Property] = field(default_factory=dict)

    @property
    def valuation_count(self) -> int:
        return sum(len(p.valuations) for p in self.properties.values())

    def to_dict(self) -> dict[str, Any]:
        """Serialize to plain JSON types (enums by value, dates as ISO strings)."""
        return asdict(self, dict_factory=_json_dict)
