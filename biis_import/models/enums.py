from __future__ import annotations

from enum import Enum

"""Closed enumerations of the GIF valuation model.

Only the members that the BIIS import can produce are listed. Values are the
GIF wire names so that a serialized Container stays readable.
"""

__all__ = [
    "AreaMeasurement",
    "AreaType",
    "ConstructionPhase",
    "InteriorQuality",
    "ObjectCondition",
    "OwnershipType",
    "RetailLocationType",
    "Subset",
    "UseType",
    "ValuationType1",
    "ValuationType2",
]


class Subset(Enum):
    """GIF data subsets a worker can produce."""
    S5_7 = "5.7"


class AreaMeasurement(Enum):
    SQM = "SQM"
    SQFT = "SQFT"
    TSUBO = "TSUBO"
    NOT_SPECIFIED = "NOT_SPECIFIED"


class AreaType(Enum):
    NOT_SPECIFIED = "NOT_SPECIFIED"


class UseType(Enum):
    OFFICE = "OFFICE"
    RETAIL = "RETAIL"
    INDUSTRY = "INDUSTRY"
    GASTRONOMY = "GASTRONOMY"
    HOTEL = "HOTEL"
    RESIDENTIAL = "RESIDENTIAL"
    LEISURE = "LEISURE"
    PARKING = "PARKING"
    OTHER = "OTHER"
    NOT_SPECIFIED = "NOT_SPECIFIED"


class OwnershipType(Enum):
    FREEHOLDER = "FREEHOLDER"
    LEASEHOLD = "LEASEHOLD"
    OTHER = "OTHER"


class ValuationType1(Enum):
    FUND = "FUND"
    PRIVATE = "PRIVATE"
    COURT = "COURT"
    THIRD_PERSON = "THIRD_PERSON"


class ValuationType2(Enum):
    UNKNOWN = "UNKNOWN"
    FIRST_VALUATION = "FIRST_VALUATION"
    REVALUATION = "REVALUATION"
    MARKET_VALUATION_REPORT = "MARKET_VALUATION_REPORT"


class RetailLocationType(Enum):
    HIGH_STREET = "HIGH_STREET"
    CITY_CENTRE_OTHER = "CITY_CENTRE_OTHER"
    MAJOR_ROUTE = "MAJOR_ROUTE"
    SUBURBAN_OTHER = "SUBURBAN_OTHER"
    NON_URBAN = "NON_URBAN"
    UNKNOWN = "UNKNOWN"


class ObjectCondition(Enum):
    NEW = "NEW"
    AGE_APPROPRIATE = "AGE_APPROPRIATE"
    IN_NEED_OF_REPAIR = "IN_NEED_OF_REPAIR"
    NOT_AVAILABLE = "NOT_AVAILABLE"


class InteriorQuality(Enum):
    LUXURY = "LUXURY"
    SOPHISTICATED = "SOPHISTICATED"
    NORMAL = "NORMAL"
    SIMPLE = "SIMPLE"


class ConstructionPhase(Enum):
    COMPLETED = "COMPLETED"
    IN_COMPLETION = "IN_COMPLETION"
    PLANNED = "PLANNED"
    OTHER = "OTHER"
