"""Domain models for the BIIS -> GIF import.

This package contains the GIF entity model (Container/Property/Valuation),
its value types and enumerations, and the bookkeeping models of an import run.
"""

from .datatypes import Amount, Area, Period
from .entities import Address, Container, Meta, Property, RentalSituation, Valuation
from .error_record import ErrorRecord
from .import_result import ImportResult

__all__ = [
    # GIF entities
    "Address",
    "Container",
    "Meta",
    "Property",
    "RentalSituation",
    "Valuation",
    # Value types
    "Amount",
    "Area",
    "Period",
    # Import bookkeeping
    "ErrorRecord",
    "ImportResult",
]
