from __future__ import annotations

import logging

from ..models.entities import Property, Valuation

"""Identity resolution across rows.

Property identity: object id (``ObjNoOwner``) -> one shared Property
instance per import. Valuation identity: ``"<expert id>_<ISO date>"`` within
the owning Property's valuation mapping, computed once per row after all of
its cells have been read.
"""

logger = logging.getLogger(__name__)

__all__ = [
    "IdentityResolver",
    "valuation_key",
]


def valuation_key(valuation: Valuation) -> str | None:
    """Composite key of ``valuation`` or None while expert id or date is missing."""
    if valuation.expert_id is None or valuation.valid_from is None:
        return None
    return f"{valuation.expert_id}_{valuation.valid_from.isoformat()}"


class IdentityResolver:
    """Keeps the object id -> Property table of one import.

    The table is the only state shared between rows. Lookups and inserts
    happen from a single thread in row order.
    """

    def __init__(self, properties: dict[str, Property] | None = None) -> None:
        self.properties: dict[str, Property] = properties if properties is not None else {}

    def resolve_property(self, object_id: str, candidate: Property) -> Property:
        """Return the Property registered for ``object_id``.

        On first sight ``candidate`` is registered and its id fields are set.
        For a known id the registered instance is returned and ``candidate``
        (with any property fields set earlier in the row) is dropped.
        """
        existing = self.properties.get(object_id)
        if existing is not None:
            if existing is not candidate:
                logger.debug(f"object id {object_id!r} seen before, merging row into existing property")
            return existing
        candidate.object_id_sender = object_id
        candidate.object_id_receiver = object_id
        self.properties[object_id] = candidate
        return candidate

    def is_registered(self, prop: Property) -> bool:
        key = prop.object_id_sender
        return key is not None and self.properties.get(key) is prop

    @staticmethod
    def attach_valuation(prop: Property, valuation: Valuation) -> str | None:
        """Insert ``valuation`` into ``prop`` under its composite key.

        Returns the key, or None if expert id or appraisal date is missing
        (nothing is attached then). Inserting again under the same key
        replaces the earlier valuation.
        """
        key = valuation_key(valuation)
        if key is None:
            return None
        valuation.object_id_sender = key
        prop.valuations[key] = valuation
        return key
