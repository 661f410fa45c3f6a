from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path
from typing import Any, Protocol

from jsonschema import Draft202012Validator

from ..models.entities import Valuation

"""Valuation validator for GIF subset 5.7.

The rule set lives in ``schemas/valuation_s5_7.json`` and is checked against
``Valuation.to_dict()``. Rejection is observational: the orchestrator logs
it and counts the row as failed, the valuation stays in the Container.
"""

__all__ = [
    "ValuationValidationError",
    "ValuationValidator",
    "SubsetValidator",
]

SCHEMA_PATH = Path(__file__).parent / "schemas" / "valuation_s5_7.json"


class ValuationValidationError(Exception):
    """Structured rejection: one message per violated subset rule."""

    def __init__(self, errors: list[str]) -> None:
        self.errors = errors
        super().__init__("valuation violates subset 5.7: " + "; ".join(errors))


class SubsetValidator(Protocol):
    def validate(self, valuation: Valuation) -> None: ...


@lru_cache(maxsize=1)
def _load_validator() -> Draft202012Validator:
    schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
    Draft202012Validator.check_schema(schema)
    return Draft202012Validator(schema)


def _error_path(path: Any) -> str:
    parts = [str(p) for p in path]
    return ".".join(parts) if parts else "<valuation>"


class ValuationValidator:
    """Validate one assembled Valuation against the subset 5.7 rules."""

    def __init__(self) -> None:
        self._validator = _load_validator()

    def errors(self, valuation: Valuation) -> list[str]:
        data = valuation.to_dict()
        found = sorted(self._validator.iter_errors(data), key=lambda e: [str(p) for p in e.absolute_path])
        return [f"{_error_path(e.absolute_path)}: {e.message}" for e in found]

    def validate(self, valuation: Valuation) -> None:
        """Raises:
            ValuationValidationError: at least one rule is violated
        """
        errors = self.errors(valuation)
        if errors:
            raise ValuationValidationError(errors)
