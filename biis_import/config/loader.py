from __future__ import annotations

import json
import os
from collections.abc import Mapping
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

"""Config loader.

Responsibilities:
- Load YAML config (default ``config/import.yml``)
- Validate against ``config_schema.json`` (unknown keys are rejected)
- Apply defaults (validate=True, logs_directory=./logs)
- Apply BIIS_* environment overrides (the CLI loads ``.env`` beforehand)
"""

SCHEMA_PATH = Path(__file__).with_name("config_schema.json")
DEFAULT_CONFIG_PATH = Path("config/import.yml")

# environment variable -> config key
ENV_OVERRIDES = {
    "BIIS_FILE": "biis_file",
    "BIIS_SHEET_NUMBER": "sheet_number",
    "BIIS_SHEET_NAME": "sheet_name",
}


class ConfigError(Exception):
    pass


@dataclass(frozen=True)
class ImportConfig:
    biis_file: str
    sheet_number: int | None = None  # 1-based, wins over sheet_name
    sheet_name: str | None = None
    validate: bool = True
    output: str | None = None
    logs_directory: str = "./logs"


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the JSON schema.

    Raises:
        ConfigError: schema file missing or unreadable, or the data violates
            the schema (missing required keys, wrong types, unknown keys)
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")

    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def apply_env_overrides(cfg: ImportConfig, environ: Mapping[str, str] | None = None) -> ImportConfig:
    """Return ``cfg`` with BIIS_* environment variables applied.

    An override of either sheet selector clears the other one so that the
    environment fully decides which sheet is read.
    """
    env = os.environ if environ is None else environ
    given = {
        key: env[var].strip()
        for var, key in ENV_OVERRIDES.items()
        if env.get(var, "").strip()
    }
    if not given:
        return cfg

    changes: dict[str, Any] = {}
    if "biis_file" in given:
        changes["biis_file"] = given["biis_file"]
    if "sheet_number" in given or "sheet_name" in given:
        changes["sheet_number"] = None
        changes["sheet_name"] = given.get("sheet_name")
        if "sheet_number" in given:
            raw = given["sheet_number"]
            try:
                number = int(raw)
            except ValueError as e:
                raise ConfigError(f"BIIS_SHEET_NUMBER must be an integer, got {raw!r}") from e
            if number < 1:
                raise ConfigError(f"BIIS_SHEET_NUMBER must be >= 1, got {number}")
            changes["sheet_number"] = number
    return replace(cfg, **changes)


def load_config(path: Path = DEFAULT_CONFIG_PATH) -> ImportConfig:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config root must be a mapping, got {type(data).__name__}")

    _validate_config_schema(data)

    return ImportConfig(
        biis_file=data["biis_file"],
        sheet_number=data.get("sheet_number"),
        sheet_name=data.get("sheet_name"),
        validate=data.get("validate", True),
        output=data.get("output"),
        logs_directory=data.get("logs_directory", "./logs"),
    )
