from __future__ import annotations

import json
from datetime import date
from pathlib import Path

import jsonschema
import pytest

from biis_import.cli import main as cli_main
from biis_import.models.error_record import ERROR_TYPES, ErrorRecord

"""Error log JSON Lines contract: one object per line, fixed key set."""

ERROR_LOG_SCHEMA = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "additionalProperties": False,
    "required": ["timestamp", "file", "sheet", "row", "column", "header", "error_type", "message", "value"],
    "properties": {
        "timestamp": {"type": "string", "pattern": r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(\.\d+)?Z$"},
        "file": {"type": "string"},
        "sheet": {"type": "string"},
        "row": {"type": "integer", "minimum": -1},
        "column": {"type": "string", "pattern": "^[A-Z]*$"},
        "header": {"type": "string"},
        "error_type": {"enum": sorted(ERROR_TYPES)},
        "message": {"type": "string"},
        "value": {"type": ["string", "null"]},
    },
}


def test_error_record_matches_schema():
    record = ErrorRecord.create("biis.xlsx", "Objekte", 3, "CELL_COERCION_ERROR", "unknown ownership type: '9'",
                                column="K", header="TypeOfOwnership", value="9 - anders")
    jsonschema.validate(json.loads(record.to_json_line()), ERROR_LOG_SCHEMA)


def test_document_error_record_matches_schema():
    record = ErrorRecord.create("biis.xlsx", "Fehlt", -1, "DOCUMENT_ERROR", "sheet 'Fehlt' not found")
    jsonschema.validate(json.loads(record.to_json_line()), ERROR_LOG_SCHEMA)


def test_schema_rejects_extra_key():
    record = json.loads(ErrorRecord.create("biis.xlsx", "Objekte", 2, "ROW_ERROR", "x").to_json_line())
    record["db_message"] = "not allowed"
    with pytest.raises(jsonschema.exceptions.ValidationError):
        jsonschema.validate(record, ERROR_LOG_SCHEMA)


def test_schema_rejects_row_below_minus_one():
    record = json.loads(ErrorRecord.create("biis.xlsx", "Objekte", -2, "ROW_ERROR", "x").to_json_line())
    with pytest.raises(jsonschema.exceptions.ValidationError):
        jsonschema.validate(record, ERROR_LOG_SCHEMA)


def test_cli_error_log_lines_match_schema(write_config, make_workbook, basic_headers, temp_workdir: Path, capsys):
    headers = basic_headers + ["TypeOfOwnership", "GroundLease"]
    make_workbook([
        headers,
        ["P1", "EUR", "qm", "Hauptstr. 5", "10115", "Berlin", 1000, 500, date(2020, 1, 1), "E1", "9 - anders", "ja"],
        ["P2", "EURO", "qm", "Nebenweg 2", "20095", "Hamburg", 900, 300, date(2020, 1, 1), "E1", "5", None],
    ])
    assert cli_main([]) == 2
    files = list((temp_workdir / "logs").glob("errors-*.log"))
    assert len(files) == 1
    lines = files[0].read_text(encoding="utf-8").splitlines()
    assert len(lines) >= 2
    for line in lines:
        jsonschema.validate(json.loads(line), ERROR_LOG_SCHEMA)
