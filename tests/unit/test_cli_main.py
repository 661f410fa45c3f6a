from __future__ import annotations
import json
from datetime import date
from pathlib import Path
from unittest.mock import patch

from biis_import.cli import main as cli_main

ROW_P1 = ["P1", "EUR", "qm", "Hauptstr. 5", "10115", "Berlin", 1000, 500, date(2020, 1, 1), "E1"]


def test_cli_missing_config(temp_workdir: Path, capsys):
    code = cli_main([])
    out = capsys.readouterr().out
    assert code == 1
    assert "ERROR config:" in out


def test_cli_biis_file_missing(write_config: Path, capsys):
    code = cli_main([])
    out = capsys.readouterr().out
    assert code == 1
    assert "ERROR BIIS file not found:" in out


def test_cli_success_prints_summary(write_config, make_workbook, basic_headers, capsys):
    make_workbook([basic_headers, ROW_P1])
    code = cli_main([])
    out = capsys.readouterr().out
    assert code == 0
    assert "SUMMARY rows=1 imported=1 failed=0 cell_errors=0 properties=1 valuations=1 elapsed_sec=" in out


def test_cli_writes_output_json(write_config, make_workbook, basic_headers, temp_workdir: Path, capsys):
    make_workbook([basic_headers, ROW_P1])
    code = cli_main(["--output", "out/container.json"])
    assert code == 0
    data = json.loads((temp_workdir / "out" / "container.json").read_text(encoding="utf-8"))
    assert data["meta"]["creator"] == "icred with biis-excel plugin"
    valuation = data["properties"]["P1"]["valuations"]["E1_2020-01-01"]
    assert valuation["purchase_net_price"] == {"value": 1000.0, "currency": "EUR"}
    assert valuation["total_rentable_area"]["measurement"] == "SQM"
    assert valuation["valid_from"] == "2020-01-01"


def test_cli_custom_config_path(temp_workdir: Path, make_workbook, basic_headers, capsys):
    make_workbook([basic_headers, ROW_P1], name="other.xlsx", title="Daten")
    cfg = temp_workdir / "custom.yml"
    cfg.write_text("biis_file: ./data/other.xlsx\nsheet_name: Daten\n", encoding="utf-8")
    code = cli_main(["--config", str(cfg)])
    assert code == 0
    assert "imported=1" in capsys.readouterr().out


def test_cli_env_overrides_from_dotenv(write_config, make_workbook, basic_headers, temp_workdir: Path, monkeypatch, capsys):
    make_workbook([basic_headers, ROW_P1], name="env.xlsx", title="Objekte")
    (temp_workdir / ".env").write_text("BIIS_FILE=./data/env.xlsx\nBIIS_SHEET_NAME=Objekte\n", encoding="utf-8")
    # load_dotenv writes to os.environ; registering the variables here lets
    # monkeypatch restore them afterwards (empty values are not overrides)
    for var in ("BIIS_FILE", "BIIS_SHEET_NAME", "BIIS_SHEET_NUMBER"):
        monkeypatch.setenv(var, "")
    code = cli_main([])
    assert code == 0
    assert "Importing data/env.xlsx" in capsys.readouterr().out


def test_cli_unknown_sheet_is_fatal(write_config, make_workbook, basic_headers, temp_workdir: Path, capsys):
    make_workbook([basic_headers, ROW_P1])
    write_config.write_text("biis_file: ./data/biis.xlsx\nsheet_name: Fehlt\n", encoding="utf-8")
    code = cli_main([])
    out = capsys.readouterr().out
    assert code == 1
    assert "ERROR document:" in out
    logs = list((temp_workdir / "logs").glob("errors-*.log"))
    assert len(logs) == 1
    assert json.loads(logs[0].read_text(encoding="utf-8").splitlines()[0])["error_type"] == "DOCUMENT_ERROR"


def test_cli_debug_mode(write_config, make_workbook, basic_headers, capsys):
    make_workbook([basic_headers, ROW_P1])
    code = cli_main(["--debug"])
    out = capsys.readouterr().out
    assert code == 0
    assert "DEBUG debug mode enabled" in out
    assert "DEBUG row 2 imported" in out


def test_cli_validation_disabled(write_config, make_workbook, basic_headers, capsys):
    write_config.write_text("biis_file: ./data/biis.xlsx\nsheet_number: 1\nvalidate: false\n", encoding="utf-8")
    make_workbook([basic_headers, ROW_P1])
    with patch("biis_import.services.validator.ValuationValidator.validate") as validate:
        code = cli_main([])
    assert code == 0
    validate.assert_not_called()
