# Shared pytest fixtures
from __future__ import annotations
import tempfile
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import Any

import pytest
from openpyxl import Workbook

from biis_import.logging.init import reset_logging

# A minimal but complete BIIS row layout. Currency and ArealUnit come before
# the amount / area columns that depend on them.
BASIC_HEADERS = [
    "ObjNoOwner",
    "Currency",
    "ArealUnit",
    "AddressType_Street",
    "AddressType_PostCode",
    "AddressType_Town",
    "PurchasePrice",
    "TotalRentableArea",
    "DateOfAppraisal",
    "DataSupplierNumber",
]


@pytest.fixture(autouse=True)
def _clean_logging():
    yield
    reset_logging()


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        (p / "logs").mkdir()
        monkeypatch.chdir(p)
        yield p


@pytest.fixture()
def sample_config_yaml() -> str:
    return """biis_file: ./data/biis.xlsx
sheet_number: 1
validate: true
logs_directory: ./logs
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "import.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def make_workbook(temp_workdir: Path):
    """Factory writing a real .xlsx into ``data/``.

    ``rows`` are written as-is: str -> string cell, int/float -> numeric,
    date/datetime -> date formatted numeric, bool -> boolean, "=..." ->
    formula, None -> blank.
    """
    def _make(
        rows: Iterable[Sequence[Any]],
        *,
        name: str = "biis.xlsx",
        title: str = "Objekte",
        extra_sheets: dict[str, Iterable[Sequence[Any]]] | None = None,
    ) -> Path:
        wb = Workbook()
        ws = wb.active
        ws.title = title
        for row in rows:
            ws.append(list(row))
        for sheet_title, sheet_rows in (extra_sheets or {}).items():
            extra = wb.create_sheet(sheet_title)
            for row in sheet_rows:
                extra.append(list(row))
        path = temp_workdir / "data" / name
        wb.save(path)
        return path
    return _make


@pytest.fixture()
def basic_headers() -> list[str]:
    return list(BASIC_HEADERS)
