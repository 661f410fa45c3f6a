from __future__ import annotations

import tomllib
from importlib.metadata import EntryPoint
from pathlib import Path
from unittest.mock import patch

from biis_import.plugin import ENTRY_POINT_GROUP, BiisExcelPlugin, discover_plugins
from biis_import.reader import Reader


def test_plugin_metadata():
    plugin = BiisExcelPlugin()
    assert plugin.plugin_id == "biis.excel"
    assert plugin.plugin_version == "0.6"
    assert plugin.plugin_name == "BIIS-Excel-Plugin"


def test_model_version_support():
    plugin = BiisExcelPlugin()
    assert plugin.is_model_version_supported("1-0.6.2")
    assert plugin.is_model_version_supported("1-0.5")
    assert not plugin.is_model_version_supported("2-0.1")
    assert not plugin.is_model_version_supported("1-1.0")


def test_workers():
    plugin = BiisExcelPlugin()
    assert isinstance(plugin.get_import_worker(), Reader)
    assert plugin.get_export_worker() is None


def test_entry_point_declared_in_pyproject():
    pyproject = Path(__file__).resolve().parents[2] / "pyproject.toml"
    data = tomllib.loads(pyproject.read_text(encoding="utf-8"))
    target = data["project"]["entry-points"][ENTRY_POINT_GROUP]["biis-excel"]
    ep = EntryPoint(name="biis-excel", value=target, group=ENTRY_POINT_GROUP)
    assert ep.load() is BiisExcelPlugin


def test_discover_plugins_instantiates_entry_points():
    ep = EntryPoint(name="biis-excel", value="biis_import.plugin:BiisExcelPlugin", group=ENTRY_POINT_GROUP)
    with patch("biis_import.plugin.entry_points", return_value=[ep]) as found:
        plugins = discover_plugins()
    found.assert_called_once_with(group=ENTRY_POINT_GROUP)
    assert list(plugins) == ["biis.excel"]
    assert isinstance(plugins["biis.excel"], BiisExcelPlugin)
