from __future__ import annotations

from importlib.metadata import entry_points

from .reader import Reader

"""Host plugin descriptor: BIIS import, no export.

The plugin is published under the ``icred.plugins`` entry-point group
(see pyproject.toml); hosts find it with ``discover_plugins()``.
"""

__all__ = [
    "ENTRY_POINT_GROUP",
    "BiisExcelPlugin",
    "discover_plugins",
]

ENTRY_POINT_GROUP = "icred.plugins"


class BiisExcelPlugin:
    plugin_id = "biis.excel"
    plugin_version = "0.6"
    plugin_name = "BIIS-Excel-Plugin"

    def is_model_version_supported(self, version: str) -> bool:
        """Data model versions ``1-0.x`` are supported."""
        return version.startswith("1-0.")

    def get_import_worker(self) -> Reader:
        return Reader()

    def get_export_worker(self) -> None:
        return None


def discover_plugins(group: str = ENTRY_POINT_GROUP) -> dict[str, object]:
    """Instantiate every installed plugin of ``group``, keyed by plugin id."""
    plugins: dict[str, object] = {}
    for ep in entry_points(group=group):
        plugin = ep.load()()
        plugins[plugin.plugin_id] = plugin
    return plugins
