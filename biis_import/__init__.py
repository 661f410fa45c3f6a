"""BIIS spreadsheet -> GIF valuation container importer."""

__version__ = "0.6.0"
