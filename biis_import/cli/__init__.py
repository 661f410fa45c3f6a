from __future__ import annotations


def main(argv: list[str] | None = None) -> int:
    """Run the CLI (see ``biis_import.cli.__main__``)."""
    from .__main__ import main as _main

    return _main(argv)


__all__ = ["main"]
