from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

import pandas as pd
from dotenv import load_dotenv

from biis_import.config.loader import DEFAULT_CONFIG_PATH, ConfigError, ImportConfig, apply_env_overrides, load_config
from biis_import.excel.workbook import DocumentError
from biis_import.logging.error_log import ErrorLogBuffer
from biis_import.logging.init import log_summary, setup_logging
from biis_import.models.entities import Container
from biis_import.reader import Reader
from biis_import.services.summary import render_summary_line

"""CLI entrypoint: ``python -m biis_import.cli``.

Flow:
- load ``.env`` (BIIS_* overrides) and ``config/import.yml``
- ``--inspect-data``: print header and first rows of the sheet, exit
- import the sheet through Reader, flush the error log, write the
  Container as JSON when an output path is configured
- print the SUMMARY line

Exit codes: 0 all rows imported, 2 some rows failed, 1 fatal.
"""

EXIT_SUCCESS_ALL = 0
EXIT_PARTIAL_FAILURE = 2
EXIT_FATAL = 1

INSPECT_ROWS = 5


def _load_env_file(path: Path, override: bool = True) -> None:
    """Load .env using python-dotenv. A broken file only produces a warning."""
    try:
        if path.exists():
            load_dotenv(dotenv_path=path, override=override)
    except OSError as e:  # pragma: no cover
        print(f"WARNING: failed to load .env via python-dotenv: {e}")


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="BIIS spreadsheet -> GIF valuation container importer")
    p.add_argument("--config", default=str(DEFAULT_CONFIG_PATH), help="YAML config path (default: %(default)s)")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument("--inspect-data", action="store_true", help="Print sheet headers & first rows then exit")
    p.add_argument("--output", help="Write the container as JSON to this path (overrides config)")
    return p.parse_args(argv)


def _inspect_data(cfg: ImportConfig) -> int:
    # pandas counts sheets from 0
    sheet: int | str
    if cfg.sheet_number is not None:
        sheet = cfg.sheet_number - 1
    elif cfg.sheet_name is not None:
        sheet = cfg.sheet_name
    else:
        sheet = 0
    try:
        df = pd.read_excel(cfg.biis_file, sheet_name=sheet, nrows=INSPECT_ROWS, engine="openpyxl")
    except (OSError, ValueError, IndexError) as e:
        print(f"inspect: cannot read {cfg.biis_file}: {e}")
        return EXIT_FATAL
    print(f"FILE: {Path(cfg.biis_file).name} SHEET: {sheet}")
    print(f"  headers={[str(c) for c in df.columns]}")
    known = [c for c in df.columns if str(c).strip()]
    print(f"  columns={len(known)} sample_rows={len(df)}")
    if not df.empty:
        print(df.to_string(index=False, max_colwidth=24))
    return EXIT_SUCCESS_ALL


def _write_output(container: Container, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(container.to_dict(), ensure_ascii=False, indent=2), encoding="utf-8")


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # an empty list means "no arguments", only None reads sys.argv
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    _load_env_file(Path(".env"), override=True)
    try:
        cfg = apply_env_overrides(load_config(Path(args.config)))
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    if args.debug:
        for h in logger.handlers:
            h.setLevel("DEBUG")
        logger.setLevel("DEBUG")
        logger.debug("debug mode enabled")

    biis_file = Path(cfg.biis_file)
    if not biis_file.exists():
        logger.error(f"BIIS file not found: {biis_file}")
        return EXIT_FATAL

    if args.inspect_data:
        return _inspect_data(cfg)

    error_log = ErrorLogBuffer(Path(cfg.logs_directory))
    reader = Reader(error_log=error_log, validate=cfg.validate)
    worker_config = reader.required_configuration()
    worker_config.streams[Reader.PARAMETER_NAME_STREAM] = biis_file.open("rb")
    worker_config.integers[Reader.PARAMETER_NAME_SHEET_IDX] = cfg.sheet_number
    worker_config.strings[Reader.PARAMETER_NAME_SHEET_NAME] = cfg.sheet_name

    logger.info(f"Importing {biis_file}")
    try:
        result = reader.load(worker_config)
    except DocumentError as e:
        logger.error(f"document: {e}")
        return EXIT_FATAL
    finally:
        reader.unload()
        log_path = error_log.flush()
        if log_path is not None:
            logger.info(f"error log written to {log_path}")

    output = args.output or cfg.output
    if output and reader.container is not None:
        try:
            _write_output(reader.container, Path(output))
        except OSError as e:
            logger.error(f"output: {e}")
            return EXIT_FATAL
        logger.info(f"container written to {output}")

    # log_summary adds the "SUMMARY " label itself
    log_summary(render_summary_line(result)[len("SUMMARY "):])

    if result.has_failures:
        return EXIT_PARTIAL_FAILURE
    return EXIT_SUCCESS_ALL


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
