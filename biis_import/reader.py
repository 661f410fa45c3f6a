from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import IO, Any

from .excel.workbook import DocumentError, open_workbook, select_sheet
from .logging.error_log import ErrorLogBuffer, ErrorRecord
from .models.entities import Container, Meta
from .models.enums import Subset
from .models.import_result import ImportResult
from .services.orchestrator import import_sheet
from .services.validator import SubsetValidator, ValuationValidator

logger = logging.getLogger(__name__)

"""BIIS import worker.

Host-facing lifecycle of one import:

    worker = Reader()
    config = worker.required_configuration()
    config.streams[Reader.PARAMETER_NAME_STREAM] = open("export.xlsx", "rb")
    config.integers[Reader.PARAMETER_NAME_SHEET_IDX] = 1
    worker.load(config)
    container = worker.container
    worker.unload()

``load`` may run again only after ``unload``. The Container is created once
the workbook is open and is handed out even when a later step failed.
"""

__all__ = [
    "CREATOR",
    "DATA_FORMAT",
    "MODEL_VERSION",
    "ImportWorkerConfiguration",
    "Reader",
    "ReaderStateError",
    "WorkerConfiguration",
]

CREATOR = "icred with biis-excel plugin"
DATA_FORMAT = "XML"
MODEL_VERSION = "1-0.6.2"


class ReaderStateError(Exception):
    """Worker used out of its load/unload lifecycle or with a wrong configuration."""


@dataclass
class WorkerConfiguration:
    """Named parameters handed to a worker, grouped by kind."""
    streams: dict[str, IO[bytes] | None] = field(default_factory=dict)
    strings: dict[str, str | None] = field(default_factory=dict)
    integers: dict[str, int | None] = field(default_factory=dict)


@dataclass
class ImportWorkerConfiguration(WorkerConfiguration):
    pass


def _stream_name(stream: Any) -> str:
    name = getattr(stream, "name", None)
    if isinstance(name, (str, Path)):
        return Path(name).name
    return "<stream>"


class Reader:
    """Import worker turning one BIIS sheet into a GIF Container.

    Args:
        validator: subset validator for assembled valuations; defaults to the
            subset 5.7 rules
        error_log: buffer receiving contained failures; the caller flushes it
        validate: False skips validation altogether
    """

    PARAMETER_NAME_STREAM = "biis-file"
    PARAMETER_NAME_SHEET_IDX = "sheet-number"
    PARAMETER_NAME_SHEET_NAME = "sheet-name"
    SUPPORTED_SUBSETS: tuple[Subset, ...] = (Subset.S5_7,)

    def __init__(
        self,
        validator: SubsetValidator | None = None,
        *,
        error_log: ErrorLogBuffer | None = None,
        validate: bool = True,
    ) -> None:
        self.validator: SubsetValidator | None = None
        if validate:
            self.validator = validator if validator is not None else ValuationValidator()
        self.error_log = error_log if error_log is not None else ErrorLogBuffer()
        self._stream: IO[bytes] | None = None
        self._container: Container | None = None
        self._result: ImportResult | None = None

    @property
    def supported_subsets(self) -> list[Subset]:
        return list(self.SUPPORTED_SUBSETS)

    @property
    def container(self) -> Container | None:
        """Container of the last ``load``; None before the workbook was opened."""
        return self._container

    @property
    def result(self) -> ImportResult | None:
        return self._result

    def required_configuration(self) -> ImportWorkerConfiguration:
        """Empty configuration declaring the three accepted parameters."""
        return ImportWorkerConfiguration(
            streams={self.PARAMETER_NAME_STREAM: None},
            strings={self.PARAMETER_NAME_SHEET_NAME: None},
            integers={self.PARAMETER_NAME_SHEET_IDX: None},
        )

    def load(self, config: WorkerConfiguration) -> ImportResult:
        """Read the configured sheet into a fresh Container.

        Row and cell failures are contained (logged, recorded, counted).

        Returns:
            ImportResult of the sheet

        Raises:
            ReaderStateError: not an import configuration, or a previous
                input is still loaded
            DocumentError: workbook unreadable or sheet selection failed
        """
        if not isinstance(config, ImportWorkerConfiguration):
            raise ReaderStateError(f"{type(config).__name__} is not an import configuration")
        if self._stream is not None:
            raise ReaderStateError("previous input still loaded, call unload() first")

        stream = config.streams.get(self.PARAMETER_NAME_STREAM)
        sheet_number = config.integers.get(self.PARAMETER_NAME_SHEET_IDX)
        sheet_name = config.strings.get(self.PARAMETER_NAME_SHEET_NAME)
        file_name = _stream_name(stream)
        selector = str(sheet_number) if sheet_number is not None else (sheet_name or "")

        self._stream = stream
        self._container = None
        self._result = None

        try:
            workbook = open_workbook(stream)
        except DocumentError as e:
            self._record_document_error(file_name, selector, e)
            raise

        try:
            self._container = Container(
                meta=Meta(
                    created=datetime.now().astimezone(),
                    creator=CREATOR,
                    format=DATA_FORMAT,
                    version=MODEL_VERSION,
                )
            )
            try:
                sheet = select_sheet(workbook, sheet_number, sheet_name)
            except DocumentError as e:
                self._record_document_error(file_name, selector, e)
                raise
            logger.info(f"importing sheet '{sheet.title}' of {file_name}")
            self._result = import_sheet(
                sheet,
                self._container,
                file_name=file_name,
                validator=self.validator,
                error_log=self.error_log,
            )
        finally:
            workbook.close()

        logger.info(
            f"sheet '{self._result.sheet_name}': {self._result.imported_rows}/{self._result.total_rows} rows imported, "
            f"{self._result.property_count} properties, {self._result.valuation_count} valuations"
        )
        return self._result

    def unload(self) -> None:
        """Release the input stream. Safe to call repeatedly."""
        if self._stream is not None:
            try:
                self._stream.close()
            except OSError as e:
                logger.warning(f"cannot close input stream: {e}")
            self._stream = None

    def _record_document_error(self, file_name: str, selector: str, error: Exception) -> None:
        logger.error(f"cannot import {file_name}: {error}")
        self.error_log.append(ErrorRecord.create(file_name, selector, -1, "DOCUMENT_ERROR", str(error)))
