"""Conversion orchestrator.

Runs one request through the pipeline steps:

1. Select — reject names without a ``.kml``/``.kmz`` suffix
2. Read — unzip KMZ archives, or take KML bytes as-is
3. Parse — lxml document tree (``MalformedXmlError`` on bad XML)
4. Extract — flatten placemarks to geometry records
5. Encode — render CSV text
6. Save — hand the bytes and suggested name to the sink

Each step reports a ``StatusUpdate`` through the optional ``on_status``
callback. Any failure aborts the remaining steps, reports a single
``Error: ...`` status, and re-raises; no partial output is saved.

A ``Converter`` handles one request at a time. ``busy`` is true while
a request runs and is cleared on every exit path.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from kml2csv.activities.encode_csv import encode_csv
from kml2csv.activities.extract_geometry import TraversalContext, extract_records
from kml2csv.activities.parse_kml import parse_kml_text
from kml2csv.activities.read_source import (
    check_extension,
    check_size,
    read_source_file,
    unpack_kmz,
)
from kml2csv.core.config import ConverterConfig
from kml2csv.core.exceptions import ConversionError, ValidationError
from kml2csv.models.conversion import (
    ConversionRequest,
    ConversionResult,
    ConversionStatus,
    StatusUpdate,
)
from kml2csv.utils.naming import build_output_name

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

    from kml2csv.sinks.base import CsvSink

logger = logging.getLogger("kml2csv.orchestrators.conversion")

# ---------------------------------------------------------------------------
# Status messages
# ---------------------------------------------------------------------------

READY_MESSAGE = "Ready to convert"
UNZIPPING_MESSAGE = "Unzipping KMZ..."
READING_MESSAGE = "Reading KML..."
PARSING_MESSAGE = "Parsing KML..."


class ConversionInProgressError(ValidationError):
    """Raised when ``convert`` is called while another request is running."""

    default_stage = "orchestrator"
    default_code = "CONVERSION_IN_PROGRESS"
    default_message = "A conversion is already in progress"


def _plural(count: int) -> str:
    return f"{count} coordinate{'' if count == 1 else 's'}"


class Converter:
    """Sequence a KML/KMZ → CSV conversion and report its status.

    Args:
        sink: Save target for finished CSV payloads.
        config: Converter configuration (encoding, size limit).
        on_status: Optional callback receiving every ``StatusUpdate``.
    """

    def __init__(
        self,
        sink: CsvSink,
        *,
        config: ConverterConfig | None = None,
        on_status: Callable[[StatusUpdate], None] | None = None,
    ) -> None:
        self._sink = sink
        self._config = config or ConverterConfig()
        self._on_status = on_status
        self._busy = False
        self._last_status = StatusUpdate(READY_MESSAGE)

    @property
    def busy(self) -> bool:
        """Whether a conversion is currently running."""
        return self._busy

    @property
    def last_status(self) -> StatusUpdate:
        """The most recent status update."""
        return self._last_status

    @property
    def sink(self) -> CsvSink:
        return self._sink

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def select(self, source_name: str) -> StatusUpdate:
        """Validate a candidate source name before conversion.

        Raises:
            UnrecognizedExtensionError: If the suffix is not ``.kml``/``.kmz``.
        """
        try:
            check_extension(source_name)
        except ConversionError as exc:
            self._report(exc.message, ConversionStatus.ERROR)
            raise
        return self._report(READY_MESSAGE)

    def convert(self, request: ConversionRequest) -> ConversionResult:
        """Convert one KML/KMZ payload to CSV and save it.

        Raises:
            ConversionInProgressError: If another request is running.
            ConversionError: Any stage failure (the specific subclass
                identifies the stage).
        """
        if self._busy:
            raise ConversionInProgressError(correlation_id=request.correlation_id)

        self._busy = True
        try:
            result = self._run(request)
        except ConversionError as exc:
            if not exc.correlation_id:
                exc.correlation_id = request.correlation_id
            logger.warning(
                "Conversion failed | source=%s | code=%s | error=%s | correlation_id=%s",
                request.source_name,
                exc.code,
                exc.message,
                request.correlation_id,
            )
            self._report(f"Error: {exc.message}", ConversionStatus.ERROR)
            raise
        except Exception as exc:
            logger.exception(
                "Unexpected conversion failure | source=%s | correlation_id=%s",
                request.source_name,
                request.correlation_id,
            )
            self._report(f"Error: {exc}", ConversionStatus.ERROR)
            raise
        finally:
            self._busy = False

        logger.info(
            "Conversion completed | source=%s | output=%s | records=%d | correlation_id=%s",
            request.source_name,
            result.output_name,
            result.record_count,
            request.correlation_id,
        )
        return result

    def convert_file(self, path: Path, *, correlation_id: str = "") -> ConversionResult:
        """Read *path* from disk and convert it.

        Raises:
            UnrecognizedExtensionError: If the suffix is not ``.kml``/``.kmz``.
            SourceReadError: If the file cannot be read.
        """
        self.select(path.name)
        try:
            data = read_source_file(path)
        except ConversionError as exc:
            self._report(f"Error: {exc.message}", ConversionStatus.ERROR)
            raise
        return self.convert(
            ConversionRequest(source_name=path.name, data=data, correlation_id=correlation_id)
        )

    # ------------------------------------------------------------------
    # Pipeline
    # ------------------------------------------------------------------

    def _run(self, request: ConversionRequest) -> ConversionResult:
        logger.info(
            "Conversion started | source=%s | bytes=%d | correlation_id=%s",
            request.source_name,
            request.size,
            request.correlation_id,
        )
        check_extension(request.source_name)
        check_size(request.data, self._config.max_source_bytes)

        if request.source_kind == "kmz":
            self._report(UNZIPPING_MESSAGE, ConversionStatus.PROCESSING)
            _, kml_bytes = unpack_kmz(request.data)
        else:
            self._report(READING_MESSAGE, ConversionStatus.PROCESSING)
            kml_bytes = request.data

        self._report(PARSING_MESSAGE, ConversionStatus.PROCESSING)
        root = parse_kml_text(kml_bytes)

        context = TraversalContext()
        records = extract_records(root, context=context)
        count = len(records)
        self._report(f"Found {_plural(count)}...", ConversionStatus.PROCESSING)

        csv_text = encode_csv(records)
        output_name = build_output_name(request.source_name)
        encoding = self._config.output_encoding
        location = self._sink.save(csv_text.encode(encoding), output_name)

        self._report(f"Done! Saved {_plural(count)}", ConversionStatus.SUCCESS)
        return ConversionResult(
            csv_text=csv_text,
            output_name=output_name,
            record_count=count,
            group_count=context.group_count,
            location=location,
            encoding=encoding,
        )

    def _report(
        self,
        message: str,
        status: ConversionStatus = ConversionStatus.IDLE,
    ) -> StatusUpdate:
        update = StatusUpdate(message, status)
        self._last_status = update
        logger.debug("Status | %s | %s", status.value or "idle", message)
        if self._on_status is not None:
            self._on_status(update)
        return update


def convert_bytes(
    source_name: str,
    data: bytes,
    sink: CsvSink,
    *,
    config: ConverterConfig | None = None,
    correlation_id: str = "",
) -> ConversionResult:
    """One-shot helper: convert *data* with a throwaway ``Converter``."""
    converter = Converter(sink, config=config)
    return converter.convert(
        ConversionRequest(source_name=source_name, data=data, correlation_id=correlation_id)
    )
