"""Thin ingress boundary helpers for the Azure Functions entrypoints.

Centralises the transport concerns so that ``function_app.py``
contains only trigger bindings and handoff:

- **handle_http_upload** — converts a posted KML/KMZ body and builds
  the HTTP reply (CSV attachment, or a structured JSON error).
- **handle_blob_created** — reacts to an Event Grid blob-created event:
  filters by container and suffix, downloads the blob, converts it and
  uploads the CSV to the output container.
- **get_blob_service_client** — creates an ``azure.storage.blob``
  client from the ``AzureWebJobsStorage`` environment variable,
  failing fast with a structured error if unconfigured.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from kml2csv.activities.read_source import SourceReadError
from kml2csv.core.config import ConfigValidationError, ConverterConfig
from kml2csv.core.constants import BLOB_SINK
from kml2csv.core.exceptions import ContractError, ConversionError
from kml2csv.models.blob_event import BlobEvent
from kml2csv.models.conversion import ConversionRequest
from kml2csv.orchestrators.conversion import Converter
from kml2csv.sinks.blob import BlobStorageSink
from kml2csv.sinks.factory import get_sink
from kml2csv.sinks.memory import MemorySink
from kml2csv.utils.naming import has_supported_suffix

if TYPE_CHECKING:
    from azure.storage.blob import BlobServiceClient

    from kml2csv.models.conversion import ConversionResult
    from kml2csv.sinks.base import CsvSink

logger = logging.getLogger("kml2csv.core.ingress")

_JSON_MIMETYPE = "application/json"

# HTTP status per error category
_STATUS_BY_CATEGORY: dict[str, int] = {
    "validation": 400,
    "contract": 400,
    "permanent": 422,
    "transient": 503,
}


# ---------------------------------------------------------------------------
# HTTP upload
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class HttpReply:
    """Transport-neutral HTTP response, mapped to ``func.HttpResponse``."""

    status_code: int
    body: bytes
    mimetype: str
    headers: dict[str, str] = field(default_factory=dict)


def error_reply(exc: ConversionError) -> HttpReply:
    """Build a JSON error reply from a conversion error.

    Invalid app settings are a server fault and always map to 500.
    """
    if isinstance(exc, ConfigValidationError):
        status_code = 500
    else:
        status_code = _STATUS_BY_CATEGORY.get(exc.category, 500)
    return HttpReply(
        status_code=status_code,
        body=json.dumps(exc.to_error_dict()).encode("utf-8"),
        mimetype=_JSON_MIMETYPE,
    )


def handle_http_upload(
    body: bytes,
    filename: str,
    *,
    config: ConverterConfig | None = None,
    correlation_id: str = "",
) -> HttpReply:
    """Convert an uploaded KML/KMZ body and build the HTTP reply.

    Args:
        body: Raw request body (the KML or KMZ file bytes).
        filename: Source file name from the ``filename`` query parameter.
        config: Converter configuration (defaults to ``from_env()``).
        correlation_id: Request identifier for logs and error payloads.

    Returns:
        200 with the CSV as an attachment, or a JSON error reply
        (including 500 for invalid app settings).
    """
    if config is None:
        try:
            config = ConverterConfig.from_env()
        except ConfigValidationError as exc:
            logger.error("Invalid configuration | error=%s", exc.message)
            exc.correlation_id = correlation_id
            return error_reply(exc)

    if not filename:
        exc = ContractError(
            "Missing 'filename' query parameter",
            stage="ingress",
            code="MISSING_FILENAME",
            correlation_id=correlation_id,
        )
        return error_reply(exc)

    converter = Converter(MemorySink(), config=config)
    try:
        result = converter.convert(
            ConversionRequest(source_name=filename, data=body, correlation_id=correlation_id)
        )
    except ConversionError as exc:
        return error_reply(exc)

    return HttpReply(
        status_code=200,
        body=result.csv_bytes,
        mimetype=result.content_type,
        headers={
            "Content-Disposition": f'attachment; filename="{result.output_name}"',
            "X-Record-Count": str(result.record_count),
        },
    )


# ---------------------------------------------------------------------------
# Blob-created event
# ---------------------------------------------------------------------------


def handle_blob_created(
    event_data: dict[str, Any],
    *,
    event_time: str = "",
    event_id: str = "",
    config: ConverterConfig | None = None,
    blob_service: BlobServiceClient | None = None,
) -> ConversionResult | None:
    """Convert a newly created KML/KMZ blob and save the CSV.

    Events from containers other than the configured input container,
    or for blobs without a ``.kml``/``.kmz`` suffix, are ignored. The
    CSV goes to the sink named by ``config.sink``.

    Conversion errors that are not retryable (malformed XML, missing
    KMZ member, no geometry, ...) are logged and the event is dropped,
    so the Functions host does not redeliver it. Retryable errors
    (download or upload failures) are re-raised.

    Args:
        event_data: The ``event.get_json()`` body from an Event Grid event.
        event_time: ISO-8601 timestamp from ``event.event_time``.
        event_id: Event Grid event ID used as correlation identifier.
        config: Converter configuration (defaults to ``from_env()``).
        blob_service: Storage client (defaults to ``get_blob_service_client()``).

    Returns:
        The conversion result, or ``None`` if the event was ignored or
        failed with a terminal error.

    Raises:
        ContractError: If the event does not identify a blob.
        ConversionError: If the conversion fails with a retryable error.
    """
    config = config or ConverterConfig.from_env()
    blob_event = BlobEvent.from_event_grid_event(
        event_data,
        event_time=event_time or None,
        event_id=event_id,
    )
    logger.info("Blob event received | event=%s", blob_event.to_dict())

    if not blob_event.container_name or not blob_event.blob_name:
        msg = f"Event does not identify a blob: url={blob_event.blob_url!r}"
        raise ContractError(msg, stage="ingress", code="MISSING_BLOB_FIELDS")

    if blob_event.container_name != config.input_container:
        logger.warning(
            "Ignoring blob from unexpected container: %s",
            blob_event.container_name,
        )
        return None

    if not has_supported_suffix(blob_event.blob_name):
        logger.warning("Ignoring non-KML/KMZ blob: %s", blob_event.blob_name)
        return None

    from azure.core.exceptions import AzureError

    blob_service = blob_service or get_blob_service_client()
    blob_client = blob_service.get_blob_client(
        container=blob_event.container_name,
        blob=blob_event.blob_name,
    )
    try:
        data = blob_client.download_blob().readall()
    except AzureError as exc:
        msg = f"Cannot download {blob_event.container_name}/{blob_event.blob_name}: {exc}"
        raise SourceReadError(msg, correlation_id=blob_event.correlation_id) from exc

    logger.info(
        "Blob downloaded | blob=%s | bytes=%d | correlation_id=%s",
        blob_event.blob_name,
        len(data),
        blob_event.correlation_id,
    )

    converter = Converter(_select_sink(config, blob_service), config=config)
    try:
        return converter.convert(
            ConversionRequest(
                source_name=blob_event.blob_name,
                data=data,
                correlation_id=blob_event.correlation_id,
            )
        )
    except ConversionError as exc:
        if exc.retryable:
            raise
        logger.error(
            "Blob conversion abandoned | blob=%s | code=%s | error=%s | correlation_id=%s",
            blob_event.blob_name,
            exc.code,
            exc.message,
            blob_event.correlation_id,
        )
        return None


def _select_sink(config: ConverterConfig, blob_service: BlobServiceClient) -> CsvSink:
    """Sink for blob-triggered conversions, chosen by ``config.sink``.

    The blob sink reuses the client that downloaded the source.
    """
    if config.sink == BLOB_SINK:
        return BlobStorageSink(blob_service, config.output_container)
    return get_sink(config.sink, config)


# ---------------------------------------------------------------------------
# Blob service client factory
# ---------------------------------------------------------------------------


def get_blob_service_client() -> BlobServiceClient:
    """Create a ``BlobServiceClient`` from the ``AzureWebJobsStorage`` env var.

    Raises:
        ContractError: If the environment variable is not set.
    """
    from azure.storage.blob import BlobServiceClient

    connection_string = os.environ.get("AzureWebJobsStorage", "")  # noqa: SIM112
    if not connection_string:
        msg = "AzureWebJobsStorage environment variable is not set"
        raise ContractError(msg, stage="ingress", code="MISSING_CONNECTION_STRING")

    return BlobServiceClient.from_connection_string(connection_string)
