"""Azure Functions entry point — KML to CSV converter.

This module registers the Azure Functions (Event Grid trigger and HTTP
route) using the Python v2 programming model.

All business logic lives in the kml2csv package. This file is purely
the wiring layer between Azure Functions bindings and application code.
"""

from __future__ import annotations

import logging

import azure.functions as func

from kml2csv.core.ingress import handle_blob_created, handle_http_upload

app = func.FunctionApp()

logger = logging.getLogger("kml2csv.function_app")


# ---------------------------------------------------------------------------
# Trigger: Blob Created → Convert → Upload CSV
# ---------------------------------------------------------------------------


@app.function_name("kml_blob_trigger")
@app.event_grid_trigger(arg_name="event")
def kml_blob_trigger(event: func.EventGridEvent) -> None:
    """Event Grid trigger that converts a newly uploaded KML/KMZ blob.

    Fires when a blob is created in the input container. The CSV is
    written to the sink named by ``CSV_SINK`` (by default the output
    container under ``csv/{YYYY}/{MM}/``). Only retryable failures fail
    the run and get the event redelivered.
    """
    event_id = event.id or ""
    logger.info("Event Grid trigger fired | event_id=%s", event_id)

    try:
        result = handle_blob_created(
            event.get_json(),
            event_time=event.event_time.isoformat() if event.event_time else "",
            event_id=event_id,
        )
    except Exception:
        logger.exception("Blob conversion failed | event_id=%s", event_id)
        raise

    if result is not None:
        logger.info("Blob converted | result=%s | event_id=%s", result.to_dict(), event_id)


# ---------------------------------------------------------------------------
# HTTP: POST /api/convert?filename=<name>.kml|kmz
# ---------------------------------------------------------------------------


@app.function_name("convert")
@app.route(route="convert", methods=["POST"], auth_level=func.AuthLevel.FUNCTION)
def convert(req: func.HttpRequest) -> func.HttpResponse:
    """Convert the posted KML/KMZ body and return the CSV as an attachment."""
    filename = req.params.get("filename", "")
    correlation_id = req.headers.get("x-correlation-id", "")

    reply = handle_http_upload(
        req.get_body(),
        filename,
        correlation_id=correlation_id,
    )
    return func.HttpResponse(
        body=reply.body,
        status_code=reply.status_code,
        mimetype=reply.mimetype,
        headers=reply.headers,
    )
