"""Shared converter constants — single source of truth.

Centralises the CSV schema, accepted file suffixes, MIME types and the
default storage container names used by the sinks and the Functions
wiring.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Input suffixes
# ---------------------------------------------------------------------------

KML_SUFFIX: str = ".kml"
KMZ_SUFFIX: str = ".kmz"
CSV_SUFFIX: str = ".csv"

SUPPORTED_SUFFIXES: tuple[str, ...] = (KML_SUFFIX, KMZ_SUFFIX)
"""Source suffixes accepted at selection time (matched case-insensitively)."""

# ---------------------------------------------------------------------------
# CSV output schema
# ---------------------------------------------------------------------------

CSV_HEADER: tuple[str, ...] = (
    "Type",
    "Name",
    "Description",
    "Latitude",
    "Longitude",
    "Altitude",
    "GroupID",
    "VertexIndex",
)
"""Fixed header row, in column order."""

CSV_CONTENT_TYPE: str = "text/csv"
CSV_ROW_SEPARATOR: str = "\n"
CSV_DELIMITER: str = ","

DEFAULT_OUTPUT_ENCODING: str = "utf-8"

# ---------------------------------------------------------------------------
# Blob container names
# ---------------------------------------------------------------------------

DEFAULT_INPUT_CONTAINER: str = "kml-input"
"""Default blob container for incoming KML/KMZ files."""

DEFAULT_OUTPUT_CONTAINER: str = "csv-output"
"""Default blob container for converted CSV files."""

# ---------------------------------------------------------------------------
# Sink names
# ---------------------------------------------------------------------------

LOCAL_SINK: str = "local"
BLOB_SINK: str = "blob"
MEMORY_SINK: str = "memory"
