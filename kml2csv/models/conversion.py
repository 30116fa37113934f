"""Conversion request, result and status models.

A ``ConversionRequest`` is what a caller hands the ``Converter``: the
source file name (which decides KML vs KMZ handling) and its raw bytes.
A ``ConversionResult`` carries the encoded CSV plus the suggested output
name. ``StatusUpdate`` values are emitted while a request runs so that
a UI or log can follow progress.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field

from kml2csv.core.constants import (
    CSV_CONTENT_TYPE,
    DEFAULT_OUTPUT_ENCODING,
    KML_SUFFIX,
    KMZ_SUFFIX,
)


class ConversionStatus(enum.Enum):
    """Status category attached to a user-facing status message.

    Values:
        IDLE:       Nothing in flight (ready to convert).
        PROCESSING: A stage of the conversion is running.
        SUCCESS:    The CSV was produced and handed to the sink.
        ERROR:      The conversion failed with a terminal error.
    """

    IDLE = ""
    PROCESSING = "processing"
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class StatusUpdate:
    """A single status transition."""

    message: str
    status: ConversionStatus = ConversionStatus.IDLE

    def __str__(self) -> str:
        return f"Status: {self.message}"


@dataclass(frozen=True, slots=True)
class ConversionRequest:
    """Input to a single conversion run.

    Attributes:
        source_name: Original file name (e.g. ``"survey.kmz"``).
        data: Raw file bytes.
        correlation_id: Identifier propagated into logs and errors.
    """

    source_name: str
    data: bytes = field(repr=False)
    correlation_id: str = ""

    @property
    def source_kind(self) -> str:
        """Return ``"kmz"``, ``"kml"`` or ``""`` based on the file suffix."""
        lowered = self.source_name.lower()
        if lowered.endswith(KMZ_SUFFIX):
            return "kmz"
        if lowered.endswith(KML_SUFFIX):
            return "kml"
        return ""

    @property
    def size(self) -> int:
        """Size of the source payload in bytes."""
        return len(self.data)


@dataclass(frozen=True, slots=True)
class ConversionResult:
    """Output of a successful conversion run.

    Attributes:
        csv_text: Encoded CSV document (header row included).
        output_name: Suggested output file name (``.csv`` suffix).
        record_count: Number of data rows.
        group_count: Number of distinct geometry instances.
        location: Where the sink stored the CSV (path, blob URL, or key).
        content_type: MIME type of the payload.
        encoding: Text encoding used for ``csv_bytes``.
    """

    csv_text: str = field(repr=False)
    output_name: str
    record_count: int
    group_count: int = 0
    location: str = ""
    content_type: str = CSV_CONTENT_TYPE
    encoding: str = DEFAULT_OUTPUT_ENCODING

    @property
    def csv_bytes(self) -> bytes:
        """The CSV text encoded with ``encoding``."""
        return self.csv_text.encode(self.encoding)

    def to_dict(self) -> dict[str, object]:
        """Summary payload (without the CSV body) for logs."""
        return {
            "output_name": self.output_name,
            "record_count": self.record_count,
            "group_count": self.group_count,
            "location": self.location,
            "content_type": self.content_type,
            "encoding": self.encoding,
        }
