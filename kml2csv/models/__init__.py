"""Data models.

Defines the data structures used throughout the converter:
- CoordinateTriple: one parsed ``lon,lat[,alt]`` tuple
- GeometryRecord: one flat output row (a point or a line/polygon vertex)
- ConversionRequest / ConversionResult: orchestrator input and output
- BlobEvent: Event Grid blob-created payload
"""

from kml2csv.models.conversion import (
    ConversionRequest,
    ConversionResult,
    ConversionStatus,
    StatusUpdate,
)
from kml2csv.models.record import (
    CoordinateTriple,
    GeometryKind,
    GeometryRecord,
    RecordValidationError,
)

__all__ = [
    "ConversionRequest",
    "ConversionResult",
    "ConversionStatus",
    "CoordinateTriple",
    "GeometryKind",
    "GeometryRecord",
    "RecordValidationError",
    "StatusUpdate",
]
