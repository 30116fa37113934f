"""CSV save targets.

Implements a pluggable sink layer:
- CsvSink: Abstract base class defining ``save(data, filename)``
- LocalFileSink: Writes into a local directory
- BlobStorageSink: Uploads to an Azure Blob Storage container
- MemorySink: Keeps payloads in memory (HTTP responses, tests)

Blob-triggered conversions pick their sink by name from ``CSV_SINK``;
the HTTP endpoint always answers from a ``MemorySink``.
"""

from kml2csv.sinks.base import CsvSink, SinkError
from kml2csv.sinks.factory import get_sink, list_sinks, register_sink
from kml2csv.sinks.local import LocalFileSink
from kml2csv.sinks.memory import MemorySink

__all__ = [
    "CsvSink",
    "LocalFileSink",
    "MemorySink",
    "SinkError",
    "get_sink",
    "list_sinks",
    "register_sink",
]
