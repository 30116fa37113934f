"""In-memory sink.

Keeps every saved payload in a dict keyed by file name. Used by the
HTTP endpoint, which returns the CSV in the response body instead of
storing it.
"""

from __future__ import annotations

from kml2csv.core.constants import MEMORY_SINK
from kml2csv.sinks.base import CsvSink


class MemorySink(CsvSink):
    """Collect CSV payloads in memory."""

    name = MEMORY_SINK

    def __init__(self) -> None:
        self.files: dict[str, bytes] = {}

    def save(self, data: bytes, filename: str) -> str:
        self.files[filename] = data
        return f"memory://{filename}"
