"""Local filesystem sink."""

from __future__ import annotations

import logging
from pathlib import Path

from kml2csv.core.constants import LOCAL_SINK
from kml2csv.sinks.base import CsvSink, SinkError

logger = logging.getLogger("kml2csv.sinks.local")


class LocalFileSink(CsvSink):
    """Write CSV files into a directory, overwriting existing files."""

    name = LOCAL_SINK

    def __init__(self, output_dir: Path | str = ".") -> None:
        self._output_dir = Path(output_dir)

    @property
    def output_dir(self) -> Path:
        return self._output_dir

    def save(self, data: bytes, filename: str) -> str:
        # Only the final path component is honoured.
        target = self._output_dir / Path(filename).name
        try:
            self._output_dir.mkdir(parents=True, exist_ok=True)
            target.write_bytes(data)
        except OSError as exc:
            raise SinkError(self.name, f"Cannot write {target}: {exc}") from exc

        logger.info("CSV written | path=%s | bytes=%d", target, len(data))
        return str(target)
