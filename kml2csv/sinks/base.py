"""CsvSink abstract base class.

Defines the contract every save target must implement. The
``Converter`` hands each finished CSV payload to a sink and never knows
which concrete sink is behind it.
"""

from __future__ import annotations

import abc

from kml2csv.core.exceptions import TransientError


class SinkError(TransientError):
    """Raised when a sink cannot persist a CSV payload.

    Attributes:
        sink: Name of the sink that failed.
    """

    default_stage = "save"
    default_code = "SINK_WRITE_FAILED"

    def __init__(self, sink: str, message: str, **kwargs: object) -> None:
        self.sink = sink
        super().__init__(f"[{sink}] {message}", **kwargs)


class CsvSink(abc.ABC):
    """Abstract base class for CSV save targets.

    Example usage::

        sink = get_sink("local", config)
        location = sink.save(result.csv_bytes, result.output_name)
    """

    #: Registry name of the sink (e.g. ``"local"``).
    name: str = ""

    @abc.abstractmethod
    def save(self, data: bytes, filename: str) -> str:
        """Persist *data* under the suggested *filename*.

        Args:
            data: Encoded CSV bytes.
            filename: Suggested file name (e.g. ``"survey.csv"``).

        Returns:
            A location string (path, blob URL, or key). Callers may
            ignore it.

        Raises:
            SinkError: If the payload could not be written.
        """
