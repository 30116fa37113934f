"""Sink factory — selects the active CSV sink by name.

The factory maintains a registry of known sinks. Each entry is a lazy
loader so that the Azure SDK is only imported when the blob sink is
selected.

Usage::

    from kml2csv.sinks.factory import get_sink

    sink = get_sink("local", ConverterConfig(output_dir="out"))
    sink.save(payload, "survey.csv")

The sink name is read from the ``CSV_SINK`` environment variable via
``ConverterConfig.sink``.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from kml2csv.core.config import ConverterConfig
from kml2csv.core.constants import BLOB_SINK, LOCAL_SINK, MEMORY_SINK
from kml2csv.sinks.base import CsvSink, SinkError

if TYPE_CHECKING:
    from collections.abc import Callable

logger = logging.getLogger("kml2csv.sinks.factory")

# Each entry maps a sink name to a callable that builds the sink from config.
_SINK_REGISTRY: dict[str, Callable[[ConverterConfig], CsvSink]] = {}


def _register_builtin_sinks() -> None:
    """Register the built-in sinks (lazy import thunks)."""

    def _local(config: ConverterConfig) -> CsvSink:
        from kml2csv.sinks.local import LocalFileSink

        return LocalFileSink(config.output_dir)

    def _blob(config: ConverterConfig) -> CsvSink:
        from kml2csv.core.ingress import get_blob_service_client
        from kml2csv.sinks.blob import BlobStorageSink

        return BlobStorageSink(get_blob_service_client(), config.output_container)

    def _memory(config: ConverterConfig) -> CsvSink:  # noqa: ARG001
        from kml2csv.sinks.memory import MemorySink

        return MemorySink()

    _SINK_REGISTRY[LOCAL_SINK] = _local
    _SINK_REGISTRY[BLOB_SINK] = _blob
    _SINK_REGISTRY[MEMORY_SINK] = _memory


def _ensure_registry() -> None:
    """Initialise the sink registry once (idempotent)."""
    if not _SINK_REGISTRY:
        _register_builtin_sinks()


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def register_sink(name: str, loader: Callable[[ConverterConfig], CsvSink]) -> None:
    """Register a custom sink.

    Raises:
        ValueError: If the name is empty.
    """
    if not name:
        msg = "Sink name must be non-empty"
        raise ValueError(msg)
    _ensure_registry()
    _SINK_REGISTRY[name] = loader
    logger.debug("Registered sink: %s", name)


def get_sink(name: str, config: ConverterConfig | None = None) -> CsvSink:
    """Create and return a sink instance.

    Args:
        name: Sink identifier (``"local"``, ``"blob"``, ``"memory"``).
        config: Optional configuration. Defaults to ``ConverterConfig()``.

    Raises:
        SinkError: If the named sink is not registered.
    """
    _ensure_registry()

    loader = _SINK_REGISTRY.get(name)
    if loader is None:
        available = ", ".join(sorted(_SINK_REGISTRY))
        raise SinkError(name, f"Unknown sink: {name!r}. Available: {available}")

    logger.info("Creating CSV sink: %s", name)
    return loader(config or ConverterConfig())


def list_sinks() -> list[str]:
    """Return the names of all registered sinks."""
    _ensure_registry()
    return sorted(_SINK_REGISTRY)
