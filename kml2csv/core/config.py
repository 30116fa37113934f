"""Converter configuration loaded from environment variables.

All configuration values have sensible defaults for local use. Azure
Functions app settings (or ``local.settings.json`` for local dev) are
the source of truth when running under the Functions host.

Fail-fast validation:
    ``from_env()`` raises ``ConfigValidationError`` if any value is out
    of its valid range.  This catches bad configuration at startup
    instead of halfway through a conversion.
"""

from __future__ import annotations

import codecs
import os
from dataclasses import dataclass

from kml2csv.core.constants import (
    BLOB_SINK,
    DEFAULT_INPUT_CONTAINER,
    DEFAULT_OUTPUT_CONTAINER,
    DEFAULT_OUTPUT_ENCODING,
    LOCAL_SINK,
    MEMORY_SINK,
)
from kml2csv.core.exceptions import ConversionError

#: 100 MiB — larger sources are rejected before unpacking or parsing.
DEFAULT_MAX_SOURCE_BYTES = 100 * 1024 * 1024

_KNOWN_SINKS = frozenset({LOCAL_SINK, BLOB_SINK, MEMORY_SINK})


class ConfigValidationError(ConversionError):
    """Raised when configuration values are out of valid range.

    Attributes:
        key: The configuration key that failed validation.
        value: The invalid value.
        message: Human-readable description of the valid range.
    """

    default_stage = "config"
    default_code = "CONFIG_VALIDATION_FAILED"

    def __init__(self, key: str, value: object, message: str) -> None:
        self.key = key
        self.value = value
        super().__init__(f"Invalid configuration {key}={value!r}: {message}")


@dataclass(frozen=True, slots=True)
class ConverterConfig:
    """Immutable converter configuration.

    Loaded once at startup and threaded through the ``Converter`` and
    the sink factory.

    Attributes:
        input_container: Blob container watched for incoming KML/KMZ files.
        output_container: Blob container receiving converted CSV files.
        output_dir: Directory used by the local filesystem sink.
        sink: Sink for blob-triggered conversions (``blob``, ``local``
            or ``memory``).
        output_encoding: Text encoding of the written CSV bytes.
        max_source_bytes: Upper bound on the size of a source file.
    """

    input_container: str = DEFAULT_INPUT_CONTAINER
    output_container: str = DEFAULT_OUTPUT_CONTAINER
    output_dir: str = "."
    sink: str = BLOB_SINK
    output_encoding: str = DEFAULT_OUTPUT_ENCODING
    max_source_bytes: int = DEFAULT_MAX_SOURCE_BYTES

    @classmethod
    def from_env(cls) -> ConverterConfig:
        """Load and validate configuration from environment variables.

        Raises:
            ConfigValidationError: If a value is out of range, a
                required string value is empty, or a numeric value
                cannot be parsed (e.g. ``MAX_SOURCE_BYTES=abc``).
        """
        config = cls(
            input_container=os.getenv("KML_INPUT_CONTAINER", DEFAULT_INPUT_CONTAINER),
            output_container=os.getenv("CSV_OUTPUT_CONTAINER", DEFAULT_OUTPUT_CONTAINER),
            output_dir=os.getenv("CSV_OUTPUT_DIR", "."),
            sink=os.getenv("CSV_SINK", BLOB_SINK),
            output_encoding=os.getenv("CSV_OUTPUT_ENCODING", DEFAULT_OUTPUT_ENCODING),
            max_source_bytes=_int_env("MAX_SOURCE_BYTES", DEFAULT_MAX_SOURCE_BYTES),
        )
        _validate(config)
        return config


def _int_env(key: str, default: int) -> int:
    raw = os.getenv(key, str(default))
    try:
        return int(raw)
    except ValueError:
        raise ConfigValidationError(key, raw, "must be an integer") from None


def _validate(config: ConverterConfig) -> None:
    """Validate configuration values.  Raises ``ConfigValidationError``."""
    if not config.input_container:
        raise ConfigValidationError(
            "KML_INPUT_CONTAINER",
            config.input_container,
            "must not be empty",
        )

    if not config.output_container:
        raise ConfigValidationError(
            "CSV_OUTPUT_CONTAINER",
            config.output_container,
            "must not be empty",
        )

    if not config.output_dir:
        raise ConfigValidationError(
            "CSV_OUTPUT_DIR",
            config.output_dir,
            "must not be empty",
        )

    if config.sink not in _KNOWN_SINKS:
        raise ConfigValidationError(
            "CSV_SINK",
            config.sink,
            f"must be one of {', '.join(sorted(_KNOWN_SINKS))}",
        )

    try:
        codecs.lookup(config.output_encoding)
    except LookupError:
        raise ConfigValidationError(
            "CSV_OUTPUT_ENCODING",
            config.output_encoding,
            "must be a known text encoding",
        ) from None

    if config.max_source_bytes <= 0:
        raise ConfigValidationError(
            "MAX_SOURCE_BYTES",
            config.max_source_bytes,
            "must be > 0 (bytes)",
        )
