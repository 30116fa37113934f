"""Source resolution: turn an uploaded KML or KMZ file into KML content.

- ``.kml`` sources are used as-is.
- ``.kmz`` sources are zip archives; the first member (in archive order)
  whose name ends in ``.kml`` (any case) is read.

The KML payload is returned as bytes so that the XML parser can honour
a BOM or the encoding declared in the XML prolog.
"""

from __future__ import annotations

import io
import logging
import zipfile
from typing import TYPE_CHECKING

from kml2csv.core.constants import KML_SUFFIX
from kml2csv.core.exceptions import PermanentError, TransientError, ValidationError
from kml2csv.utils.naming import has_supported_suffix

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger("kml2csv.activities.read_source")


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class UnrecognizedExtensionError(ValidationError):
    """Raised when a source file name lacks a ``.kml``/``.kmz`` suffix."""

    default_stage = "select"
    default_code = "UNRECOGNIZED_EXTENSION"
    default_message = "Please select a .kmz or .kml file"


class MissingKmlMemberError(PermanentError):
    """Raised when a KMZ archive contains no ``.kml`` member."""

    default_stage = "read_source"
    default_code = "KMZ_MISSING_KML"
    default_message = "No KML file found inside KMZ"


class InvalidArchiveError(PermanentError):
    """Raised when KMZ bytes are not a readable zip archive."""

    default_stage = "read_source"
    default_code = "KMZ_INVALID_ARCHIVE"


class SourceTooLargeError(ValidationError):
    """Raised when a source exceeds the configured size limit."""

    default_stage = "read_source"
    default_code = "SOURCE_TOO_LARGE"


class SourceReadError(TransientError):
    """Raised when a source file cannot be read from disk."""

    default_stage = "read_source"
    default_code = "SOURCE_READ_FAILED"


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def check_extension(source_name: str) -> None:
    """Reject names that do not end in ``.kml`` or ``.kmz``.

    Raises:
        UnrecognizedExtensionError: If the suffix is not supported.
    """
    if not has_supported_suffix(source_name):
        logger.info("Rejected source with unsupported suffix | source=%s", source_name)
        raise UnrecognizedExtensionError


def check_size(data: bytes, max_bytes: int) -> None:
    """Reject payloads larger than *max_bytes*.

    Raises:
        SourceTooLargeError: If ``len(data) > max_bytes``.
    """
    if len(data) > max_bytes:
        msg = f"Source is {len(data)} bytes, larger than the {max_bytes} byte limit"
        raise SourceTooLargeError(msg)


def find_kml_member(names: list[str]) -> str | None:
    """Return the first member name ending in ``.kml`` (any case), if any."""
    for name in names:
        if name.lower().endswith(KML_SUFFIX):
            return name
    return None


def unpack_kmz(data: bytes) -> tuple[str, bytes]:
    """Extract the KML member of a KMZ archive.

    Returns:
        Tuple of (member_name, member_bytes).

    Raises:
        InvalidArchiveError: If *data* is not a zip archive.
        MissingKmlMemberError: If the archive has no ``.kml`` member.
    """
    try:
        with zipfile.ZipFile(io.BytesIO(data)) as archive:
            member = find_kml_member(archive.namelist())
            if member is None:
                raise MissingKmlMemberError
            content = archive.read(member)
    except zipfile.BadZipFile as exc:
        msg = f"KMZ is not a valid zip archive: {exc}"
        raise InvalidArchiveError(msg) from exc

    logger.info("Unpacked KMZ | member=%s | bytes=%d", member, len(content))
    return member, content


def read_source_file(path: Path) -> bytes:
    """Read a source file from disk.

    Raises:
        SourceReadError: If the file cannot be read.
    """
    try:
        return path.read_bytes()
    except OSError as exc:
        msg = f"Cannot read source file {path.name}: {exc}"
        raise SourceReadError(msg) from exc
