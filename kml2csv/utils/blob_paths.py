"""Deterministic blob path generation for converted CSV files.

Generates output paths of the form::

    csv/{YYYY}/{MM}/{source-name}.csv

The source name component is sanitised to lowercase slug form: only
``a-z``, ``0-9`` and ``-`` are allowed.  Spaces become hyphens; other
characters are stripped.  The same source name and timestamp always
produce the same path.
"""

from __future__ import annotations

import re
from datetime import UTC, datetime
from pathlib import PurePosixPath

from kml2csv.core.constants import CSV_SUFFIX
from kml2csv.utils.naming import build_output_name

CSV_PREFIX = "csv"

# Regex for sanitising path segments (allow only lowercase alphanumeric + hyphen)
_SLUG_RE = re.compile(r"[^a-z0-9-]+")


def sanitise_slug(value: str) -> str:
    """Convert a string to a URL/path-safe slug.

    - Lowercase
    - Spaces → hyphens
    - Strips all characters except ``a-z``, ``0-9``, ``-``
    - Collapses consecutive hyphens
    - Falls back to ``"unknown"`` if the result is empty
    """
    slug = value.lower().strip().replace(" ", "-")
    slug = _SLUG_RE.sub("", slug)
    slug = re.sub(r"-{2,}", "-", slug).strip("-")
    return slug if slug else "unknown"


def build_csv_blob_path(
    source_name: str,
    *,
    timestamp: datetime | None = None,
) -> str:
    """Build the blob path for a converted CSV file.

    Format: ``csv/{YYYY}/{MM}/{source-name}.csv``

    Args:
        source_name: Source blob name (e.g. ``"uploads/Farm Routes.kmz"``)
            or the CSV output name (``"Farm Routes.csv"``).
            Only the final path segment is used.
        timestamp: Conversion timestamp. Defaults to current UTC time.

    Returns:
        Deterministic blob path string.
    """
    ts = timestamp or datetime.now(UTC)
    year = f"{ts.year:04d}"
    month = f"{ts.month:02d}"
    filename_slug = sanitise_slug(_csv_stem(PurePosixPath(source_name).name)) + CSV_SUFFIX
    return f"{CSV_PREFIX}/{year}/{month}/{filename_slug}"


def _csv_stem(name: str) -> str:
    """Stem of the CSV name for *name*, which may already end in ``.csv``."""
    if name.lower().endswith(CSV_SUFFIX):
        return name[: -len(CSV_SUFFIX)]
    return build_output_name(name)[: -len(CSV_SUFFIX)]
