"""Output file naming.

The suggested CSV name is the source name with its ``.kml`` or ``.kmz``
suffix (matched case-insensitively) replaced by ``.csv``.
"""

from __future__ import annotations

from kml2csv.core.constants import CSV_SUFFIX, SUPPORTED_SUFFIXES


def has_supported_suffix(source_name: str) -> bool:
    """Whether *source_name* ends in ``.kml`` or ``.kmz`` (any case)."""
    return source_name.lower().endswith(SUPPORTED_SUFFIXES)


def build_output_name(source_name: str) -> str:
    """Replace a trailing ``.kml``/``.kmz`` suffix with ``.csv``.

    Names without a supported suffix get ``.csv`` appended.

    Examples:
        >>> build_output_name("Survey.KMZ")
        'Survey.csv'
        >>> build_output_name("routes.kml")
        'routes.csv'
    """
    lowered = source_name.lower()
    for suffix in SUPPORTED_SUFFIXES:
        if lowered.endswith(suffix):
            return source_name[: -len(suffix)] + CSV_SUFFIX
    return source_name + CSV_SUFFIX
