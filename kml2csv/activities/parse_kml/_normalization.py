"""Coordinate tokenizing and element text helpers for KML parsing.

Responsibilities:
- Split KML coordinate text into ``CoordinateTriple`` values
- Read element text the way a DOM ``textContent`` does (CDATA included)
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

from kml2csv.activities.parse_kml._constants import (
    ALTITUDE_INDEX,
    DEFAULT_COMPONENT,
    LATITUDE_INDEX,
    LONGITUDE_INDEX,
)
from kml2csv.models.record import CoordinateTriple

if TYPE_CHECKING:
    from lxml.etree import _Element

# ---------------------------------------------------------------------------
# KML coordinate text parsing
# ---------------------------------------------------------------------------


def tokenize_coordinates(text: str | None) -> list[CoordinateTriple]:
    """Parse KML coordinate text (``lon,lat[,alt] lon,lat[,alt] ...``).

    Tuples are separated by any run of whitespace and their components
    by commas. Missing or blank components become ``0.0``. A longitude
    or latitude that is present but not a number drops the whole tuple;
    an unparsable altitude becomes ``0.0``.

    Returns:
        Triples in source order. Empty for ``None`` or blank text.
    """
    if not text:
        return []

    triples: list[CoordinateTriple] = []
    for token in text.split():
        parts = token.split(",")
        lon = _component(parts, LONGITUDE_INDEX)
        lat = _component(parts, LATITUDE_INDEX)
        if lon is None or lat is None:
            continue
        alt = _component(parts, ALTITUDE_INDEX)
        triples.append(
            CoordinateTriple(
                longitude=lon,
                latitude=lat,
                altitude=DEFAULT_COMPONENT if alt is None else alt,
            )
        )
    return triples


def _component(parts: list[str], index: int) -> float | None:
    """Return component *index* as a float, ``0.0`` if blank, ``None`` if NaN."""
    if index >= len(parts):
        return DEFAULT_COMPONENT
    raw = parts[index].strip()
    if not raw:
        return DEFAULT_COMPONENT
    # float() accepts digit-group underscores ("1_0"); coordinate text does not.
    if "_" in raw:
        return None
    try:
        value = float(raw)
    except ValueError:
        return None
    if math.isnan(value):
        return None
    return value


# ---------------------------------------------------------------------------
# Element text
# ---------------------------------------------------------------------------


def element_text(element: _Element | None) -> str:
    """Concatenated descendant text of *element*, stripped; ``""`` if absent."""
    if element is None:
        return ""
    return "".join(element.itertext()).strip()
