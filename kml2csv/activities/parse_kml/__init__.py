"""KML parsing stage.

Turns KML text into an lxml element tree and exposes the coordinate
tokenizer used by the geometry extractor.

The parsing stage is split into focused modules:
- **_validation**: well-formedness check and lxml parsing
- **_normalization**: coordinate text → ``CoordinateTriple``, element text
- **_constants**: KML namespace and element local names
"""

from __future__ import annotations

from kml2csv.activities.parse_kml._constants import KML_NAMESPACE
from kml2csv.activities.parse_kml._normalization import element_text, tokenize_coordinates
from kml2csv.activities.parse_kml._validation import (
    KmlParseError,
    MalformedXmlError,
    parse_kml_text,
)

__all__ = [
    "KML_NAMESPACE",
    "KmlParseError",
    "MalformedXmlError",
    "element_text",
    "parse_kml_text",
    "tokenize_coordinates",
]
