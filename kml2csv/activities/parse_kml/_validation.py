"""XML parsing and well-formedness checks for KML documents.

Turns KML text (or bytes) into an lxml element tree. Any document that
is not well-formed XML is rejected with ``MalformedXmlError`` before
extraction runs.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from kml2csv.core.exceptions import ValidationError

if TYPE_CHECKING:
    from lxml.etree import _Element

logger = logging.getLogger("kml2csv.activities.parse_kml")


# ---------------------------------------------------------------------------
# Exceptions (public API, re-exported from __init__)
# ---------------------------------------------------------------------------


class KmlParseError(ValidationError):
    """Raised when KML text cannot be turned into a document tree."""

    default_stage = "parse_kml"
    default_code = "KML_PARSE_FAILED"


class MalformedXmlError(KmlParseError):
    """Raised when the KML text is not well-formed XML."""

    default_code = "KML_MALFORMED_XML"
    default_message = "Invalid KML format"


# ---------------------------------------------------------------------------
# XML parsing
# ---------------------------------------------------------------------------


def parse_kml_text(content: str | bytes) -> _Element:
    """Parse KML text into an lxml root element.

    Bytes are handed to lxml unchanged so that a BOM or an XML
    declaration's ``encoding`` is honoured. ``str`` input is re-encoded
    as UTF-8 and parsed with the declared encoding overridden.

    Raises:
        MalformedXmlError: If the content is empty or not well-formed XML.
    """
    from lxml import etree  # type: ignore[attr-defined]

    if isinstance(content, str):
        payload = content.encode("utf-8")
        encoding: str | None = "utf-8"
    else:
        payload = content
        encoding = None

    if not payload.strip():
        raise MalformedXmlError("Invalid KML format: document is empty")

    parser = etree.XMLParser(
        resolve_entities=False,
        no_network=True,
        huge_tree=False,
        encoding=encoding,
    )
    try:
        root: _Element = etree.fromstring(payload, parser=parser)
    except etree.XMLSyntaxError as exc:
        logger.debug("XML syntax error: %s", exc)
        msg = f"Invalid KML format: {exc}"
        raise MalformedXmlError(msg) from exc

    logger.debug("Parsed KML document | root=%s", etree.QName(root).localname)
    return root
