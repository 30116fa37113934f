"""Tests for the parse_kml stage.

Covers:
- Coordinate tokenizing (whitespace/comma layout, defaults, dropped tuples)
- Tokenizer idempotence over the CSV number formatting
- lxml parsing of well-formed and malformed documents
- Element text helper (CDATA, absent elements)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from kml2csv.activities.encode_csv import format_number
from kml2csv.activities.parse_kml import (
    MalformedXmlError,
    element_text,
    parse_kml_text,
    tokenize_coordinates,
)
from kml2csv.models.record import CoordinateTriple

if TYPE_CHECKING:
    from pathlib import Path


class TestTokenizeCoordinates:
    """Coordinate text → CoordinateTriple list."""

    def test_two_full_tuples(self) -> None:
        assert tokenize_coordinates("1,2,3 4,5,6") == [
            CoordinateTriple(longitude=1.0, latitude=2.0, altitude=3.0),
            CoordinateTriple(longitude=4.0, latitude=5.0, altitude=6.0),
        ]

    def test_altitude_defaults_to_zero(self) -> None:
        assert tokenize_coordinates("1,2") == [CoordinateTriple(1.0, 2.0, 0.0)]

    def test_empty_string(self) -> None:
        assert tokenize_coordinates("") == []

    def test_none(self) -> None:
        assert tokenize_coordinates(None) == []

    def test_whitespace_only(self) -> None:
        assert tokenize_coordinates(" \n\t  ") == []

    def test_non_numeric_longitude_drops_tuple(self) -> None:
        assert tokenize_coordinates("abc,2,3") == []

    def test_non_numeric_latitude_drops_tuple(self) -> None:
        assert tokenize_coordinates("1,xyz,3") == []

    def test_nan_text_drops_tuple(self) -> None:
        assert tokenize_coordinates("nan,2") == []

    @pytest.mark.parametrize("text", ["1_0,2", "1,2_0", "1_000.5,2,3"])
    def test_underscore_digit_groups_drop_tuple(self, text: str) -> None:
        assert tokenize_coordinates(text) == []

    def test_underscore_altitude_coerces_to_zero(self) -> None:
        (triple,) = tokenize_coordinates("1,2,1_0")
        assert triple.altitude == 0.0

    def test_dropped_tuple_keeps_neighbours(self) -> None:
        triples = tokenize_coordinates("1,2 bad,2 3,4")
        assert [(t.longitude, t.latitude) for t in triples] == [(1.0, 2.0), (3.0, 4.0)]

    def test_blank_component_coerces_to_zero(self) -> None:
        """A blank latitude becomes 0 while a non-numeric one drops the tuple."""
        assert tokenize_coordinates("5,") == [CoordinateTriple(5.0, 0.0, 0.0)]
        assert tokenize_coordinates(",7,1") == [CoordinateTriple(0.0, 7.0, 1.0)]

    def test_single_component_defaults_latitude(self) -> None:
        assert tokenize_coordinates("9") == [CoordinateTriple(9.0, 0.0, 0.0)]

    def test_non_numeric_altitude_coerces_to_zero(self) -> None:
        assert tokenize_coordinates("1,2,high") == [CoordinateTriple(1.0, 2.0, 0.0)]

    def test_extra_components_ignored(self) -> None:
        assert tokenize_coordinates("1,2,3,4") == [CoordinateTriple(1.0, 2.0, 3.0)]

    def test_mixed_whitespace_separators(self) -> None:
        text = "\n   -4.15,50.36,0\n\t-4.14,50.361,0   \r\n"
        triples = tokenize_coordinates(text)
        assert len(triples) == 2
        assert triples[1] == CoordinateTriple(-4.14, 50.361, 0.0)

    def test_exponent_and_sign_forms(self) -> None:
        assert tokenize_coordinates("+1.5e1,-2.5E-1") == [CoordinateTriple(15.0, -0.25, 0.0)]

    def test_idempotent_over_rendered_form(self) -> None:
        original = tokenize_coordinates("-122.0841,37.4219,0.1 1e-7,-0.0,12")
        rendered = " ".join(
            ",".join(format_number(v) for v in (t.longitude, t.latitude, t.altitude))
            for t in original
        )
        assert tokenize_coordinates(rendered) == original


class TestParseKmlText:
    """KML text → lxml root element."""

    def test_parses_namespaced_document(self, mixed_kml: Path) -> None:
        root = parse_kml_text(mixed_kml.read_bytes())
        assert root.tag == "{http://www.opengis.net/kml/2.2}kml"

    def test_parses_str_with_encoding_declaration(self, mixed_kml: Path) -> None:
        root = parse_kml_text(mixed_kml.read_text(encoding="utf-8"))
        assert root.tag.endswith("kml")

    def test_parses_document_with_bom(self) -> None:
        root = parse_kml_text(b"\xef\xbb\xbf<kml><Document/></kml>")
        assert root.tag == "kml"

    def test_not_xml_rejected(self, not_xml_kml: Path) -> None:
        with pytest.raises(MalformedXmlError) as exc_info:
            parse_kml_text(not_xml_kml.read_bytes())
        assert "Invalid KML format" in str(exc_info.value)
        assert exc_info.value.code == "KML_MALFORMED_XML"
        assert exc_info.value.stage == "parse_kml"

    def test_unclosed_tags_rejected(self, unclosed_tags_kml: Path) -> None:
        with pytest.raises(MalformedXmlError):
            parse_kml_text(unclosed_tags_kml.read_bytes())

    def test_empty_document_rejected(self) -> None:
        with pytest.raises(MalformedXmlError, match="empty"):
            parse_kml_text("   ")

    def test_malformed_is_not_retryable(self) -> None:
        with pytest.raises(MalformedXmlError) as exc_info:
            parse_kml_text("<kml>")
        assert exc_info.value.retryable is False
        assert exc_info.value.category == "validation"


class TestElementText:
    """Element text mirrors DOM textContent."""

    def test_absent_element(self) -> None:
        assert element_text(None) == ""

    def test_cdata_included_and_stripped(self) -> None:
        root = parse_kml_text("<d><![CDATA[  <b>bold</b> text  ]]></d>")
        assert element_text(root) == "<b>bold</b> text"

    def test_nested_markup_concatenated(self) -> None:
        root = parse_kml_text("<d>Hello <b>big</b> world</d>")
        assert element_text(root) == "Hello big world"
