"""Tests for the unified exception taxonomy.

Validates:
- ConversionError hierarchy and structured attributes
- Category classification (validation, transient, permanent, contract)
- ``to_error_dict()`` produces stable payload keys
- Every stage exception carries its default stage, code and message
"""

from __future__ import annotations

from typing import ClassVar

import pytest

from kml2csv.activities.extract_geometry import NoGeometryFoundError
from kml2csv.activities.parse_kml import KmlParseError, MalformedXmlError
from kml2csv.activities.read_source import (
    InvalidArchiveError,
    MissingKmlMemberError,
    SourceReadError,
    SourceTooLargeError,
    UnrecognizedExtensionError,
)
from kml2csv.core.config import ConfigValidationError
from kml2csv.core.exceptions import (
    ContractError,
    ConversionError,
    PermanentError,
    TransientError,
    ValidationError,
)
from kml2csv.models.record import RecordValidationError
from kml2csv.orchestrators.conversion import ConversionInProgressError
from kml2csv.sinks.base import SinkError

REQUIRED_KEYS = {"category", "code", "stage", "message", "retryable", "correlation_id"}


class TestConversionErrorBase:
    """ConversionError base class behaviour."""

    def test_default_attributes(self) -> None:
        err = ConversionError("boom")
        assert (err.message, err.stage, err.code) == ("boom", "", "")
        assert err.retryable is False
        assert err.correlation_id == ""

    def test_str_is_message(self) -> None:
        assert str(ConversionError("human-readable error")) == "human-readable error"

    def test_to_error_dict(self) -> None:
        err = ConversionError("x", stage="s", code="C", retryable=True, correlation_id="id")
        assert err.to_error_dict() == {
            "category": "transient",
            "code": "C",
            "stage": "s",
            "message": "x",
            "retryable": True,
            "correlation_id": "id",
        }

    def test_dynamic_category_from_retryable(self) -> None:
        assert ConversionError("x", retryable=True).category == "transient"
        assert ConversionError("x").category == "permanent"


class TestCategoryBases:
    """Category base classes set correct defaults."""

    @pytest.mark.parametrize(
        ("cls", "category", "retryable"),
        [
            (ValidationError, "validation", False),
            (TransientError, "transient", True),
            (PermanentError, "permanent", False),
            (ContractError, "contract", False),
        ],
    )
    def test_defaults(self, cls: type[ConversionError], category: str, retryable: bool) -> None:
        err = cls("x")
        assert err.category == category
        assert err.retryable is retryable


class TestStageExceptions:
    """Every stage exception has a default stage, code and category."""

    CASES: ClassVar[list[tuple[ConversionError, str, str, str]]] = [
        (UnrecognizedExtensionError(), "select", "UNRECOGNIZED_EXTENSION", "validation"),
        (SourceTooLargeError("big"), "read_source", "SOURCE_TOO_LARGE", "validation"),
        (SourceReadError("io"), "read_source", "SOURCE_READ_FAILED", "transient"),
        (MissingKmlMemberError(), "read_source", "KMZ_MISSING_KML", "permanent"),
        (InvalidArchiveError("zip"), "read_source", "KMZ_INVALID_ARCHIVE", "permanent"),
        (KmlParseError("x"), "parse_kml", "KML_PARSE_FAILED", "validation"),
        (MalformedXmlError(), "parse_kml", "KML_MALFORMED_XML", "validation"),
        (NoGeometryFoundError(), "extract_geometry", "NO_GEOMETRY_FOUND", "permanent"),
        (SinkError("local", "x"), "save", "SINK_WRITE_FAILED", "transient"),
        (ConversionInProgressError(), "orchestrator", "CONVERSION_IN_PROGRESS", "validation"),
        (RecordValidationError("x"), "models", "RECORD_INVALID", "contract"),
        (ConfigValidationError("K", 1, "bad"), "config", "CONFIG_VALIDATION_FAILED", "permanent"),
    ]

    @pytest.mark.parametrize(("err", "stage", "code", "category"), CASES)
    def test_stage_code_category(
        self, err: ConversionError, stage: str, code: str, category: str
    ) -> None:
        assert err.stage == stage
        assert err.code == code
        assert err.category == category
        assert set(err.to_error_dict()) == REQUIRED_KEYS

    def test_user_facing_default_messages(self) -> None:
        assert str(UnrecognizedExtensionError()) == "Please select a .kmz or .kml file"
        assert str(MissingKmlMemberError()) == "No KML file found inside KMZ"
        assert str(MalformedXmlError()) == "Invalid KML format"
        assert str(NoGeometryFoundError()) == "No placemarks found in file"

    def test_explicit_message_overrides_default(self) -> None:
        assert MalformedXmlError("Invalid KML format: line 3").message.endswith("line 3")

    def test_sink_error_prefixes_sink_name(self) -> None:
        err = SinkError("blob", "403")
        assert err.sink == "blob"
        assert err.message == "[blob] 403"

    def test_malformed_xml_is_parse_error(self) -> None:
        assert issubclass(MalformedXmlError, KmlParseError)
