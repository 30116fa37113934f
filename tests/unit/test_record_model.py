"""Tests for the flat geometry record and conversion models."""

from __future__ import annotations

import pytest

from kml2csv.models import (
    ConversionRequest,
    ConversionResult,
    ConversionStatus,
    CoordinateTriple,
    GeometryKind,
    GeometryRecord,
    RecordValidationError,
    StatusUpdate,
)


class TestGeometryRecord:
    """Row-schema invariants."""

    def test_from_triple(self) -> None:
        record = GeometryRecord.from_triple(
            GeometryKind.LINE,
            CoordinateTriple(10.0, 20.0, 5.0),
            name="n",
            description="d",
            group_id=3,
            vertex_index=1,
        )
        assert (record.longitude, record.latitude, record.altitude) == (10.0, 20.0, 5.0)
        assert record.group_id == 3
        assert record.vertex_index == 1

    def test_default_altitude(self) -> None:
        assert CoordinateTriple(1.0, 2.0).altitude == 0.0

    def test_point_rejects_vertex_index(self) -> None:
        with pytest.raises(RecordValidationError, match="Point"):
            GeometryRecord(GeometryKind.POINT, "", "", 0.0, 0.0, 0.0, 0, 0)

    @pytest.mark.parametrize("kind", [GeometryKind.LINE, GeometryKind.POLYGON])
    def test_vertex_kinds_require_index(self, kind: GeometryKind) -> None:
        with pytest.raises(RecordValidationError, match="vertex_index"):
            GeometryRecord(kind, "", "", 0.0, 0.0, 0.0, 0)

    def test_negative_group_id(self) -> None:
        with pytest.raises(RecordValidationError) as exc_info:
            GeometryRecord(GeometryKind.POINT, "", "", 0.0, 0.0, 0.0, -1)
        assert exc_info.value.code == "RECORD_INVALID"

    def test_has_vertices(self) -> None:
        assert GeometryKind.POINT.has_vertices is False
        assert GeometryKind.LINE.has_vertices is True


class TestConversionModels:
    """Request, result and status models."""

    @pytest.mark.parametrize(
        ("name", "kind"),
        [("a.kml", "kml"), ("A.KMZ", "kmz"), ("a.csv", "")],
    )
    def test_source_kind(self, name: str, kind: str) -> None:
        assert ConversionRequest(name, b"").source_kind == kind

    def test_request_repr_hides_data(self) -> None:
        request = ConversionRequest("a.kml", b"secret-bytes")
        assert "secret-bytes" not in repr(request)
        assert request.size == 12

    def test_result_bytes_and_summary(self) -> None:
        result = ConversionResult("Type\nPoint", "a.csv", 1, group_count=1, encoding="utf-16")
        assert result.csv_bytes == "Type\nPoint".encode("utf-16")
        summary = result.to_dict()
        assert summary["record_count"] == 1
        assert "csv_text" not in summary

    def test_status_update_str(self) -> None:
        update = StatusUpdate("Parsing KML...", ConversionStatus.PROCESSING)
        assert str(update) == "Status: Parsing KML..."
        assert StatusUpdate("Ready to convert").status is ConversionStatus.IDLE
