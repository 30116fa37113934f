"""Shared pytest fixtures for the kml2csv test suite."""

from __future__ import annotations

import io
import zipfile
from pathlib import Path

import pytest

# ---------------------------------------------------------------------------
# Path fixtures
# ---------------------------------------------------------------------------

TESTS_DIR = Path(__file__).parent
DATA_DIR = TESTS_DIR / "data"
EDGE_CASES_DIR = DATA_DIR / "edge_cases"

KML_NAMESPACE = "http://www.opengis.net/kml/2.2"


@pytest.fixture()
def data_dir() -> Path:
    """Return the path to the test data directory."""
    return DATA_DIR


@pytest.fixture()
def edge_cases_dir() -> Path:
    """Return the path to the edge-cases test data directory."""
    return EDGE_CASES_DIR


# ---------------------------------------------------------------------------
# Sample KML file fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def mixed_kml(data_dir: Path) -> Path:
    """Point, LineString (3 vertices) and Polygon with a hole, in that order."""
    return data_dir / "01_mixed_geometries.kml"


@pytest.fixture()
def multigeometry_kml(data_dir: Path) -> Path:
    """One Placemark whose geometry is a MultiGeometry (2 points, line, polygon)."""
    return data_dir / "02_multigeometry.kml"


@pytest.fixture()
def no_namespace_kml(data_dir: Path) -> Path:
    """A KML document without the KML 2.2 namespace."""
    return data_dir / "03_no_namespace.kml"


# ---------------------------------------------------------------------------
# Edge-case KML file fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def not_xml_kml(edge_cases_dir: Path) -> Path:
    """Path to a file that is not valid XML."""
    return edge_cases_dir / "11_malformed_not_xml.kml"


@pytest.fixture()
def unclosed_tags_kml(edge_cases_dir: Path) -> Path:
    """Path to a KML with an unclosed element."""
    return edge_cases_dir / "12_malformed_unclosed_tags.kml"


@pytest.fixture()
def empty_kml(edge_cases_dir: Path) -> Path:
    """Path to a valid KML with no placemarks."""
    return edge_cases_dir / "13_empty_no_features.kml"


@pytest.fixture()
def no_geometry_kml(edge_cases_dir: Path) -> Path:
    """Path to a KML whose placemarks carry no usable geometry."""
    return edge_cases_dir / "14_placemarks_without_geometry.kml"


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------


def build_kml(*placemarks: str, namespace: str | None = KML_NAMESPACE) -> str:
    """Wrap placemark XML fragments in a KML document."""
    ns = f' xmlns="{namespace}"' if namespace else ""
    body = "\n".join(placemarks)
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        f"<kml{ns}><Document>{body}</Document></kml>"
    )


def build_kmz(members: dict[str, str | bytes]) -> bytes:
    """Build an in-memory zip archive from ``{member_name: content}``."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as archive:
        for name, content in members.items():
            archive.writestr(name, content)
    return buffer.getvalue()


@pytest.fixture()
def kml_document():
    """Factory fixture: ``kml_document(*placemark_fragments, namespace=...)``."""
    return build_kml


@pytest.fixture()
def kmz_archive():
    """Factory fixture: ``kmz_archive({"doc.kml": text, ...})`` → bytes."""
    return build_kmz
