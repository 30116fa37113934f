"""Shared constants for KML parsing."""

from __future__ import annotations

# KML 2.2 namespace. Element matching is namespace-agnostic; the constant
# is used when building documents in tests and for logging.
KML_NAMESPACE = "http://www.opengis.net/kml/2.2"

# Element local names
PLACEMARK_TAG = "Placemark"
NAME_TAG = "name"
DESCRIPTION_TAG = "description"
POINT_TAG = "Point"
LINE_STRING_TAG = "LineString"
POLYGON_TAG = "Polygon"
OUTER_BOUNDARY_TAG = "outerBoundaryIs"
LINEAR_RING_TAG = "LinearRing"
MULTI_GEOMETRY_TAG = "MultiGeometry"
COORDINATES_TAG = "coordinates"

# Coordinate tuple layout: lon,lat[,alt]
LONGITUDE_INDEX = 0
LATITUDE_INDEX = 1
ALTITUDE_INDEX = 2
DEFAULT_COMPONENT = 0.0
