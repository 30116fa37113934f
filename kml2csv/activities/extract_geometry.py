"""Placemark geometry extraction.

Walks every ``<Placemark>`` of a parsed KML tree in document order and
flattens its geometries into ``GeometryRecord`` rows.

Dispatch per placemark, in fixed order (all that apply are processed):

1. **Point** — the first ``Point/coordinates`` under the placemark; one
   record from its first coordinate.
2. **Line** — every ``LineString/coordinates``; one record per vertex.
3. **Polygon** — every ``Polygon/outerBoundaryIs/LinearRing/coordinates``;
   one record per vertex. Inner boundaries (holes) are not extracted.
4. **MultiGeometry** — steps 1–3 again, scoped to the placemark's first
   ``<MultiGeometry>``, where every point emits a record. Geometries
   already emitted by steps 1–3 are emitted again; row counts match the
   source vertex counts of both passes.

Element matching uses local names, so KML with the 2.2 namespace, a
legacy namespace, or none at all behaves the same.

Group ids are issued by a ``TraversalContext`` threaded through every
extraction function. An id is only consumed when a geometry instance
produced at least one record.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from lxml import etree

from kml2csv.activities.parse_kml import element_text, tokenize_coordinates
from kml2csv.activities.parse_kml._constants import (
    COORDINATES_TAG,
    DESCRIPTION_TAG,
    LINE_STRING_TAG,
    LINEAR_RING_TAG,
    MULTI_GEOMETRY_TAG,
    NAME_TAG,
    OUTER_BOUNDARY_TAG,
    PLACEMARK_TAG,
    POINT_TAG,
    POLYGON_TAG,
)
from kml2csv.core.exceptions import PermanentError
from kml2csv.models.record import GeometryKind, GeometryRecord

if TYPE_CHECKING:
    from lxml.etree import _Element

logger = logging.getLogger("kml2csv.activities.extract_geometry")


class NoGeometryFoundError(PermanentError):
    """Raised when a document yields zero geometry records."""

    default_stage = "extract_geometry"
    default_code = "NO_GEOMETRY_FOUND"
    default_message = "No placemarks found in file"


# ---------------------------------------------------------------------------
# Element queries
# ---------------------------------------------------------------------------


def _step(local_name: str, *, axis: str = "descendant") -> str:
    return f"{axis}::*[local-name()='{local_name}']"


def _path(*local_names: str) -> str:
    return "/".join(_step(name) for name in local_names)


_PLACEMARKS = etree.XPath(_step(PLACEMARK_TAG, axis="descendant-or-self"))
_NAME = etree.XPath(_step(NAME_TAG, axis="child"))
_DESCRIPTION = etree.XPath(_step(DESCRIPTION_TAG, axis="child"))
_POINT_COORDINATES = etree.XPath(_path(POINT_TAG, COORDINATES_TAG))
_LINE_COORDINATES = etree.XPath(_path(LINE_STRING_TAG, COORDINATES_TAG))
_POLYGON_OUTER_COORDINATES = etree.XPath(
    _path(POLYGON_TAG, OUTER_BOUNDARY_TAG, LINEAR_RING_TAG, COORDINATES_TAG)
)
_MULTI_GEOMETRY = etree.XPath(_step(MULTI_GEOMETRY_TAG))


# ---------------------------------------------------------------------------
# Traversal state
# ---------------------------------------------------------------------------


@dataclass(slots=True)
class TraversalContext:
    """Running group-id counter for one document traversal.

    Attributes:
        next_group_id: The id the next committed geometry instance receives.
        records: Records emitted so far, in traversal order.
    """

    next_group_id: int = 0
    records: list[GeometryRecord] = field(default_factory=list)

    def commit(self) -> int:
        """Issue the next group id."""
        group_id = self.next_group_id
        self.next_group_id += 1
        return group_id

    @property
    def group_count(self) -> int:
        """Number of geometry instances committed so far."""
        return self.next_group_id


@dataclass(frozen=True, slots=True)
class _Labels:
    name: str
    description: str


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def extract_records(
    root: _Element,
    *,
    context: TraversalContext | None = None,
) -> list[GeometryRecord]:
    """Flatten every placemark under *root* into geometry records.

    Args:
        root: Parsed KML root element (from ``parse_kml_text``).
        context: Optional traversal context; a fresh one is used when
            omitted. Passing one lets callers read ``group_count``.

    Returns:
        Records in traversal order.

    Raises:
        NoGeometryFoundError: If no placemark produced a record.
    """
    if context is None:
        context = TraversalContext()

    placemarks = _PLACEMARKS(root)
    for placemark in placemarks:
        extract_placemark(placemark, context)

    if not context.records:
        logger.info("No geometry found | placemarks=%d", len(placemarks))
        raise NoGeometryFoundError

    logger.info(
        "Extracted geometry | placemarks=%d | records=%d | groups=%d",
        len(placemarks),
        len(context.records),
        context.group_count,
    )
    return context.records


def extract_placemark(placemark: _Element, context: TraversalContext) -> list[GeometryRecord]:
    """Extract the records of a single placemark.

    Records are appended to ``context.records`` and also returned.
    """
    labels = _Labels(
        name=element_text(_first(_NAME(placemark))),
        description=element_text(_first(_DESCRIPTION(placemark))),
    )
    start = len(context.records)

    _extract_scope(placemark, labels, context, first_point_only=True)

    multi_geometry = _first(_MULTI_GEOMETRY(placemark))
    if multi_geometry is not None:
        _extract_scope(multi_geometry, labels, context, first_point_only=False)

    emitted = context.records[start:]
    logger.debug(
        "Placemark extracted | name=%s | records=%d | next_group_id=%d",
        labels.name,
        len(emitted),
        context.next_group_id,
    )
    return emitted


# ---------------------------------------------------------------------------
# Per-kind extraction
# ---------------------------------------------------------------------------


def _extract_scope(
    scope: _Element,
    labels: _Labels,
    context: TraversalContext,
    *,
    first_point_only: bool,
) -> None:
    """Run point, line and polygon extraction over *scope*, in that order."""
    point_nodes = _POINT_COORDINATES(scope)
    if first_point_only:
        point_nodes = point_nodes[:1]
    for node in point_nodes:
        _extract_point(node, labels, context)

    for node in _LINE_COORDINATES(scope):
        _extract_vertices(node, GeometryKind.LINE, labels, context)

    for node in _POLYGON_OUTER_COORDINATES(scope):
        _extract_vertices(node, GeometryKind.POLYGON, labels, context)


def _extract_point(node: _Element, labels: _Labels, context: TraversalContext) -> None:
    """Emit one Point record from the first coordinate of *node*."""
    triples = tokenize_coordinates(element_text(node))
    if not triples:
        return
    context.records.append(
        GeometryRecord.from_triple(
            GeometryKind.POINT,
            triples[0],
            name=labels.name,
            description=labels.description,
            group_id=context.commit(),
        )
    )


def _extract_vertices(
    node: _Element,
    kind: GeometryKind,
    labels: _Labels,
    context: TraversalContext,
) -> None:
    """Emit one record per coordinate of a line or polygon outer ring."""
    triples = tokenize_coordinates(element_text(node))
    if not triples:
        return
    group_id = context.commit()
    context.records.extend(
        GeometryRecord.from_triple(
            kind,
            triple,
            name=labels.name,
            description=labels.description,
            group_id=group_id,
            vertex_index=index,
        )
        for index, triple in enumerate(triples)
    )


def _first(elements: list[_Element]) -> _Element | None:
    return elements[0] if elements else None
