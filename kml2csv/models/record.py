"""Flat geometry record model.

A ``GeometryRecord`` is one output row: either a single point, or one
vertex of a line or polygon outer ring. Records belonging to the same
geometry instance share a ``group_id`` so that consumers can rebuild
shapes from the flat table.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import NamedTuple

from kml2csv.core.exceptions import ContractError


class RecordValidationError(ContractError):
    """Raised when a record violates the row-schema invariants."""

    default_stage = "models"
    default_code = "RECORD_INVALID"


class CoordinateTriple(NamedTuple):
    """A single ``(longitude, latitude, altitude)`` position."""

    longitude: float
    latitude: float
    altitude: float = 0.0


class GeometryKind(enum.Enum):
    """Geometry kinds emitted as the CSV ``Type`` column."""

    POINT = "Point"
    LINE = "Line"
    POLYGON = "Polygon"

    @property
    def has_vertices(self) -> bool:
        """Whether records of this kind carry a vertex index."""
        return self is not GeometryKind.POINT


@dataclass(frozen=True, slots=True)
class GeometryRecord:
    """One flattened geometry row.

    Attributes:
        kind: Geometry kind of the owning instance.
        name: Placemark name (may be empty).
        description: Placemark description (may be empty).
        latitude: Latitude in decimal degrees.
        longitude: Longitude in decimal degrees.
        altitude: Altitude in metres (0 when absent in the source).
        group_id: Identifier shared by every record of one geometry instance.
        vertex_index: Zero-based vertex position for lines and polygons;
            ``None`` for points.
    """

    kind: GeometryKind
    name: str
    description: str
    latitude: float
    longitude: float
    altitude: float
    group_id: int
    vertex_index: int | None = None

    def __post_init__(self) -> None:
        if self.group_id < 0:
            msg = f"group_id must be >= 0, got {self.group_id}"
            raise RecordValidationError(msg)
        if self.kind.has_vertices:
            if self.vertex_index is None or self.vertex_index < 0:
                msg = (
                    f"{self.kind.value} record requires a vertex_index >= 0, "
                    f"got {self.vertex_index!r}"
                )
                raise RecordValidationError(msg)
        elif self.vertex_index is not None:
            msg = f"Point record must not carry a vertex_index, got {self.vertex_index}"
            raise RecordValidationError(msg)

    @classmethod
    def from_triple(
        cls,
        kind: GeometryKind,
        triple: CoordinateTriple,
        *,
        name: str,
        description: str,
        group_id: int,
        vertex_index: int | None = None,
    ) -> GeometryRecord:
        """Build a record from a tokenized coordinate triple."""
        return cls(
            kind=kind,
            name=name,
            description=description,
            latitude=triple.latitude,
            longitude=triple.longitude,
            altitude=triple.altitude,
            group_id=group_id,
            vertex_index=vertex_index,
        )
