"""Shape models for zonemerge.

Circles and regions form a tagged union discriminated by the `kind` field.
Both carry an id, an inside/outside flag and a visibility flag; only the
geometry payload differs. Markers share the id space but never take part in
overlay operations.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Annotated, Literal, Self

from pydantic import BaseModel, Field
from shapely.geometry import MultiPolygon

from zonemerge.geometry import (
    DEFAULT_CIRCLE_STEPS,
    MultiPolygonCoords,
    Ring,
    circle_to_polygon,
    multipolygon_bounds,
    multipolygon_to_geometry,
    ring_to_geometry,
)


class LatLng(BaseModel, frozen=True):
    """A geographic position in degrees.

    Attributes:
        lat: Latitude in [-90, 90].
        lng: Longitude in [-180, 180].
    """

    lat: float = Field(..., ge=-90.0, le=90.0, description="Latitude in degrees")
    lng: float = Field(..., ge=-180.0, le=180.0, description="Longitude in degrees")

    def to_tuple(self) -> tuple[float, float]:
        """Convert to (lat, lng) tuple."""
        return (self.lat, self.lng)

    @classmethod
    def from_tuple(cls, coord: tuple[float, float]) -> Self:
        """Create LatLng from (lat, lng) tuple."""
        return cls(lat=coord[0], lng=coord[1])


class Circle(BaseModel):
    """A circular zone placed by the user.

    Attributes:
        id: Identifier, unique within its ShapeSet.
        inside: True if the zone marks the area of interest.
        visible: Whether the zone is rendered.
        center: Circle center.
        radius: Radius in meters (> 0).
    """

    kind: Literal["circle"] = "circle"
    id: int = Field(..., ge=1)
    inside: bool
    visible: bool = True
    center: LatLng
    radius: float = Field(..., gt=0.0, description="Radius in meters")

    def to_ring(self, steps: int = DEFAULT_CIRCLE_STEPS) -> Ring:
        """Approximate this circle as a closed (lng, lat) ring."""
        return circle_to_polygon(self.center.to_tuple(), self.radius, steps)

    def to_multipolygon(self, steps: int = DEFAULT_CIRCLE_STEPS) -> MultiPolygonCoords:
        """Approximate this circle as MultiPolygon coordinates."""
        return [[self.to_ring(steps)]]

    def to_geometry(self, steps: int = DEFAULT_CIRCLE_STEPS) -> MultiPolygon:
        """Approximate this circle as a shapely geometry."""
        return ring_to_geometry(self.to_ring(steps), shape_id=self.id)


class Region(BaseModel):
    """A zone produced by a boolean operation.

    Attributes:
        id: Identifier, unique within its ShapeSet.
        inside: True if the zone marks the area of interest.
        visible: Whether the zone is rendered.
        rings: MultiPolygon coordinates; each polygon is a shell followed
            by its holes, each ring a closed list of (lng, lat) positions.
    """

    kind: Literal["region"] = "region"
    id: int = Field(..., ge=1)
    inside: bool
    visible: bool = True
    rings: MultiPolygonCoords

    def to_multipolygon(self, steps: int = DEFAULT_CIRCLE_STEPS) -> MultiPolygonCoords:
        """Return the stored coordinates (steps is accepted for symmetry)."""
        _ = steps
        return self.rings

    def to_geometry(self, steps: int = DEFAULT_CIRCLE_STEPS) -> MultiPolygon:
        """Convert the stored coordinates to a shapely geometry."""
        _ = steps
        return multipolygon_to_geometry(self.rings, shape_id=self.id)


Shape = Annotated[Circle | Region, Field(discriminator="kind")]


class Marker(BaseModel):
    """A point annotation; carried through persistence only."""

    id: int = Field(..., ge=1)
    lat: float = Field(..., ge=-90.0, le=90.0)
    lng: float = Field(..., ge=-180.0, le=180.0)


class ShapeSet(BaseModel):
    """The aggregate operated on by the overlay engine.

    Attributes:
        circles: Circles in placement order.
        regions: Regions in creation order.
        markers: Point annotations.
        id_high_water: Highest id ever handed out for this set. Ids at or
            below it are never allocated again, even after deletion.
    """

    circles: list[Circle] = Field(default_factory=list)
    regions: list[Region] = Field(default_factory=list)
    markers: list[Marker] = Field(default_factory=list)
    id_high_water: int = Field(default=0, ge=0)

    def shapes(self) -> Iterator[Circle | Region]:
        """Iterate over circles, then regions."""
        yield from self.circles
        yield from self.regions

    def ids(self) -> list[int]:
        """Return every id in use, markers included."""
        return [
            *(circle.id for circle in self.circles),
            *(region.id for region in self.regions),
            *(marker.id for marker in self.markers),
        ]

    def max_id(self) -> int:
        """Return the largest id in use, or 0 for an empty set."""
        return max(self.ids(), default=0)

    @property
    def is_empty(self) -> bool:
        """True if the set holds no circles, regions or markers."""
        return not (self.circles or self.regions or self.markers)


def shape_bounds(
    shape: Circle | Region,
    steps: int = DEFAULT_CIRCLE_STEPS,
) -> tuple[float, float, float, float]:
    """Return (min_lng, min_lat, max_lng, max_lat) of a shape.

    Used by collaborators to fit a viewport onto a shape.
    """
    return multipolygon_bounds(shape.to_multipolygon(steps))
