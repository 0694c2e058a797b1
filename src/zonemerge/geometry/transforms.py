"""Conversions between ring coordinates and shapely geometries.

Shapes store plain GeoJSON-style coordinate arrays; boolean operations run on
shapely geometries. These helpers are the only place the two representations
meet. Output polygons are oriented with counter-clockwise shells and
clockwise holes.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

import shapely
from shapely.geometry import GeometryCollection, MultiPolygon, Polygon
from shapely.geometry.base import BaseGeometry
from shapely.geometry.polygon import orient

from zonemerge.geometry.primitives import MultiPolygonCoords, PolygonCoords, Ring
from zonemerge.geometry.validators import GeometryError, RingValidator

_validator = RingValidator()


def ring_to_geometry(ring: Ring, *, shape_id: int | None = None) -> MultiPolygon:
    """Convert a single closed ring (e.g. an approximated circle) to geometry."""
    return multipolygon_to_geometry([[ring]], shape_id=shape_id)


def multipolygon_to_geometry(
    polygons: MultiPolygonCoords,
    *,
    shape_id: int | None = None,
) -> MultiPolygon:
    """Convert MultiPolygon coordinates to a valid shapely MultiPolygon.

    Self-intersecting input is repaired with `shapely.make_valid`, keeping
    only its polygonal parts.

    Args:
        polygons: Polygons as [shell, *holes] ring lists.
        shape_id: Id reported in errors.

    Returns:
        A valid, non-empty MultiPolygon.

    Raises:
        GeometryError: If the coordinates are degenerate or repair leaves
            nothing polygonal.
    """
    _validator.validate_multipolygon(polygons, shape_id=shape_id)

    parts = [Polygon(polygon[0], polygon[1:]) for polygon in polygons]
    geometry: BaseGeometry = MultiPolygon(parts)
    if not geometry.is_valid:
        geometry = shapely.make_valid(geometry)

    result = polygonal(geometry)
    if result.is_empty:
        raise GeometryError("Geometry has no polygonal area", shape_id=shape_id)
    return result


def polygonal(geometry: BaseGeometry) -> MultiPolygon:
    """Keep only the polygonal parts of a geometry.

    Boolean operations may return lines or points where shapes merely touch;
    those carry no area and are dropped.
    """
    if geometry.is_empty:
        return MultiPolygon()
    if isinstance(geometry, Polygon):
        return MultiPolygon([geometry])
    if isinstance(geometry, MultiPolygon):
        return geometry
    if isinstance(geometry, GeometryCollection):
        parts: list[Polygon] = []
        for part in geometry.geoms:
            parts.extend(polygonal(part).geoms)
        return MultiPolygon(parts)
    return MultiPolygon()


def geometry_to_multipolygon(geometry: BaseGeometry) -> MultiPolygonCoords:
    """Convert a shapely geometry to MultiPolygon coordinates.

    Non-polygonal parts are dropped; an empty geometry gives `[]`.
    """
    coords: MultiPolygonCoords = []
    for part in polygonal(geometry).geoms:
        if part.is_empty:
            continue
        oriented = orient(part, sign=1.0)
        polygon: PolygonCoords = [_ring_coords(oriented.exterior.coords)]
        polygon.extend(_ring_coords(hole.coords) for hole in oriented.interiors)
        coords.append(polygon)
    return coords


def multipolygon_bounds(
    polygons: MultiPolygonCoords,
) -> tuple[float, float, float, float]:
    """Return (min_lng, min_lat, max_lng, max_lat) over all shell positions.

    Raises:
        GeometryError: If there are no positions.
    """
    lngs = [lng for polygon in polygons if polygon for lng, _ in polygon[0]]
    lats = [lat for polygon in polygons if polygon for _, lat in polygon[0]]
    if not lngs:
        raise GeometryError("Cannot compute bounds of an empty geometry")
    return (min(lngs), min(lats), max(lngs), max(lats))


def _ring_coords(coords: Iterable[Sequence[float]]) -> Ring:
    return [(float(position[0]), float(position[1])) for position in coords]
