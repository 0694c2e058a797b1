"""Geometry module for zonemerge.

This package provides the metric/degree conversions, the circle
approximation, coordinate validation and shapely conversions used by the
overlay engine.

Key Components:
    - Primitives: circle_to_polygon, zoom_for_radius and shared constants
    - Validators: ring checks and GeometryError
    - Transforms: ring coordinates <-> shapely geometries

Example:
    from zonemerge.geometry import circle_to_polygon, ring_to_geometry

    ring = circle_to_polygon((50.85, 4.73), radius=250.0)
    area = ring_to_geometry(ring).area  # square degrees
"""

from zonemerge.geometry.primitives import (
    DEFAULT_CIRCLE_STEPS,
    METERS_PER_DEGREE,
    MultiPolygonCoords,
    PolygonCoords,
    Position,
    Ring,
    circle_to_polygon,
    meters_to_degrees,
    zoom_for_radius,
)
from zonemerge.geometry.transforms import (
    geometry_to_multipolygon,
    multipolygon_bounds,
    multipolygon_to_geometry,
    polygonal,
    ring_to_geometry,
)
from zonemerge.geometry.validators import GeometryError, RingValidator

__all__ = [
    "DEFAULT_CIRCLE_STEPS",
    "METERS_PER_DEGREE",
    "GeometryError",
    "MultiPolygonCoords",
    "PolygonCoords",
    "Position",
    "Ring",
    "RingValidator",
    "circle_to_polygon",
    "geometry_to_multipolygon",
    "meters_to_degrees",
    "multipolygon_bounds",
    "multipolygon_to_geometry",
    "polygonal",
    "ring_to_geometry",
    "zoom_for_radius",
]
