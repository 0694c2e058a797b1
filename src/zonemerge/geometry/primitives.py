"""Geometry primitives for zonemerge.

Metric-to-degree conversion and the circle approximation used by every
overlay operation. This is a flat-earth approximation: longitude offsets are
scaled by cos(latitude) to account for meridian convergence and latitude
offsets use a constant meters-per-degree. Callers accept bounded error at
large radii and high latitudes.

All ring coordinates are (longitude, latitude) pairs, matching GeoJSON.
"""

from __future__ import annotations

import math

from zonemerge.geometry.validators import GeometryError

Position = tuple[float, float]
Ring = list[Position]
PolygonCoords = list[Ring]
MultiPolygonCoords = list[PolygonCoords]

METERS_PER_DEGREE = 111320.0
EARTH_CIRCUMFERENCE_METERS = 40075000.0
TILE_SIZE_PIXELS = 256

DEFAULT_CIRCLE_STEPS = 64

# Zoom fitting: the circle diameter should span this many screen pixels
TARGET_PIXEL_DIAMETER = 400
MIN_ZOOM = 1
MAX_ZOOM = 19

# cos(latitude) below this is treated as a pole
_MIN_LATITUDE_COSINE = 1e-12


def meters_to_degrees(meters: float, latitude: float) -> tuple[float, float]:
    """Convert a metric distance to (longitude, latitude) degree offsets.

    Args:
        meters: Distance in meters.
        latitude: Latitude in degrees where the offset is applied.

    Returns:
        (d_lng, d_lat) in degrees.

    Raises:
        GeometryError: At the poles, where a longitude offset is undefined.
    """
    cos_lat = math.cos(math.radians(latitude))
    if abs(cos_lat) < _MIN_LATITUDE_COSINE:
        raise GeometryError(f"Cannot convert meters to degrees at latitude {latitude}")
    return (meters / (METERS_PER_DEGREE * cos_lat), meters / METERS_PER_DEGREE)


def circle_to_polygon(
    center: tuple[float, float],
    radius: float,
    steps: int = DEFAULT_CIRCLE_STEPS,
) -> Ring:
    """Approximate a circle as a closed ring.

    Samples the circle at `steps` equally spaced angles starting east of the
    center and counter-clockwise, then repeats the first point so the ring
    has `steps + 1` positions.

    Args:
        center: (lat, lng) of the circle center in degrees.
        radius: Radius in meters (> 0).
        steps: Number of distinct vertices (>= 3).

    Returns:
        Closed ring of (lng, lat) positions.

    Raises:
        ValueError: If radius is not positive or steps < 3.
        GeometryError: If the center is on a pole.

    Example:
        >>> ring = circle_to_polygon((50.0, 4.0), 100.0)
        >>> len(ring), ring[0] == ring[-1]
        (65, True)
    """
    if radius <= 0:
        raise ValueError(f"radius must be positive, got {radius}")
    if steps < 3:
        raise ValueError(f"steps must be at least 3, got {steps}")

    lat, lng = center
    d_lng, d_lat = meters_to_degrees(radius, lat)

    coords: Ring = []
    for i in range(steps):
        angle = (i / steps) * 2 * math.pi
        coords.append((lng + d_lng * math.cos(angle), lat + d_lat * math.sin(angle)))

    # Close the ring
    coords.append(coords[0])
    return coords


def zoom_for_radius(radius_meters: float) -> int:
    """Pick a slippy-map zoom level that fits a circle on screen.

    Solves `meters_per_pixel(zoom) = circumference / 256 / 2**zoom` so that
    the circle diameter covers TARGET_PIXEL_DIAMETER pixels, rounds half up,
    and clamps to [MIN_ZOOM, MAX_ZOOM].

    Args:
        radius_meters: Circle radius in meters (> 0).

    Returns:
        Integer zoom level.

    Raises:
        ValueError: If radius_meters is not positive.
    """
    if radius_meters <= 0:
        raise ValueError(f"radius_meters must be positive, got {radius_meters}")

    meters_per_pixel_zoom0 = EARTH_CIRCUMFERENCE_METERS / TILE_SIZE_PIXELS
    diameter = radius_meters * 2
    zoom = math.log2(meters_per_pixel_zoom0 * TARGET_PIXEL_DIAMETER / diameter)
    return max(MIN_ZOOM, min(MAX_ZOOM, math.floor(zoom + 0.5)))
