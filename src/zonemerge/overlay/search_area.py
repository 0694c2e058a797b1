"""Search area and unified coverage over the circles of a ShapeSet.

The search area is where the point of interest can still be: the common
intersection of the inside circles, minus every outside circle. Coverage is
the union of the visible circles carrying one flag, used to draw a single
fill instead of stacked translucent circles.
"""

from __future__ import annotations

from dataclasses import dataclass

from shapely.geometry import MultiPolygon
from shapely.ops import unary_union

from zonemerge.config import settings
from zonemerge.geometry import MultiPolygonCoords, geometry_to_multipolygon, polygonal
from zonemerge.shapes import Circle, ShapeSet


@dataclass(frozen=True)
class SearchArea:
    """Remaining search area.

    Attributes:
        rings: MultiPolygon coordinates of the area.
        source_ids: Ids of the inside circles that shaped it, ascending.
    """

    rings: MultiPolygonCoords
    source_ids: tuple[int, ...]


def compute_search_area(
    shape_set: ShapeSet,
    steps: int | None = None,
) -> SearchArea | None:
    """Intersect the inside circles and subtract the outside ones.

    Inside circles are folded in list order; a circle that does not touch
    the running intersection is skipped rather than emptying it. Every
    outside circle is then subtracted.

    Returns:
        The search area, or None if there are no inside circles or nothing
        is left after subtraction.
    """
    steps = steps if steps is not None else settings.CIRCLE_STEPS
    inside = [circle for circle in shape_set.circles if circle.inside]
    outside = [circle for circle in shape_set.circles if not circle.inside]
    if not inside:
        return None

    area = inside[0].to_geometry(steps)
    sources = [inside[0].id]
    for circle in inside[1:]:
        candidate = polygonal(area.intersection(circle.to_geometry(steps)))
        if not candidate.is_empty:
            area = candidate
            sources.append(circle.id)

    for circle in outside:
        area = polygonal(area.difference(circle.to_geometry(steps)))
        if area.is_empty:
            return None

    return SearchArea(
        rings=geometry_to_multipolygon(area),
        source_ids=tuple(sorted(sources)),
    )


def coverage(
    shape_set: ShapeSet,
    inside: bool,
    steps: int | None = None,
) -> MultiPolygonCoords:
    """Union of the visible circles whose flag equals `inside`.

    Returns:
        MultiPolygon coordinates, or [] if no circle qualifies.
    """
    steps = steps if steps is not None else settings.CIRCLE_STEPS
    circles: list[Circle] = [
        circle
        for circle in shape_set.circles
        if circle.visible and circle.inside == inside
    ]
    if not circles:
        return []
    merged = unary_union([circle.to_geometry(steps) for circle in circles])
    return geometry_to_multipolygon(merged)


def area_of(rings: MultiPolygonCoords) -> float:
    """Planar area of MultiPolygon coordinates in square degrees."""
    if not rings:
        return 0.0
    return MultiPolygon(
        [(polygon[0], polygon[1:]) for polygon in rings if polygon]
    ).area
