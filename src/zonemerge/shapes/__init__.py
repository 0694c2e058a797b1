"""Shape model for zonemerge.

Circle and Region form a tagged union (`Shape`) discriminated by `kind`;
ShapeSet aggregates circles, regions and markers; ShapeAllocator hands out
ids and applies direct edits.
"""

from zonemerge.shapes.allocator import ShapeAllocator
from zonemerge.shapes.types import (
    Circle,
    LatLng,
    Marker,
    Region,
    Shape,
    ShapeSet,
    shape_bounds,
)

__all__ = [
    "Circle",
    "LatLng",
    "Marker",
    "Region",
    "Shape",
    "ShapeAllocator",
    "ShapeSet",
    "shape_bounds",
]
