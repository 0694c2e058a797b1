"""Boolean overlay resolution between two shapes.

The inside/outside flags of the two shapes pick the set operation:

    (outside, outside) -> union, tagged outside
    (inside,  inside)  -> intersection, tagged inside
    (inside,  outside) -> inside minus outside, tagged inside (if anything
                          is left), plus the outside shape re-emitted as is

Inside zones combine conjunctively, outside zones disjunctively, and mixed
pairs carve the inside zone down while always preserving the exclusion.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from shapely.errors import GEOSException
from shapely.geometry import MultiPolygon

from zonemerge.config import settings
from zonemerge.geometry import GeometryError, geometry_to_multipolygon, polygonal
from zonemerge.shapes import Circle, Region, ShapeAllocator
from zonemerge.utils.logging import get_logger

logger = get_logger(__name__)


class Operation(str, Enum):
    """Boolean operation applied to an overlapping pair."""

    union = "union"
    intersection = "intersection"
    difference = "difference"


@dataclass(frozen=True)
class Resolution:
    """Outcome of resolving one pair of shapes.

    Attributes:
        overlapped: False if the shapes do not overlap; nothing else is set.
        operation: The boolean operation that was applied.
        created: New regions, in id order (at most two).
        removed_ids: Ids of the two inputs, which the caller must delete.
    """

    overlapped: bool
    operation: Operation | None = None
    created: tuple[Region, ...] = ()
    removed_ids: tuple[int, ...] = ()

    @property
    def created_ids(self) -> tuple[int, ...]:
        return tuple(region.id for region in self.created)


NO_OVERLAP = Resolution(overlapped=False)


class OverlayResolver:
    """Decides and executes the boolean operation for an overlapping pair.

    The resolver never touches the ShapeSet's collections; it only reserves
    ids through the allocator. Applying the outcome is the caller's job.
    """

    __slots__ = ("_area_epsilon", "_steps")

    def __init__(
        self,
        steps: int | None = None,
        area_epsilon: float | None = None,
    ) -> None:
        """Initialize the resolver.

        Args:
            steps: Vertices per approximated circle.
                Defaults to settings.CIRCLE_STEPS.
            area_epsilon: Intersections with an area at or below this value
                (square degrees) are treated as touching, not overlapping.
                Defaults to settings.OVERLAP_AREA_EPSILON.
        """
        self._steps = steps if steps is not None else settings.CIRCLE_STEPS
        self._area_epsilon = (
            area_epsilon if area_epsilon is not None else settings.OVERLAP_AREA_EPSILON
        )

    @property
    def steps(self) -> int:
        return self._steps

    def resolve(
        self,
        a: Circle | Region,
        b: Circle | Region,
        allocator: ShapeAllocator,
    ) -> Resolution:
        """Resolve the overlap between `a` and `b`.

        Degenerate geometry is absorbed: it is logged and reported as
        NO_OVERLAP so one malformed pair never aborts a scan.

        Args:
            a: First shape.
            b: Second shape.
            allocator: Allocator of the ShapeSet the shapes belong to.

        Returns:
            NO_OVERLAP, or a Resolution describing the replacement.
        """
        try:
            return self._resolve(a, b, allocator)
        except (GeometryError, GEOSException) as exc:
            logger.warning(
                "Skipping degenerate pair",
                shape_ids=(a.id, b.id),
                error=str(exc),
            )
            return NO_OVERLAP

    def _resolve(
        self,
        a: Circle | Region,
        b: Circle | Region,
        allocator: ShapeAllocator,
    ) -> Resolution:
        geom_a = a.to_geometry(self._steps)
        geom_b = b.to_geometry(self._steps)

        overlap = polygonal(geom_a.intersection(geom_b))
        if not self._has_area(overlap):
            return NO_OVERLAP

        removed = (a.id, b.id)

        if not a.inside and not b.inside:
            (new_id,) = allocator.allocate_ids(1)
            union = Region(
                id=new_id,
                inside=False,
                rings=geometry_to_multipolygon(geom_a.union(geom_b)),
            )
            return Resolution(
                overlapped=True,
                operation=Operation.union,
                created=(union,),
                removed_ids=removed,
            )

        if a.inside and b.inside:
            (new_id,) = allocator.allocate_ids(1)
            intersection = Region(
                id=new_id,
                inside=True,
                rings=geometry_to_multipolygon(overlap),
            )
            return Resolution(
                overlapped=True,
                operation=Operation.intersection,
                created=(intersection,),
                removed_ids=removed,
            )

        if a.inside:
            inside, outside, inside_geom, outside_geom = a, b, geom_a, geom_b
        else:
            inside, outside, inside_geom, outside_geom = b, a, geom_b, geom_a

        remainder = polygonal(inside_geom.difference(outside_geom))
        has_remainder = self._has_area(remainder)

        # Inside remainder first, then the carried-over outside shape
        ids = allocator.allocate_ids(2 if has_remainder else 1)
        created: list[Region] = []
        if has_remainder:
            created.append(
                Region(
                    id=ids[0],
                    inside=True,
                    rings=geometry_to_multipolygon(remainder),
                )
            )
        else:
            logger.debug(
                "Inside shape fully covered",
                inside_id=inside.id,
                outside_id=outside.id,
            )
        created.append(
            Region(
                id=ids[-1],
                inside=False,
                rings=outside.to_multipolygon(self._steps),
            )
        )
        return Resolution(
            overlapped=True,
            operation=Operation.difference,
            created=tuple(created),
            removed_ids=removed,
        )

    def _has_area(self, geometry: MultiPolygon) -> bool:
        return not geometry.is_empty and geometry.area > self._area_epsilon
