"""Identifier allocation and direct mutators for a ShapeSet.

Ids are strictly increasing and never reused: every allocation starts above
both the largest id currently in the set and the set's high water mark.
A single `allocate_ids` call reserves all ids a merge outcome needs.
"""

from __future__ import annotations

from zonemerge.geometry import MultiPolygonCoords
from zonemerge.shapes.types import Circle, LatLng, Marker, Region, ShapeSet


class ShapeAllocator:
    """Allocates ids for, and mutates, a caller-owned ShapeSet.

    The allocator holds no state of its own; everything lives on the set,
    so several allocators over the same set agree with each other.

    Example:
        >>> shape_set = ShapeSet()
        >>> allocator = ShapeAllocator(shape_set)
        >>> allocator.add_circle(LatLng(lat=50.0, lng=4.0), 100.0, inside=True)
        1
        >>> allocator.next_id()
        2
    """

    __slots__ = ("_shape_set",)

    def __init__(self, shape_set: ShapeSet) -> None:
        self._shape_set = shape_set

    @property
    def shape_set(self) -> ShapeSet:
        return self._shape_set

    # ------------------------------------------------------------------
    # Ids
    # ------------------------------------------------------------------

    def next_id(self) -> int:
        """Return the id the next allocation would start at, without allocating."""
        return max(self._shape_set.id_high_water, self._shape_set.max_id()) + 1

    def allocate_ids(self, n: int) -> list[int]:
        """Reserve `n` consecutive ids.

        Args:
            n: Number of ids to reserve (>= 0).

        Returns:
            The reserved ids in increasing order.

        Raises:
            ValueError: If n is negative.
        """
        if n < 0:
            raise ValueError(f"Cannot allocate a negative number of ids: {n}")
        if n == 0:
            return []
        start = self.next_id()
        ids = list(range(start, start + n))
        self._shape_set.id_high_water = ids[-1]
        return ids

    # ------------------------------------------------------------------
    # Creation
    # ------------------------------------------------------------------

    def add_circle(
        self,
        center: LatLng,
        radius: float,
        inside: bool,
        *,
        visible: bool = True,
    ) -> int:
        """Place a new circle and return its id."""
        circle = Circle(
            id=self.next_id(),
            center=center,
            radius=radius,
            inside=inside,
            visible=visible,
        )
        # Reserve only once validation has passed
        self.allocate_ids(1)
        self._shape_set.circles.append(circle)
        return circle.id

    def add_region(
        self,
        rings: MultiPolygonCoords,
        inside: bool,
        *,
        visible: bool = True,
    ) -> int:
        """Add a region with the given coordinates and return its id."""
        region = Region(id=self.next_id(), rings=rings, inside=inside, visible=visible)
        self.allocate_ids(1)
        self._shape_set.regions.append(region)
        return region.id

    def add_marker(self, lat: float, lng: float) -> int:
        """Add a point marker and return its id."""
        marker = Marker(id=self.next_id(), lat=lat, lng=lng)
        self.allocate_ids(1)
        self._shape_set.markers.append(marker)
        return marker.id

    # ------------------------------------------------------------------
    # Lookup and removal
    # ------------------------------------------------------------------

    def find_by_id(self, shape_id: int) -> Circle | Region | None:
        """Find a circle or region by id."""
        for shape in self._shape_set.shapes():
            if shape.id == shape_id:
                return shape
        return None

    def find_marker(self, marker_id: int) -> Marker | None:
        """Find a marker by id."""
        for marker in self._shape_set.markers:
            if marker.id == marker_id:
                return marker
        return None

    def remove_by_id(self, shape_id: int) -> Circle | Region | Marker | None:
        """Remove whatever carries `shape_id` and return it.

        Returns:
            The removed item, or None if no item has that id.
        """
        for collection in (
            self._shape_set.circles,
            self._shape_set.regions,
            self._shape_set.markers,
        ):
            for index, item in enumerate(collection):
                if item.id == shape_id:
                    return collection.pop(index)
        return None

    def clear(self) -> None:
        """Remove every circle, region and marker.

        The high water mark is kept so cleared ids are not handed out again.
        """
        self._shape_set.id_high_water = self.next_id() - 1
        self._shape_set.circles.clear()
        self._shape_set.regions.clear()
        self._shape_set.markers.clear()

    # ------------------------------------------------------------------
    # Flags
    # ------------------------------------------------------------------

    def toggle_visible(self, shape_id: int) -> Circle | Region:
        """Flip the visibility flag in place.

        Raises:
            KeyError: If no circle or region has that id.
        """
        shape = self._require(shape_id)
        shape.visible = not shape.visible
        return shape

    def toggle_inside(self, shape_id: int) -> Circle | Region:
        """Flip the inside flag in place.

        Raises:
            KeyError: If no circle or region has that id.
        """
        shape = self._require(shape_id)
        shape.inside = not shape.inside
        return shape

    def set_inside(self, shape_id: int, inside: bool) -> Circle | Region:
        """Set the inside flag in place.

        Raises:
            KeyError: If no circle or region has that id.
        """
        shape = self._require(shape_id)
        shape.inside = inside
        return shape

    def _require(self, shape_id: int) -> Circle | Region:
        shape = self.find_by_id(shape_id)
        if shape is None:
            raise KeyError(f"No shape with id {shape_id}")
        return shape
