"""Geometry validation utilities for zonemerge.

This module provides structural checks for ring coordinates before they are
handed to shapely. A circle or region is never empty by construction, so a
failure here marks corrupted input rather than an expected path.
"""

from __future__ import annotations

import math
from collections.abc import Sequence

# A closed ring needs three distinct vertices plus the closing point.
MIN_RING_POSITIONS = 4


class GeometryError(Exception):
    """Raised when a geometry operation receives degenerate input.

    Attributes:
        shape_id: Id of the offending shape, when known.
        message: Description of the failure.
    """

    def __init__(self, message: str, *, shape_id: int | None = None) -> None:
        self.shape_id = shape_id
        self.message = message
        if shape_id is None:
            super().__init__(message)
        else:
            super().__init__(f"{message} (shape_id={shape_id})")


class RingValidator:
    """Validator for ring and multipolygon coordinate arrays.

    The validator is stateless and operates purely on the inputs provided
    to each method.
    """

    def validate_ring(
        self,
        ring: Sequence[Sequence[float]],
        *,
        strict: bool = True,
    ) -> bool:
        """Validate a single linear ring of (lng, lat) positions.

        Checks that:
        1. the ring has at least MIN_RING_POSITIONS positions
        2. every position is a finite (lng, lat) pair
        3. the first and last positions are identical (closed)

        Args:
            ring: The ring to validate.
            strict: If True, raise GeometryError on failure.
                If False, return False instead.

        Returns:
            True if the ring is valid.

        Raises:
            GeometryError: If strict=True and the ring is degenerate.
        """
        problem = self._ring_problem(ring)
        if problem is not None and strict:
            raise GeometryError(problem)
        return problem is None

    def validate_multipolygon(
        self,
        polygons: Sequence[Sequence[Sequence[Sequence[float]]]],
        *,
        shape_id: int | None = None,
    ) -> None:
        """Validate MultiPolygon coordinates (polygons of rings).

        Args:
            polygons: Sequence of polygons, each a shell followed by holes.
            shape_id: Id reported in the error, if any.

        Raises:
            GeometryError: If there are no polygons, a polygon has no shell,
                or any ring is degenerate.
        """
        if not polygons:
            raise GeometryError("MultiPolygon has no polygons", shape_id=shape_id)
        for index, polygon in enumerate(polygons):
            if not polygon:
                raise GeometryError(
                    f"Polygon {index} has no rings", shape_id=shape_id
                )
            for ring in polygon:
                problem = self._ring_problem(ring)
                if problem is not None:
                    raise GeometryError(
                        f"Polygon {index}: {problem}", shape_id=shape_id
                    )

    def is_valid_ring(self, ring: Sequence[Sequence[float]]) -> bool:
        """Check a ring without raising.

        Convenience method that wraps validate_ring() with strict=False.
        """
        return self.validate_ring(ring, strict=False)

    @staticmethod
    def _ring_problem(ring: Sequence[Sequence[float]]) -> str | None:
        if len(ring) < MIN_RING_POSITIONS:
            return (
                f"Ring has {len(ring)} positions, "
                f"at least {MIN_RING_POSITIONS} required"
            )
        for position in ring:
            if len(position) != 2:
                return f"Position {tuple(position)} is not a (lng, lat) pair"
            if not all(math.isfinite(value) for value in position):
                return f"Position {tuple(position)} is not finite"
        if tuple(ring[0]) != tuple(ring[-1]):
            return "Ring is not closed"
        return None
