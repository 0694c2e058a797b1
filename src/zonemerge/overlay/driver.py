"""Convergence driver: at most one merge per invocation.

Each call to `converge_one_step` scans pairs in a fixed priority order,

    1. circle x circle
    2. region x region
    3. circle x region

and applies the first overlap it finds. Callers re-invoke after every change
to the set until a step reports `changed=False`; the driver itself keeps no
state between calls. `iter_convergence` and `converge` are thin loops for
callers that do not need to react to each intermediate merge.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from itertools import combinations, product

from zonemerge.config import settings
from zonemerge.overlay.resolver import OverlayResolver, Resolution
from zonemerge.shapes import Circle, Region, ShapeAllocator, ShapeSet
from zonemerge.utils.logging import get_logger, set_correlation_context

logger = get_logger(__name__)


class ConvergenceLimitError(RuntimeError):
    """Raised when converge() has not reached a fixed point within max_steps."""

    def __init__(self, max_steps: int) -> None:
        self.max_steps = max_steps
        super().__init__(f"Shape set did not converge within {max_steps} steps")


@dataclass(frozen=True)
class ConvergenceStep:
    """Result of one driver invocation.

    Attributes:
        changed: True if a merge was applied.
        shape_set: The (mutated) set that was scanned.
        resolution: The applied merge, or None when nothing changed.
    """

    changed: bool
    shape_set: ShapeSet
    resolution: Resolution | None = None


class ConvergenceDriver:
    """Finds the first overlapping pair and replaces it with its resolution."""

    __slots__ = ("_resolver",)

    def __init__(self, resolver: OverlayResolver | None = None) -> None:
        """Initialize the driver.

        Args:
            resolver: Resolver to use. Creates a default one if not provided.
        """
        self._resolver = resolver or OverlayResolver()

    @property
    def resolver(self) -> OverlayResolver:
        return self._resolver

    def converge_one_step(self, shape_set: ShapeSet) -> ConvergenceStep:
        """Perform at most one merge on `shape_set`.

        Args:
            shape_set: The set to scan; modified in place when a merge applies.

        Returns:
            ConvergenceStep with changed=False if no pair overlaps.
        """
        allocator = ShapeAllocator(shape_set)

        for a, b in self._candidate_pairs(shape_set):
            resolution = self._resolver.resolve(a, b, allocator)
            if resolution.overlapped:
                self._apply(shape_set, allocator, resolution)
                return ConvergenceStep(
                    changed=True,
                    shape_set=shape_set,
                    resolution=resolution,
                )

        return ConvergenceStep(changed=False, shape_set=shape_set)

    @staticmethod
    def _candidate_pairs(
        shape_set: ShapeSet,
    ) -> Iterator[tuple[Circle | Region, Circle | Region]]:
        # Snapshot the lists; the generator is abandoned after the first merge
        circles = list(shape_set.circles)
        regions = list(shape_set.regions)
        yield from combinations(circles, 2)
        yield from combinations(regions, 2)
        yield from product(circles, regions)

    @staticmethod
    def _apply(
        shape_set: ShapeSet,
        allocator: ShapeAllocator,
        resolution: Resolution,
    ) -> None:
        for shape_id in resolution.removed_ids:
            allocator.remove_by_id(shape_id)
        shape_set.regions.extend(resolution.created)

        operation = resolution.operation.value if resolution.operation else None
        logger.info(
            "Merged overlapping shapes",
            operation=operation,
            removed_ids=list(resolution.removed_ids),
            created_ids=list(resolution.created_ids),
        )


def iter_convergence(
    shape_set: ShapeSet,
    driver: ConvergenceDriver | None = None,
    max_steps: int | None = None,
) -> Iterator[ConvergenceStep]:
    """Yield every merging step until the set converges.

    Useful for callers that observe or animate each intermediate merge.

    Args:
        shape_set: The set to converge, modified in place.
        driver: Driver to use. Creates a default one if not provided.
        max_steps: Maximum merges before giving up (None for no limit).

    Yields:
        Each ConvergenceStep with changed=True.

    Raises:
        ConvergenceLimitError: If more than max_steps merges would be needed.
            The check past the limit applies a merge when one is pending, so
            the set already holds max_steps + 1 merges when this is raised.
    """
    driver = driver or ConvergenceDriver()
    step_number = 0
    while True:
        set_correlation_context(step=step_number + 1)
        if max_steps is not None and step_number >= max_steps:
            # One more step tells a limit hit apart from an exact fit
            if driver.converge_one_step(shape_set).changed:
                raise ConvergenceLimitError(max_steps)
            return
        step = driver.converge_one_step(shape_set)
        if not step.changed:
            return
        step_number += 1
        yield step


def converge(
    shape_set: ShapeSet,
    driver: ConvergenceDriver | None = None,
    max_steps: int | None = None,
) -> int:
    """Converge `shape_set` to a fixed point and return the number of merges.

    Args:
        shape_set: The set to converge, modified in place.
        driver: Driver to use. Creates a default one if not provided.
        max_steps: Maximum merges. Defaults to settings.MAX_CONVERGENCE_STEPS.

    Raises:
        ConvergenceLimitError: If the set has not converged within max_steps.
            The set then holds one merge beyond the limit; see
            iter_convergence().
    """
    limit = max_steps if max_steps is not None else settings.MAX_CONVERGENCE_STEPS
    merges = 0
    for _ in iter_convergence(shape_set, driver=driver, max_steps=limit):
        merges += 1
    logger.debug("Shape set converged", merges=merges)
    return merges
