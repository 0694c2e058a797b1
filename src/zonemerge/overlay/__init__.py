"""Overlay engine for zonemerge.

Key Components:
    - OverlayResolver: union / intersection / difference of one pair,
      chosen by the pair's inside flags
    - ConvergenceDriver: single-merge scan over a ShapeSet
    - Search area and coverage helpers over the circles of a set

Example:
    from zonemerge.overlay import ConvergenceDriver

    driver = ConvergenceDriver()
    while driver.converge_one_step(shape_set).changed:
        pass  # redraw here to animate each merge
"""

from zonemerge.overlay.driver import (
    ConvergenceDriver,
    ConvergenceLimitError,
    ConvergenceStep,
    converge,
    iter_convergence,
)
from zonemerge.overlay.resolver import (
    NO_OVERLAP,
    Operation,
    OverlayResolver,
    Resolution,
)
from zonemerge.overlay.search_area import (
    SearchArea,
    area_of,
    compute_search_area,
    coverage,
)

__all__ = [
    "NO_OVERLAP",
    "ConvergenceDriver",
    "ConvergenceLimitError",
    "ConvergenceStep",
    "Operation",
    "OverlayResolver",
    "Resolution",
    "SearchArea",
    "area_of",
    "compute_search_area",
    "converge",
    "coverage",
    "iter_convergence",
]
