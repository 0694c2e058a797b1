"""Shared pytest fixtures and configuration."""

import math
from collections.abc import Callable, Iterator

import pytest

from zonemerge.config import Settings
from zonemerge.geometry import METERS_PER_DEGREE
from zonemerge.overlay import ConvergenceDriver, OverlayResolver
from zonemerge.shapes import Circle, LatLng, ShapeAllocator, ShapeSet
from zonemerge.utils.logging import clear_correlation_context, configure_logging

# Default map center of the original deployment (Leuven, BE)
ORIGIN = LatLng(lat=50.8466429249097, lng=4.7266830956645745)


def offset_east(origin: LatLng, meters: float) -> LatLng:
    """Return the point `meters` east of `origin` on the same parallel."""
    d_lng = meters / (METERS_PER_DEGREE * math.cos(math.radians(origin.lat)))
    return LatLng(lat=origin.lat, lng=origin.lng + d_lng)


@pytest.fixture(autouse=True)
def reset_logging_context() -> Iterator[None]:
    """Reset correlation context between tests."""
    clear_correlation_context()
    yield
    clear_correlation_context()


@pytest.fixture
def test_settings() -> Settings:
    """Create a Settings instance with test-safe defaults."""
    return Settings(
        _env_file=None,  # type: ignore[call-arg]
        LOG_LEVEL="DEBUG",
        LOG_FORMAT="console",
    )


@pytest.fixture
def configure_test_logging() -> Iterator[None]:
    """Configure logging for tests with console output."""
    configure_logging(level="DEBUG", log_format="console")
    yield


@pytest.fixture
def origin() -> LatLng:
    """Reference position used to place test circles."""
    return ORIGIN


@pytest.fixture
def east_of() -> Callable[[LatLng, float], LatLng]:
    """Function placing a point a number of meters east of another."""
    return offset_east


@pytest.fixture
def shape_set() -> ShapeSet:
    """An empty shape set."""
    return ShapeSet()


@pytest.fixture
def allocator(shape_set: ShapeSet) -> ShapeAllocator:
    """Allocator over the `shape_set` fixture."""
    return ShapeAllocator(shape_set)


@pytest.fixture
def resolver() -> OverlayResolver:
    """Resolver with production defaults (64 steps)."""
    return OverlayResolver(steps=64, area_epsilon=1e-14)


@pytest.fixture
def driver(resolver: OverlayResolver) -> ConvergenceDriver:
    """Driver using the `resolver` fixture."""
    return ConvergenceDriver(resolver)


@pytest.fixture
def make_circle() -> Callable[..., Circle]:
    """Factory for circles placed relative to ORIGIN."""

    def _make(
        shape_id: int,
        *,
        inside: bool,
        radius: float = 50.0,
        east: float = 0.0,
        visible: bool = True,
    ) -> Circle:
        return Circle(
            id=shape_id,
            inside=inside,
            visible=visible,
            center=offset_east(ORIGIN, east),
            radius=radius,
        )

    return _make
