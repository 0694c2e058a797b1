"""Unit tests for MapStore."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from zonemerge.persistence import DecodeError, MapStore
from zonemerge.shapes import LatLng, ShapeAllocator, ShapeSet


@pytest.fixture
def store(tmp_path: Path) -> MapStore:
    return MapStore(tmp_path / "maps" / "map.geojson")


@pytest.fixture
def one_circle() -> ShapeSet:
    allocator = ShapeAllocator(ShapeSet())
    allocator.add_circle(LatLng(lat=50.0, lng=4.0), 75.0, inside=False)
    return allocator.shape_set


class TestMapStore:
    """Tests for MapStore save/load."""

    def test_save_then_load(self, store: MapStore, one_circle: ShapeSet) -> None:
        assert not store.exists()

        store.save(one_circle, circle_count=4, earned_reward=True)

        assert store.exists()
        decoded = store.load()
        assert decoded.shape_set.model_dump() == one_circle.model_dump()
        assert decoded.circle_count == 4
        assert decoded.earned_reward is True

    def test_saved_file_is_feature_collection(
        self, store: MapStore, one_circle: ShapeSet
    ) -> None:
        store.save(one_circle)

        document = json.loads(store.path.read_text(encoding="utf-8"))
        assert document["type"] == "FeatureCollection"
        assert document["features"][0]["properties"]["type"] == "circle"

    def test_failed_save_keeps_previous_file(
        self,
        store: MapStore,
        one_circle: ShapeSet,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        store.save(one_circle)
        before = store.path.read_text(encoding="utf-8")

        def _boom(*args: object, **kwargs: object) -> None:
            raise OSError("disk full")

        monkeypatch.setattr("zonemerge.persistence.store.json.dump", _boom)
        with pytest.raises(OSError, match="disk full"):
            store.save(ShapeSet())

        assert store.path.read_text(encoding="utf-8") == before
        assert list(store.path.parent.iterdir()) == [store.path]

    def test_load_missing_file(self, store: MapStore) -> None:
        with pytest.raises(FileNotFoundError):
            store.load()

    def test_load_malformed_file(self, store: MapStore) -> None:
        store.path.parent.mkdir(parents=True)
        store.path.write_text('{"type": "Topology"}', encoding="utf-8")

        with pytest.raises(DecodeError, match="FeatureCollection"):
            store.load()
