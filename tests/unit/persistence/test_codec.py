"""Unit tests for the map document codec."""

from __future__ import annotations

import json
from typing import Any

import pytest

from zonemerge.persistence import DecodeError, decode, encode, encode_json
from zonemerge.shapes import LatLng, ShapeAllocator, ShapeSet

SQUARE = [(4.0, 50.0), (4.1, 50.0), (4.1, 50.1), (4.0, 50.1), (4.0, 50.0)]


@pytest.fixture
def populated() -> ShapeSet:
    """A set with one of each item, built through the allocator."""
    allocator = ShapeAllocator(ShapeSet())
    allocator.add_circle(LatLng(lat=50.5, lng=4.5), 120.0, inside=True)
    allocator.add_region([[SQUARE]], inside=False, visible=False)
    allocator.add_marker(50.25, 4.25)
    return allocator.shape_set


def _circle_feature(**properties: Any) -> dict[str, Any]:
    return {
        "type": "Feature",
        "properties": {"type": "circle", "id": 1, "inside": True, "radius": 10.0}
        | properties,
        "geometry": {"type": "Point", "coordinates": [4.0, 50.0]},
    }


def _document(*features: dict[str, Any]) -> dict[str, Any]:
    return {"type": "FeatureCollection", "features": list(features)}


class TestEncode:
    """Tests for encode."""

    def test_exact_document(self, populated: ShapeSet) -> None:
        document = encode(populated, circle_count=3, earned_reward=True)

        assert document == {
            "type": "FeatureCollection",
            "metadata": {"circleCount": 3, "earnedReward": True},
            "features": [
                {
                    "type": "Feature",
                    "properties": {
                        "type": "circle",
                        "id": 1,
                        "inside": True,
                        "radius": 120.0,
                        "visible": True,
                    },
                    "geometry": {"type": "Point", "coordinates": [4.5, 50.5]},
                },
                {
                    "type": "Feature",
                    "properties": {
                        "type": "polygon",
                        "id": 2,
                        "inside": False,
                        "visible": False,
                    },
                    "geometry": {
                        "type": "MultiPolygon",
                        "coordinates": [[[list(p) for p in SQUARE]]],
                    },
                },
                {
                    "type": "Feature",
                    "properties": {"type": "marker", "id": 3},
                    "geometry": {"type": "Point", "coordinates": [4.25, 50.25]},
                },
            ],
        }

    def test_empty_set(self, shape_set: ShapeSet) -> None:
        assert encode(shape_set) == {
            "type": "FeatureCollection",
            "metadata": {"circleCount": 0, "earnedReward": False},
            "features": [],
        }

    def test_encode_json_is_parseable(self, populated: ShapeSet) -> None:
        assert json.loads(encode_json(populated)) == encode(populated)


class TestDecode:
    """Tests for decode."""

    def test_round_trip(self, populated: ShapeSet) -> None:
        decoded = decode(encode_json(populated, circle_count=7, earned_reward=True))

        assert decoded.shape_set.model_dump() == populated.model_dump()
        assert decoded.circle_count == 7
        assert decoded.earned_reward is True

    def test_returns_new_set(self, populated: ShapeSet) -> None:
        decoded = decode(encode(populated))
        assert decoded.shape_set is not populated

    def test_defaults_when_optional_fields_missing(self) -> None:
        decoded = decode(_document(_circle_feature()))

        (circle,) = decoded.shape_set.circles
        assert circle.visible is True
        assert circle.center == LatLng(lat=50.0, lng=4.0)
        assert decoded.circle_count == 0
        assert decoded.earned_reward is False

    def test_high_water_resumes_above_max_id(self) -> None:
        decoded = decode(_document(_circle_feature(id=41)))

        assert decoded.shape_set.id_high_water == 41
        assert ShapeAllocator(decoded.shape_set).next_id() == 42

    def test_accepts_bytes(self) -> None:
        payload = json.dumps(_document(_circle_feature())).encode()
        assert len(decode(payload).shape_set.circles) == 1

    def test_invalid_json(self) -> None:
        with pytest.raises(DecodeError, match="Invalid GeoJSON JSON string"):
            decode("{not json")

    @pytest.mark.parametrize(
        "document",
        [
            {"type": "Feature"},
            {"features": []},
            [],
        ],
    )
    def test_not_a_feature_collection(self, document: Any) -> None:
        with pytest.raises(DecodeError, match="expected a FeatureCollection"):
            decode(document)

    def test_unknown_feature_type(self) -> None:
        with pytest.raises(DecodeError, match="Unknown feature type") as exc_info:
            decode(_document(_circle_feature(), _circle_feature(type="ellipse", id=2)))
        assert exc_info.value.feature_index == 1

    def test_circle_without_radius(self) -> None:
        feature = _circle_feature()
        del feature["properties"]["radius"]
        with pytest.raises(DecodeError, match="radius and inside"):
            decode(_document(feature))

    def test_circle_with_polygon_geometry(self) -> None:
        feature = _circle_feature()
        feature["geometry"] = {"type": "MultiPolygon", "coordinates": [[SQUARE]]}
        with pytest.raises(DecodeError, match="Point geometry"):
            decode(_document(feature))

    def test_polygon_with_point_geometry(self) -> None:
        feature = _circle_feature(type="polygon")
        with pytest.raises(DecodeError, match="MultiPolygon geometry"):
            decode(_document(feature))

    def test_polygon_without_inside(self) -> None:
        feature = {
            "type": "Feature",
            "properties": {"type": "polygon", "id": 1},
            "geometry": {"type": "MultiPolygon", "coordinates": [[SQUARE]]},
        }
        with pytest.raises(DecodeError, match="Polygon requires inside"):
            decode(_document(feature))

    @pytest.mark.parametrize(
        ("coordinates", "reason"),
        [
            ([], "no polygons"),
            ([[SQUARE[:3]]], "Ring has 3 positions"),
            ([[SQUARE[:-1] + [(4.05, 50.05)]]], "not closed"),
        ],
    )
    def test_degenerate_polygon_geometry(
        self, coordinates: list[Any], reason: str
    ) -> None:
        feature = {
            "type": "Feature",
            "properties": {"type": "polygon", "id": 2, "inside": True},
            "geometry": {"type": "MultiPolygon", "coordinates": coordinates},
        }
        with pytest.raises(DecodeError, match=reason) as exc_info:
            decode(_document(_circle_feature(), feature))
        assert exc_info.value.feature_index == 1
        assert "shape_id=2" in str(exc_info.value)

    def test_zero_id_rejected(self) -> None:
        with pytest.raises(DecodeError, match="id") as exc_info:
            decode(_document(_circle_feature(id=0)))
        assert exc_info.value.feature_index == 0

    def test_schema_error_reports_feature_index(self) -> None:
        with pytest.raises(DecodeError, match="radius") as exc_info:
            decode(_document(_circle_feature(), _circle_feature(id=2, radius=-1.0)))
        assert exc_info.value.feature_index == 1
        assert "(feature=1)" in str(exc_info.value)

    def test_unsupported_geometry_type(self) -> None:
        feature = _circle_feature()
        feature["geometry"] = {"type": "LineString", "coordinates": [[0, 0], [1, 1]]}
        with pytest.raises(DecodeError) as exc_info:
            decode(_document(feature))
        assert exc_info.value.feature_index == 0

    def test_out_of_range_center(self) -> None:
        feature = _circle_feature()
        feature["geometry"]["coordinates"] = [4.0, 95.0]
        with pytest.raises(DecodeError, match="Invalid circle feature"):
            decode(_document(feature))

    def test_duplicate_ids(self) -> None:
        with pytest.raises(DecodeError, match="Duplicate id 1") as exc_info:
            decode(_document(_circle_feature(), _circle_feature()))
        assert exc_info.value.feature_index == 1
