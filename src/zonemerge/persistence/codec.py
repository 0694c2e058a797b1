"""Encoding and decoding of ShapeSets to the persisted document format.

Features are written circles first, then regions, then markers. Decoding
always builds a fresh ShapeSet, so a failed load never disturbs the set the
caller already holds.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from pydantic import ValidationError

from zonemerge.geometry import GeometryError, RingValidator
from zonemerge.persistence.exceptions import DecodeError
from zonemerge.persistence.schemas import (
    FEATURE_COLLECTION,
    FEATURE_TYPES,
    Feature,
    FeatureCollectionDocument,
    FeatureProperties,
    MapMetadata,
    MultiPolygonGeometry,
    PointGeometry,
)
from zonemerge.shapes import Circle, LatLng, Marker, Region, ShapeSet
from zonemerge.utils.logging import get_logger

logger = get_logger(__name__)

_ring_validator = RingValidator()


@dataclass(frozen=True)
class DecodedMap:
    """A decoded document: the shapes plus their metadata."""

    shape_set: ShapeSet
    circle_count: int
    earned_reward: bool


# =============================================================================
# Encoding
# =============================================================================


def encode(
    shape_set: ShapeSet,
    circle_count: int = 0,
    earned_reward: bool = False,
) -> dict[str, Any]:
    """Serialize a ShapeSet and its metadata to a JSON-compatible dict.

    Args:
        shape_set: Shapes to serialize.
        circle_count: Total number of circles the user has placed.
        earned_reward: Whether the user has earned the reward.

    Returns:
        The FeatureCollection document.
    """
    features = [
        *(_circle_feature(circle) for circle in shape_set.circles),
        *(_region_feature(region) for region in shape_set.regions),
        *(_marker_feature(marker) for marker in shape_set.markers),
    ]
    document = FeatureCollectionDocument(
        metadata=MapMetadata(circle_count=circle_count, earned_reward=earned_reward),
        features=features,
    )
    return document.model_dump(mode="json", by_alias=True, exclude_none=True)


def encode_json(
    shape_set: ShapeSet,
    circle_count: int = 0,
    earned_reward: bool = False,
) -> str:
    """Serialize to a JSON string; see encode()."""
    return json.dumps(encode(shape_set, circle_count, earned_reward))


def _circle_feature(circle: Circle) -> Feature:
    return Feature(
        properties=FeatureProperties(
            type="circle",
            id=circle.id,
            inside=circle.inside,
            radius=circle.radius,
            visible=circle.visible,
        ),
        geometry=PointGeometry(coordinates=(circle.center.lng, circle.center.lat)),
    )


def _region_feature(region: Region) -> Feature:
    return Feature(
        properties=FeatureProperties(
            type="polygon",
            id=region.id,
            inside=region.inside,
            visible=region.visible,
        ),
        geometry=MultiPolygonGeometry(coordinates=region.rings),
    )


def _marker_feature(marker: Marker) -> Feature:
    return Feature(
        properties=FeatureProperties(type="marker", id=marker.id),
        geometry=PointGeometry(coordinates=(marker.lng, marker.lat)),
    )


# =============================================================================
# Decoding
# =============================================================================


def decode(document: Mapping[str, Any] | str | bytes) -> DecodedMap:
    """Rebuild a ShapeSet from a persisted document.

    Args:
        document: Parsed document, or its JSON text.

    Returns:
        DecodedMap with a new ShapeSet whose id high water mark is the
        largest id found, so allocation resumes above it.

    Raises:
        DecodeError: If the document is malformed.
    """
    raw = _parse(document)

    if not isinstance(raw, Mapping) or raw.get("type") != FEATURE_COLLECTION:
        raise DecodeError("Invalid GeoJSON format: expected a FeatureCollection")

    try:
        parsed = FeatureCollectionDocument.model_validate(raw)
    except ValidationError as exc:
        raise DecodeError(
            f"Invalid map document: {_first_error(exc)}",
            feature_index=_feature_index(exc),
        ) from exc

    shape_set = ShapeSet()
    seen_ids: set[int] = set()
    for index, feature in enumerate(parsed.features):
        if feature.properties.id in seen_ids:
            raise DecodeError(
                f"Duplicate id {feature.properties.id}", feature_index=index
            )
        seen_ids.add(feature.properties.id)
        _decode_feature(shape_set, feature, index)
    shape_set.id_high_water = shape_set.max_id()

    logger.debug(
        "Decoded map document",
        circles=len(shape_set.circles),
        regions=len(shape_set.regions),
        markers=len(shape_set.markers),
    )
    return DecodedMap(
        shape_set=shape_set,
        circle_count=parsed.metadata.circle_count,
        earned_reward=parsed.metadata.earned_reward,
    )


def _parse(document: Mapping[str, Any] | str | bytes) -> Any:
    if isinstance(document, str | bytes):
        try:
            return json.loads(document)
        except json.JSONDecodeError as exc:
            raise DecodeError("Invalid GeoJSON JSON string") from exc
    return document


def _decode_feature(shape_set: ShapeSet, feature: Feature, index: int) -> None:
    props = feature.properties
    geometry = feature.geometry
    visible = props.visible if props.visible is not None else True

    if props.type not in FEATURE_TYPES:
        raise DecodeError(f"Unknown feature type {props.type!r}", feature_index=index)

    try:
        if props.type == "circle":
            if not isinstance(geometry, PointGeometry):
                raise DecodeError("Circle requires Point geometry", feature_index=index)
            if props.radius is None or props.inside is None:
                raise DecodeError(
                    "Circle requires radius and inside", feature_index=index
                )
            lng, lat = geometry.coordinates
            shape_set.circles.append(
                Circle(
                    id=props.id,
                    inside=props.inside,
                    visible=visible,
                    center=LatLng(lat=lat, lng=lng),
                    radius=props.radius,
                )
            )
        elif props.type == "polygon":
            if not isinstance(geometry, MultiPolygonGeometry):
                raise DecodeError(
                    "Polygon requires MultiPolygon geometry", feature_index=index
                )
            if props.inside is None:
                raise DecodeError("Polygon requires inside", feature_index=index)
            try:
                _ring_validator.validate_multipolygon(
                    geometry.coordinates, shape_id=props.id
                )
            except GeometryError as exc:
                raise DecodeError(
                    f"Invalid polygon geometry: {exc}", feature_index=index
                ) from exc
            shape_set.regions.append(
                Region(
                    id=props.id,
                    inside=props.inside,
                    visible=visible,
                    rings=geometry.coordinates,
                )
            )
        else:
            if not isinstance(geometry, PointGeometry):
                raise DecodeError("Marker requires Point geometry", feature_index=index)
            lng, lat = geometry.coordinates
            shape_set.markers.append(Marker(id=props.id, lat=lat, lng=lng))
    except ValidationError as exc:
        raise DecodeError(
            f"Invalid {props.type} feature: {_first_error(exc)}",
            feature_index=index,
        ) from exc


def _first_error(exc: ValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return str(exc)
    first = errors[0]
    location = ".".join(str(part) for part in first["loc"])
    return f"{location}: {first['msg']}"


def _feature_index(exc: ValidationError) -> int | None:
    for error in exc.errors():
        loc = error["loc"]
        if len(loc) >= 2 and loc[0] == "features" and isinstance(loc[1], int):
            return loc[1]
    return None
