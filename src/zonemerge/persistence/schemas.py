"""Pydantic models of the persisted map document.

The document is a GeoJSON FeatureCollection with an extra `metadata` member.
Field names, nesting and (lng, lat) coordinate order are part of the saved
format and must not change.
"""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

from zonemerge.geometry import MultiPolygonCoords

FEATURE_COLLECTION = "FeatureCollection"

FeatureType = Literal["circle", "polygon", "marker"]
FEATURE_TYPES: tuple[str, ...] = ("circle", "polygon", "marker")


class PointGeometry(BaseModel):
    """GeoJSON Point; coordinates are (lng, lat)."""

    type: Literal["Point"] = "Point"
    coordinates: tuple[float, float]


class MultiPolygonGeometry(BaseModel):
    """GeoJSON MultiPolygon."""

    type: Literal["MultiPolygon"] = "MultiPolygon"
    coordinates: MultiPolygonCoords


Geometry = Annotated[PointGeometry | MultiPolygonGeometry, Field(discriminator="type")]


class FeatureProperties(BaseModel):
    """Feature properties.

    `type` is kept as a plain string so an unknown value can be reported
    against its feature index rather than as a generic validation error.
    """

    type: str
    id: int = Field(..., ge=1)
    inside: bool | None = None
    radius: float | None = Field(default=None, gt=0.0)
    visible: bool | None = None


class Feature(BaseModel):
    type: Literal["Feature"] = "Feature"
    properties: FeatureProperties
    geometry: Geometry


class MapMetadata(BaseModel):
    """Scalar metadata stored next to the features."""

    model_config = ConfigDict(populate_by_name=True)

    circle_count: int = Field(default=0, ge=0, alias="circleCount")
    earned_reward: bool = Field(default=False, alias="earnedReward")


class FeatureCollectionDocument(BaseModel):
    """Top-level persisted document."""

    type: Literal["FeatureCollection"] = FEATURE_COLLECTION
    metadata: MapMetadata = Field(default_factory=MapMetadata)
    features: list[Feature] = Field(default_factory=list)
