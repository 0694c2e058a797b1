"""Persistence for zonemerge.

ShapeSets are saved as a GeoJSON FeatureCollection carrying circles (Point
plus radius), regions (MultiPolygon) and markers (Point), with
`circleCount` / `earnedReward` metadata.
"""

from zonemerge.persistence.codec import DecodedMap, decode, encode, encode_json
from zonemerge.persistence.exceptions import DecodeError
from zonemerge.persistence.store import MapStore

__all__ = [
    "DecodeError",
    "DecodedMap",
    "MapStore",
    "decode",
    "encode",
    "encode_json",
]
