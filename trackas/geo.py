"""Venue points: decoding stored locations and measuring distances.

Stored venue locations come in three shapes:

- ``SRID=4326;POINT(<lon> <lat>)`` (what the scheduling flow writes)
- a GeoJSON-like mapping ``{"coordinates": [lon, lat]}``
- a plain mapping ``{"lat": .., "lng": ..}``

Anything else decodes to ``None``. A class that is still being set up may
have no venue at all, so a missing point is never an error here.
"""
from __future__ import annotations

import json
import logging
import math
import re
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from haversine import Unit, haversine

logger = logging.getLogger(__name__)

EARTH_RADIUS_METERS = 6_371_000.0
DEFAULT_SRID = 4326

_NUMBER = r"[-+]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][-+]?\d+)?"
_WKT_POINT = re.compile(
    rf"^SRID\s*=\s*(?P<srid>\d+)\s*;\s*POINT\s*\(\s*(?P<lon>{_NUMBER})\s+(?P<lat>{_NUMBER})\s*\)$",
    re.IGNORECASE,
)


@dataclass(frozen=True)
class GeoPoint:
    latitude: float
    longitude: float

    def swapped(self) -> "GeoPoint":
        return GeoPoint(latitude=self.longitude, longitude=self.latitude)

    def can_swap(self) -> bool:
        # the longitude becomes the latitude, so it has to fit in [-90, 90]
        return -90.0 <= self.longitude <= 90.0

    def as_tuple(self) -> tuple[float, float]:
        return (self.latitude, self.longitude)


class PointEncoding(str, Enum):
    SRID_WKT = "SRID-WKT"
    GEOJSON = "GeoJSON"
    PLAIN_OBJECT = "plain-object"


@dataclass(frozen=True)
class VenueLocation:
    point: GeoPoint
    encoding: PointEncoding


def make_point(latitude: Any, longitude: Any) -> Optional[GeoPoint]:
    """Build a GeoPoint, or None if either value is not a usable coordinate."""
    lat = _as_float(latitude)
    lng = _as_float(longitude)
    if lat is None or lng is None:
        return None
    if not (-90.0 <= lat <= 90.0 and -180.0 <= lng <= 180.0):
        return None
    return GeoPoint(latitude=lat, longitude=lng)


def _as_float(value: Any) -> Optional[float]:
    if isinstance(value, bool) or value is None:
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number


def _decode_wkt(text: str) -> Optional[VenueLocation]:
    match = _WKT_POINT.match(text)
    if not match:
        return None
    point = make_point(match.group("lat"), match.group("lon"))
    return VenueLocation(point, PointEncoding.SRID_WKT) if point else None


def _decode_mapping(raw: Mapping) -> Optional[VenueLocation]:
    if "coordinates" in raw:
        coords = raw["coordinates"]
        if isinstance(coords, (str, bytes)) or not isinstance(coords, (list, tuple)) or len(coords) < 2:
            return None
        point = make_point(coords[1], coords[0])
        return VenueLocation(point, PointEncoding.GEOJSON) if point else None

    if "lat" in raw and "lng" in raw:
        point = make_point(raw["lat"], raw["lng"])
        return VenueLocation(point, PointEncoding.PLAIN_OBJECT) if point else None

    return None


def decode_location(raw: Any) -> Optional[VenueLocation]:
    """Decode a stored venue location into a tagged canonical point."""
    if raw is None:
        return None

    if isinstance(raw, str):
        text = raw.strip()
        if not text:
            return None
        if text.upper().startswith("SRID"):
            return _decode_wkt(text)
        if not text.startswith("{"):
            return None
        try:
            raw = json.loads(text)
        except ValueError:
            return None

    if isinstance(raw, Mapping):
        return _decode_mapping(raw)

    return None


def parse_point(raw: Any) -> Optional[GeoPoint]:
    location = decode_location(raw)
    if location is None:
        logger.debug("Stored location %r could not be parsed", raw)
        return None
    return location.point


def encode_point(point: GeoPoint, srid: int = DEFAULT_SRID) -> str:
    return f"SRID={srid};POINT({point.longitude} {point.latitude})"


def distance_meters(a: GeoPoint, b: GeoPoint) -> float:
    """Great-circle distance in meters on a sphere of radius 6,371 km."""
    # Unit.RADIANS gives the central angle, so the radius stays ours
    return haversine(a.as_tuple(), b.as_tuple(), unit=Unit.RADIANS) * EARTH_RADIUS_METERS
