from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from .admission import DEFAULT_THRESHOLD_METERS, AdmissionDecision, decide
from .disambiguation import EffectiveVenuePoint, maybe_correct
from .geo import GeoPoint, distance_meters, make_point


@dataclass
class RegistrationSession:
    """State of one student's registration attempt for one class.

    Venue lookup and device sampling can land in either order; every call to
    :meth:`evaluate` works with whatever has arrived so far.
    """

    course_id: str
    threshold_meters: float = DEFAULT_THRESHOLD_METERS
    auto_swap: bool = True
    venue: Optional[EffectiveVenuePoint] = None
    device: Optional[GeoPoint] = None

    def resolve_venue(self, stored: Optional[GeoPoint], fallback: Optional[GeoPoint] = None) -> None:
        # Once chosen the venue is the baseline for the rest of the session.
        if self.venue is not None:
            return
        point = stored or fallback
        if point is not None:
            self.venue = EffectiveVenuePoint(point=point)

    def observe(self, sample: GeoPoint) -> AdmissionDecision:
        self.device = sample
        return self.evaluate()

    def evaluate(self) -> AdmissionDecision:
        if self.venue is None or self.device is None:
            return decide(None, self.threshold_meters)
        self.venue = maybe_correct(self.venue, self.device, auto_swap=self.auto_swap)
        return decide(distance_meters(self.device, self.venue.point), self.threshold_meters)

    def to_dict(self) -> dict[str, Any]:
        return {
            "course_id": self.course_id,
            "threshold_meters": self.threshold_meters,
            "auto_swap": self.auto_swap,
            "venue": _point_to_dict(self.venue.point) if self.venue else None,
            "venue_swapped": bool(self.venue and self.venue.swapped),
            "device": _point_to_dict(self.device) if self.device else None,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RegistrationSession":
        venue_point = _point_from_dict(data.get("venue"))
        venue = None
        if venue_point is not None:
            venue = EffectiveVenuePoint(point=venue_point, swapped=bool(data.get("venue_swapped")))
        return cls(
            course_id=str(data["course_id"]),
            threshold_meters=float(data.get("threshold_meters", DEFAULT_THRESHOLD_METERS)),
            auto_swap=bool(data.get("auto_swap", True)),
            venue=venue,
            device=_point_from_dict(data.get("device")),
        )


def _point_to_dict(point: GeoPoint) -> dict[str, float]:
    return {"lat": point.latitude, "lng": point.longitude}


def _point_from_dict(data: Optional[dict]) -> Optional[GeoPoint]:
    if not data:
        return None
    return make_point(data.get("lat"), data.get("lng"))
