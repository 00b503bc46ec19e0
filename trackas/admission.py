from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .exceptions import InvalidThreshold

DEFAULT_THRESHOLD_METERS = 20.0
MIN_THRESHOLD_METERS = 1.0
MAX_THRESHOLD_METERS = 500.0


class VerificationStatus(str, Enum):
    VERIFIED = "verified"
    OUT_OF_RANGE = "out-of-range"


@dataclass(frozen=True)
class AdmissionDecision:
    """Verdict for one registration attempt.

    An undetermined decision (venue or device position missing) has neither a
    distance nor a verdict. It blocks registration but is not a deny.
    """

    distance_meters: Optional[float]
    within_threshold: Optional[bool]
    threshold_meters: float

    @property
    def undetermined(self) -> bool:
        return self.distance_meters is None

    @property
    def admitted(self) -> bool:
        return self.within_threshold is True


def decide(distance_meters: Optional[float], threshold_meters: float) -> AdmissionDecision:
    """Compare a distance to the threshold.

    The threshold is used as given; callers validate it with
    :func:`validate_threshold` (accepted range 1 to 500 meters).
    """
    if distance_meters is None:
        return AdmissionDecision(distance_meters=None, within_threshold=None, threshold_meters=threshold_meters)
    return AdmissionDecision(
        distance_meters=distance_meters,
        within_threshold=distance_meters <= threshold_meters,
        threshold_meters=threshold_meters,
    )


def validate_threshold(value) -> float:
    try:
        threshold = float(value)
    except (TypeError, ValueError):
        raise InvalidThreshold(f"Threshold must be a number of meters, got {value!r}")
    if not MIN_THRESHOLD_METERS <= threshold <= MAX_THRESHOLD_METERS:
        raise InvalidThreshold(
            f"Threshold must be between {MIN_THRESHOLD_METERS:g} and {MAX_THRESHOLD_METERS:g} meters, got {threshold:g}"
        )
    return threshold


def verification_status(decision: AdmissionDecision, policy_threshold_meters: Optional[float] = None) -> VerificationStatus:
    """Status persisted with the attendance record.

    With no policy threshold the status follows the threshold the attempt was
    admitted against.
    """
    if decision.undetermined:
        raise ValueError("cannot derive a verification status from an undetermined decision")
    threshold = decision.threshold_meters if policy_threshold_meters is None else policy_threshold_meters
    if decision.distance_meters <= threshold:
        return VerificationStatus.VERIFIED
    return VerificationStatus.OUT_OF_RANGE
