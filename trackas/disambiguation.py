"""Latitude/longitude transposition correction.

Venue points are written as ``POINT(<lon> <lat>)`` and some were entered by
hand, so a stored venue can have its axes swapped. Given a device sample we
keep whichever orientation of the venue is closer to the device.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass

from .geo import GeoPoint, distance_meters

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EffectiveVenuePoint:
    point: GeoPoint
    # True while the point is the transposition of the stored venue
    swapped: bool = False


def maybe_correct(candidate: EffectiveVenuePoint, sample: GeoPoint, *, auto_swap: bool = True) -> EffectiveVenuePoint:
    """Return the venue point to use for ``sample``.

    The swapped orientation is adopted only when it is strictly closer, so a
    device that stays put never flips the point back and forth.
    """
    if not auto_swap or not candidate.point.can_swap():
        return candidate

    alternative = candidate.point.swapped()
    normal = distance_meters(sample, candidate.point)
    swapped = distance_meters(sample, alternative)
    logger.debug("Distance normal: %.2f m, swapped: %.2f m", normal, swapped)

    if swapped < normal:
        logger.debug("Adopting swapped venue coords %s", alternative)
        return EffectiveVenuePoint(point=alternative, swapped=not candidate.swapped)
    return candidate
