from trackas.disambiguation import EffectiveVenuePoint, maybe_correct
from trackas.geo import GeoPoint
from trackas.registration_session import RegistrationSession

TRUE_VENUE = GeoPoint(latitude=6.5, longitude=3.4)
STORED_SWAPPED = GeoPoint(latitude=3.4, longitude=6.5)
DEVICE = GeoPoint(latitude=6.5001, longitude=3.4001)


def test_swapped_venue_is_adopted_when_closer():
    corrected = maybe_correct(EffectiveVenuePoint(STORED_SWAPPED), DEVICE)
    assert corrected.point == TRUE_VENUE
    assert corrected.swapped is True


def test_correct_venue_is_kept():
    candidate = EffectiveVenuePoint(TRUE_VENUE)
    assert maybe_correct(candidate, DEVICE) is candidate


def test_auto_swap_disabled_keeps_stored_point():
    candidate = EffectiveVenuePoint(STORED_SWAPPED)
    assert maybe_correct(candidate, DEVICE, auto_swap=False) is candidate


def test_swap_never_produces_an_invalid_latitude():
    # longitude 120 cannot become a latitude
    candidate = EffectiveVenuePoint(GeoPoint(latitude=10.0, longitude=120.0))
    assert maybe_correct(candidate, GeoPoint(latitude=89.0, longitude=10.0)) is candidate


def test_stationary_device_does_not_oscillate():
    venue = EffectiveVenuePoint(STORED_SWAPPED)
    seen = []
    for _ in range(5):
        venue = maybe_correct(venue, DEVICE)
        seen.append(venue)
    assert all(v.point == TRUE_VENUE and v.swapped for v in seen)


def test_session_adoption_is_sticky():
    session = RegistrationSession(course_id="c1", threshold_meters=20)
    session.resolve_venue(STORED_SWAPPED)

    first = session.observe(DEVICE)
    assert first.admitted
    assert session.venue.point == TRUE_VENUE

    second = session.observe(GeoPoint(latitude=6.50005, longitude=3.40005))
    assert second.admitted
    assert session.venue.point == TRUE_VENUE
    assert second.distance_meters < first.distance_meters


def test_device_before_venue_is_undetermined_then_resolves():
    session = RegistrationSession(course_id="c1", threshold_meters=20)

    pending = session.observe(DEVICE)
    assert pending.undetermined
    assert pending.within_threshold is None

    session.resolve_venue(TRUE_VENUE)
    decided = session.evaluate()
    assert not decided.undetermined
    assert decided.admitted


def test_venue_without_device_is_undetermined():
    session = RegistrationSession(course_id="c1")
    session.resolve_venue(TRUE_VENUE)
    assert session.evaluate().undetermined


def test_fallback_point_used_only_without_stored_venue():
    fallback = GeoPoint(latitude=1.0, longitude=1.0)

    session = RegistrationSession(course_id="c1")
    session.resolve_venue(None, fallback=fallback)
    assert session.venue.point == fallback

    other = RegistrationSession(course_id="c1")
    other.resolve_venue(TRUE_VENUE, fallback=fallback)
    assert other.venue.point == TRUE_VENUE


def test_no_venue_and_no_fallback_stays_undetermined():
    session = RegistrationSession(course_id="c1")
    session.resolve_venue(None)
    assert session.venue is None
    assert session.observe(DEVICE).undetermined


def test_sessions_do_not_share_corrections():
    first = RegistrationSession(course_id="c1")
    first.resolve_venue(STORED_SWAPPED)
    first.observe(DEVICE)

    second = RegistrationSession(course_id="c1")
    second.resolve_venue(STORED_SWAPPED)
    assert second.venue.point == STORED_SWAPPED
    assert second.venue.swapped is False


def test_session_survives_serialization():
    session = RegistrationSession(course_id="c1", threshold_meters=35, auto_swap=False)
    session.resolve_venue(STORED_SWAPPED)
    session.auto_swap = True
    session.observe(DEVICE)

    restored = RegistrationSession.from_dict(session.to_dict())
    assert restored == session
