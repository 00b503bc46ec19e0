import pytest

from trackas.admission import VerificationStatus, decide, validate_threshold, verification_status
from trackas.exceptions import InvalidThreshold


def test_within_threshold():
    decision = decide(19.9, 20)
    assert decision.within_threshold is True
    assert decision.admitted
    assert decision.threshold_meters == 20


def test_beyond_threshold():
    decision = decide(20.1, 20)
    assert decision.within_threshold is False
    assert not decision.admitted
    assert not decision.undetermined


def test_exactly_on_threshold_is_within():
    assert decide(20.0, 20).within_threshold is True


def test_unknown_distance_is_undetermined_not_denied():
    decision = decide(None, 20)
    assert decision.undetermined
    assert decision.within_threshold is None
    assert not decision.admitted


def test_decide_does_not_clamp_thresholds():
    assert decide(900.0, 1000).within_threshold is True
    assert decide(0.5, 0.1).within_threshold is False


@pytest.mark.parametrize("value,expected", [(1, 1.0), ("20", 20.0), (500, 500.0), (37.5, 37.5)])
def test_validate_threshold_accepts_range(value, expected):
    assert validate_threshold(value) == expected


@pytest.mark.parametrize("value", [0, 0.5, 500.1, -20, "far", None])
def test_validate_threshold_rejects_outside_range(value):
    with pytest.raises(InvalidThreshold):
        validate_threshold(value)


def test_status_follows_admission_threshold_by_default():
    assert verification_status(decide(30.0, 50)) == VerificationStatus.VERIFIED
    assert verification_status(decide(30.0, 25)) == VerificationStatus.OUT_OF_RANGE


def test_status_policy_threshold_overrides():
    # admitted against 50 m but the status policy is a fixed 20 m
    assert verification_status(decide(30.0, 50), policy_threshold_meters=20) == VerificationStatus.OUT_OF_RANGE
    assert verification_status(decide(15.0, 50), policy_threshold_meters=20) == VerificationStatus.VERIFIED


def test_status_needs_a_distance():
    with pytest.raises(ValueError):
        verification_status(decide(None, 20))
