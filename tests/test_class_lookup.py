import pytest

from trackas.class_lookup import find_class_by_course_id, find_optional, is_no_rows_error


class Calls:
    def __init__(self):
        self.single = 0
        self.maybe = 0


def _single_raising(calls, message):
    def single():
        calls.single += 1
        raise RuntimeError(message)

    return single


def _maybe_returning(calls, value):
    def maybe():
        calls.maybe += 1
        return value

    return maybe


@pytest.mark.parametrize(
    "message",
    [
        "JSON object requested, multiple (or no) rows returned",
        "Cannot coerce the result to a single JSON object",
        "No row was found when one was required",
        "Not Found",
    ],
)
def test_no_rows_failure_falls_back(message):
    calls = Calls()
    result = find_optional(_single_raising(calls, message), _maybe_returning(calls, None))
    assert result is None
    assert (calls.single, calls.maybe) == (1, 1)


def test_fallback_value_is_returned():
    calls = Calls()
    row = object()
    result = find_optional(_single_raising(calls, "no rows returned"), _maybe_returning(calls, row))
    assert result is row


def test_single_success_skips_fallback():
    calls = Calls()
    row = object()
    assert find_optional(lambda: row, _maybe_returning(calls, None)) is row
    assert calls.maybe == 0


@pytest.mark.parametrize(
    "message",
    [
        "connection refused",
        "permission denied for table classes",
        "Multiple rows were found when exactly one was required",
    ],
)
def test_other_failures_propagate(message):
    calls = Calls()
    with pytest.raises(RuntimeError, match=message.split()[0]):
        find_optional(_single_raising(calls, message), _maybe_returning(calls, None))
    assert calls.maybe == 0


def test_is_no_rows_error():
    assert is_no_rows_error(ValueError("no rows"))
    assert not is_no_rows_error(ValueError("timeout expired"))


class ExplodingStore:
    def get_class(self, course_id):
        raise AssertionError("store should not be consulted")


@pytest.mark.parametrize("course_id", [None, ""])
def test_empty_course_id_is_not_looked_up(course_id):
    assert find_class_by_course_id(ExplodingStore(), course_id) is None
