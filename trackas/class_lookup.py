from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING, Callable, Optional, TypeVar

if TYPE_CHECKING:
    from .domain import ClassSession
    from .store import RecordStore

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Messages a single-row accessor produces when it simply found nothing,
# including "multiple (or no) rows returned".
NO_ROWS_PATTERN = re.compile(r"no\)? rows?|not found|cannot coerce|single row", re.IGNORECASE)


def is_no_rows_error(exc: BaseException) -> bool:
    return bool(NO_ROWS_PATTERN.search(str(exc)))


def find_optional(single: Callable[[], T], maybe: Callable[[], Optional[T]]) -> Optional[T]:
    """Run an exactly-one lookup, falling back to a zero-or-one lookup.

    ``single`` failing with a "no rows" style message means there is no such
    row, so ``maybe`` is asked instead and may return None. Every other
    failure is re-raised untouched.
    """
    try:
        return single()
    except Exception as exc:
        if not is_no_rows_error(exc):
            raise
        logger.debug("Single-row lookup found nothing (%s), retrying as optional", exc)
    return maybe()


def find_class_by_course_id(store: "RecordStore", course_id: Optional[str]) -> Optional["ClassSession"]:
    if not course_id:
        return None
    return store.get_class(course_id)
