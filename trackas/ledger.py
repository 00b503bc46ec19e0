"""Per-class attendance ledger.

Registration is a read-modify-write over the class's attendance collection:
read, reject a duplicate, append. Nothing in that sequence is atomic on its
own, so two registrations for the same student can both pass the duplicate
check. Two guards close that window:

* registrations for one class are serialized by an advisory lock keyed by
  class id (one process only), and
* when the store implements :class:`~trackas.store.ConditionalAppend` the
  append itself is refused by the store's unique constraint, which also
  covers concurrent writers in other processes.

A store without conditional append, driven by a ledger with
``serialize=False``, keeps the legacy behaviour: concurrent registrations for
one student can produce two records.
"""
from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Callable, Iterator, Optional

from .admission import decide, verification_status
from .domain import AttendanceRecord
from .exceptions import AdmissionUndetermined, DuplicateRegistration, LedgerTimeout, MissingStudentIdentifier
from .store import ConditionalAppend, RecordStore

logger = logging.getLogger(__name__)


def normalize_student_id(student_id: Optional[str]) -> str:
    return (student_id or "").strip().upper()


class ClassLocks:
    """Advisory locks keyed by class id, shared by every ledger in the process."""

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: dict[str, threading.Lock] = {}

    def _lock_for(self, class_id: str) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(class_id)
            if lock is None:
                lock = self._locks[class_id] = threading.Lock()
            return lock

    @contextmanager
    def hold(self, class_id: str, timeout: Optional[float] = None) -> Iterator[None]:
        lock = self._lock_for(class_id)
        acquired = lock.acquire(timeout=-1 if timeout is None else timeout)
        if not acquired:
            raise LedgerTimeout(f"Timed out after {timeout}s waiting to register for class {class_id}")
        try:
            yield
        finally:
            lock.release()


CLASS_LOCKS = ClassLocks()


class RegistrationLedger:
    def __init__(
        self,
        store: RecordStore,
        *,
        locks: Optional[ClassLocks] = None,
        serialize: bool = True,
        status_threshold_meters: Optional[float] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self._store = store
        self._locks = locks or CLASS_LOCKS
        self._serialize = serialize
        self._status_threshold = status_threshold_meters
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def register(
        self,
        class_id: str,
        student_id: Optional[str],
        display_name: Optional[str],
        distance_meters: Optional[float],
        threshold_meters: float,
        *,
        timeout: Optional[float] = None,
    ) -> AttendanceRecord:
        matric_no = normalize_student_id(student_id)
        if not matric_no:
            raise MissingStudentIdentifier()

        decision = decide(distance_meters, threshold_meters)
        if decision.undetermined:
            raise AdmissionUndetermined()

        record = AttendanceRecord(
            student_matric_no=matric_no,
            student_name=(display_name or "").strip().upper(),
            timestamp=self._clock(),
            distance_from_class=decision.distance_meters,
            location_verification_status=verification_status(decision, self._status_threshold),
        )

        if self._serialize:
            with self._locks.hold(class_id, timeout):
                self._append(class_id, record)
        else:
            self._append(class_id, record)

        logger.info(
            "Registered %s for class %s (%.2f m, %s)",
            matric_no,
            class_id,
            record.distance_from_class,
            record.location_verification_status.value,
        )
        return record

    def _append(self, class_id: str, record: AttendanceRecord) -> None:
        existing = self._store.get_attendance(class_id)
        if any(normalize_student_id(r.student_matric_no) == record.student_matric_no for r in existing):
            logger.warning("Duplicate registration for %s in class %s", record.student_matric_no, class_id)
            raise DuplicateRegistration(class_id, record.student_matric_no)

        if isinstance(self._store, ConditionalAppend):
            if not self._store.append_attendance_if_absent(class_id, record):
                logger.warning("Store refused duplicate %s in class %s", record.student_matric_no, class_id)
                raise DuplicateRegistration(class_id, record.student_matric_no)
            return

        self._store.append_attendance(class_id, record)
