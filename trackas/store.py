"""Record store contract and its SQLAlchemy implementation."""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional, Protocol, Sequence, runtime_checkable

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from .admission import VerificationStatus
from .class_lookup import find_optional
from .domain import AttendanceRecord, ClassSession, NewClass
from .exceptions import DuplicateRegistration, LookupFailure, StoreError
from .geo import decode_location
from .models import ATTENDANCE_UNIQUE_CONSTRAINT, Attendance, ScheduledClass

logger = logging.getLogger(__name__)


@runtime_checkable
class RecordStore(Protocol):
    def get_class(self, course_id: str) -> Optional[ClassSession]:
        raise NotImplementedError

    def get_attendance(self, class_id: str) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def append_attendance(self, class_id: str, record: AttendanceRecord) -> None:
        raise NotImplementedError

    def insert_class(self, new_class: NewClass) -> str:
        raise NotImplementedError

    def list_classes(self, lecturer_id: int) -> Sequence[ClassSession]:
        raise NotImplementedError


@runtime_checkable
class ConditionalAppend(Protocol):
    """Stores that can append atomically unless the student is already recorded."""

    def append_attendance_if_absent(self, class_id: str, record: AttendanceRecord) -> bool:
        """Return False, writing nothing, when the student already has a record."""

        raise NotImplementedError


def _to_record(row: Attendance) -> AttendanceRecord:
    return AttendanceRecord(
        student_matric_no=row.student_matric_no,
        student_name=row.student_name,
        timestamp=row.timestamp,
        distance_from_class=row.distance_from_class,
        location_verification_status=VerificationStatus(row.location_verification_status),
        is_present=bool(row.is_present),
    )


def _to_class(row: ScheduledClass, *, with_attendance: bool = False) -> ClassSession:
    logger.debug("Fetched raw stored location: %r", row.location)
    return ClassSession(
        course_id=row.course_id,
        course_title=row.course_title,
        course_code=row.course_code,
        date=row.date,
        time=row.time,
        venue=decode_location(row.location),
        location_name=row.location_name,
        note=row.note,
        lecturer_id=row.lecturer_id,
        created_at=row.created_at,
        attendance=tuple(_to_record(a) for a in row.attendance) if with_attendance else (),
    )


class SqlRecordStore(RecordStore):
    def __init__(self, db: Session):
        self._db = db

    def get_class(self, course_id: str) -> Optional[ClassSession]:
        query = self._db.query(ScheduledClass).filter(ScheduledClass.course_id == course_id)
        try:
            row = find_optional(query.one, query.one_or_none)
        except SQLAlchemyError as exc:
            logger.error("Class lookup for %s failed: %s", course_id, exc)
            raise LookupFailure(str(exc)) from exc
        return _to_class(row) if row is not None else None

    def get_attendance(self, class_id: str) -> Sequence[AttendanceRecord]:
        try:
            rows = (
                self._db.query(Attendance)
                .filter(Attendance.class_id == class_id)
                .order_by(Attendance.id.asc())
                .all()
            )
        except SQLAlchemyError as exc:
            logger.error("Reading attendance for %s failed: %s", class_id, exc)
            raise StoreError(str(exc)) from exc
        return [_to_record(r) for r in rows]

    def append_attendance_if_absent(self, class_id: str, record: AttendanceRecord) -> bool:
        self._db.add(
            Attendance(
                class_id=class_id,
                student_name=record.student_name,
                student_matric_no=record.student_matric_no,
                timestamp=record.timestamp,
                is_present=record.is_present,
                distance_from_class=record.distance_from_class,
                location_verification_status=record.location_verification_status.value,
            )
        )
        try:
            self._db.commit()
        except IntegrityError as exc:
            self._db.rollback()
            if _is_duplicate_attendance(exc):
                return False
            logger.error("Writing attendance for %s violated a constraint: %s", class_id, exc.orig)
            raise StoreError(str(exc.orig)) from exc
        except SQLAlchemyError as exc:
            self._db.rollback()
            logger.error("Writing attendance for %s failed: %s", class_id, exc)
            raise StoreError(str(exc)) from exc
        return True

    def append_attendance(self, class_id: str, record: AttendanceRecord) -> None:
        if not self.append_attendance_if_absent(class_id, record):
            raise DuplicateRegistration(class_id, record.student_matric_no)

    def insert_class(self, new_class: NewClass) -> str:
        row = ScheduledClass(
            lecturer_id=new_class.lecturer_id,
            course_title=new_class.course_title,
            course_code=new_class.course_code,
            date=new_class.date,
            time=new_class.time,
            location=new_class.location,
            location_name=new_class.location_name,
            note=new_class.note,
            created_at=_now(),
        )
        self._db.add(row)
        try:
            self._db.commit()
        except SQLAlchemyError as exc:
            self._db.rollback()
            logger.error("Inserting class %s failed: %s", new_class.course_code, exc)
            raise StoreError(str(exc)) from exc
        self._db.refresh(row)
        return row.course_id

    def list_classes(self, lecturer_id: int) -> Sequence[ClassSession]:
        try:
            rows = (
                self._db.query(ScheduledClass)
                .options(selectinload(ScheduledClass.attendance))
                .filter(ScheduledClass.lecturer_id == lecturer_id)
                .order_by(ScheduledClass.created_at.desc())
                .all()
            )
        except SQLAlchemyError as exc:
            logger.error("Listing classes for lecturer %s failed: %s", lecturer_id, exc)
            raise StoreError(str(exc)) from exc
        return [_to_class(r, with_attendance=True) for r in rows]


# SQLite names the columns, PostgreSQL names the constraint
_DUPLICATE_MARKERS = (
    ATTENDANCE_UNIQUE_CONSTRAINT,
    "attendance.class_id, attendance.student_matric_no",
)


def _is_duplicate_attendance(exc: IntegrityError) -> bool:
    constraint = getattr(getattr(exc.orig, "diag", None), "constraint_name", None)
    if constraint:
        return constraint == ATTENDANCE_UNIQUE_CONSTRAINT
    message = str(exc.orig)
    return any(marker in message for marker in _DUPLICATE_MARKERS)


def _now():
    return datetime.now(timezone.utc)
