from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from .admission import VerificationStatus
from .geo import VenueLocation


@dataclass(frozen=True)
class AttendanceRecord:
    student_matric_no: str
    student_name: str
    timestamp: datetime
    distance_from_class: float
    location_verification_status: VerificationStatus
    is_present: bool = True


@dataclass(frozen=True)
class ClassSession:
    """A scheduled class as read from the record store."""

    course_id: str
    course_title: str
    course_code: str
    date: Optional[date]
    time: Optional[datetime]
    venue: Optional[VenueLocation]
    location_name: Optional[str] = None
    note: Optional[str] = None
    lecturer_id: Optional[int] = None
    created_at: Optional[datetime] = None
    attendance: tuple[AttendanceRecord, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class NewClass:
    course_title: str
    course_code: str
    date: date
    time: datetime
    location: Optional[str]
    location_name: str
    note: Optional[str]
    lecturer_id: int
