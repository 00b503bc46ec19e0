import csv
import io
import logging
from datetime import datetime
from urllib.parse import urlencode

from fastapi import APIRouter, Request, Depends, HTTPException, status
from fastapi.responses import StreamingResponse

from trackas import config
from trackas.class_lookup import find_class_by_course_id
from trackas.dependencies import get_current_lecturer, get_store
from trackas.domain import ClassSession, NewClass
from trackas.geo import GeoPoint, encode_point
from trackas.models import Lecturer
from trackas.schemas.attendance_schemas import AttendanceOut
from trackas.schemas.class_schemas import ClassSummary, ScheduleClassRequest, ScheduledClassOut
from trackas.store import RecordStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/lecturer", tags=["lecturer"])


def registration_link(base_url, course_id, time, course_code, venue):
    """The link a class QR code points students at."""
    query = urlencode({
        "courseId": course_id or "",
        "time": time or "",
        "courseCode": course_code or "",
        "lat": str(venue.latitude) if venue else "",
        "lng": str(venue.longitude) if venue else "",
    })
    return f"{base_url.rstrip('/')}/attendance?{query}"


def _owned_class(store: RecordStore, course_id: str, lecturer: Lecturer) -> ClassSession:
    class_session = find_class_by_course_id(store, course_id)
    if class_session is None or class_session.lecturer_id != lecturer.id:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Class not found")
    return class_session


# --- 1. Schedule a Class (POST) ---
@router.post("/classes", response_model=ScheduledClassOut, status_code=status.HTTP_201_CREATED)
def schedule_class(
    request: Request,
    form: ScheduleClassRequest,
    store: RecordStore = Depends(get_store),
    lecturer: Lecturer = Depends(get_current_lecturer),
):
    venue = None
    if form.latitude is not None and form.longitude is not None:
        venue = GeoPoint(latitude=form.latitude, longitude=form.longitude)
        if form.swap_coordinates:
            if not venue.can_swap():
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail="Coordinates cannot be swapped: longitude is not a valid latitude.",
                )
            venue = venue.swapped()

    course_id = store.insert_class(
        NewClass(
            course_title=form.course_title,
            course_code=form.course_code,
            date=form.date,
            time=datetime.combine(form.date, form.time),
            location=encode_point(venue) if venue else None,
            location_name=form.lecture_venue,
            note=form.note,
            lecturer_id=lecturer.id,
        )
    )

    base_url = config.PUBLIC_BASE_URL or str(request.base_url)
    link = registration_link(base_url, course_id, form.time.strftime("%H:%M"), form.course_code, venue)
    logger.info("Class %s (%s) scheduled by lecturer %s", course_id, form.course_code, lecturer.id)
    logger.debug("Generated registration link: %s", link)

    return ScheduledClassOut(course_id=course_id, registration_link=link)


# --- 2. Previous Classes (GET) ---
@router.get("/classes", response_model=list[ClassSummary])
def previous_classes(
    store: RecordStore = Depends(get_store),
    lecturer: Lecturer = Depends(get_current_lecturer),
):
    return [
        ClassSummary(
            course_id=c.course_id,
            course_title=c.course_title,
            course_code=c.course_code,
            date=c.date,
            time=c.time,
            location_name=c.location_name,
            note=c.note,
            attendance_count=len(c.attendance),
        )
        for c in store.list_classes(lecturer.id)
    ]


# --- 3. Attendance List (GET) ---
@router.get("/classes/{course_id}/attendance", response_model=list[AttendanceOut])
def attendance_list(
    course_id: str,
    store: RecordStore = Depends(get_store),
    lecturer: Lecturer = Depends(get_current_lecturer),
):
    _owned_class(store, course_id, lecturer)
    return [
        AttendanceOut(
            student_matric_no=r.student_matric_no,
            student_name=r.student_name,
            timestamp=r.timestamp,
            is_present=r.is_present,
            distance_from_class=r.distance_from_class,
            location_verification_status=r.location_verification_status.value,
        )
        for r in store.get_attendance(course_id)
    ]


# --- 4. Export Attendance to CSV (GET) ---
@router.get("/classes/{course_id}/export")
def export_attendance(
    course_id: str,
    store: RecordStore = Depends(get_store),
    lecturer: Lecturer = Depends(get_current_lecturer),
):
    class_session = _owned_class(store, course_id, lecturer)

    stream = io.StringIO()
    csv_writer = csv.writer(stream)
    csv_writer.writerow(["Matric No", "Student Name", "Check-in Time", "Distance (m)", "Status", "Course Code"])

    for record in store.get_attendance(course_id):
        csv_writer.writerow([
            record.student_matric_no,
            record.student_name,
            record.timestamp.strftime('%Y-%m-%d %H:%M:%S'),
            f"{record.distance_from_class:.2f}",
            record.location_verification_status.value,
            class_session.course_code,
        ])

    response = StreamingResponse(iter([stream.getvalue()]), media_type="text/csv")
    filename = f"Attendance_{class_session.course_code}_{class_session.course_id}.csv"
    response.headers["Content-Disposition"] = f"attachment; filename={filename}"
    return response
