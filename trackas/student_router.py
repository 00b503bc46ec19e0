import logging
from typing import Optional

from fastapi import APIRouter, Request, Depends, HTTPException, Query, status

from trackas import config
from trackas.admission import AdmissionDecision
from trackas.class_lookup import find_class_by_course_id
from trackas.domain import ClassSession
from trackas.geo import GeoPoint, make_point
from trackas.exceptions import DuplicateRegistration, MissingStudentIdentifier
from trackas.ledger import RegistrationLedger, normalize_student_id
from trackas.registration_session import RegistrationSession
from trackas.dependencies import get_store
from trackas.schemas.attendance_schemas import (
    AdmissionResponse,
    AttendanceOut,
    ClassDetails,
    Coordinates,
    PositionSample,
    RegistrationRequest,
)
from trackas.store import RecordStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/attendance", tags=["attendance"])


def _session_key(course_id):
    return f"registration:{course_id}"


def _load_session(request: Request, course_id: str) -> RegistrationSession:
    data = request.session.get(_session_key(course_id))
    if data:
        return RegistrationSession.from_dict(data)
    return RegistrationSession(
        course_id=course_id,
        threshold_meters=config.ATTENDANCE_THRESHOLD_METERS,
        auto_swap=config.ATTENDANCE_AUTO_SWAP,
    )


def _save_session(request: Request, session: RegistrationSession) -> None:
    request.session[_session_key(session.course_id)] = session.to_dict()


def _clear_session(request: Request, course_id: str) -> None:
    request.session.pop(_session_key(course_id), None)


def _require_class(store: RecordStore, course_id: str) -> ClassSession:
    class_session = find_class_by_course_id(store, course_id)
    if class_session is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Class not found")
    return class_session


def _venue_of(class_session: ClassSession) -> Optional[GeoPoint]:
    return class_session.venue.point if class_session.venue else None


def _coords(point: Optional[GeoPoint]) -> Optional[Coordinates]:
    if point is None:
        return None
    return Coordinates(lat=point.latitude, lng=point.longitude)


def _admission_response(session: RegistrationSession, decision: AdmissionDecision) -> AdmissionResponse:
    return AdmissionResponse(
        course_id=session.course_id,
        distance_meters=decision.distance_meters,
        within_threshold=decision.within_threshold,
        undetermined=decision.undetermined,
        threshold_meters=decision.threshold_meters,
        auto_swap=session.auto_swap,
        venue=_coords(session.venue.point if session.venue else None),
        venue_swapped=bool(session.venue and session.venue.swapped),
        device=_coords(session.device),
    )


# ==========================================
# CLASS DETAILS (scanned QR link lands here)
# ==========================================
@router.get("", response_model=ClassDetails)
def class_details(
    request: Request,
    course_id: str = Query(..., alias="courseId"),
    lat: Optional[float] = Query(None),
    lng: Optional[float] = Query(None),
    store: RecordStore = Depends(get_store),
):
    class_session = _require_class(store, course_id)

    # lat/lng from the link only stand in when the class has no usable venue
    session = _load_session(request, course_id)
    session.resolve_venue(_venue_of(class_session), fallback=make_point(lat, lng))
    _save_session(request, session)

    return ClassDetails(
        course_id=class_session.course_id,
        course_title=class_session.course_title,
        course_code=class_session.course_code,
        date=class_session.date,
        time=class_session.time,
        location_name=class_session.location_name,
        note=class_session.note,
        venue=_coords(session.venue.point if session.venue else None),
        threshold_meters=session.threshold_meters,
        auto_swap=session.auto_swap,
    )


# ==========================================
# DEVICE POSITION -> ADMISSION DECISION
# ==========================================
@router.post("/{course_id}/position", response_model=AdmissionResponse)
def submit_position(
    request: Request,
    course_id: str,
    sample: PositionSample,
    store: RecordStore = Depends(get_store),
):
    session = _load_session(request, course_id)
    if session.venue is None:
        session.resolve_venue(_venue_of(_require_class(store, course_id)))

    if sample.threshold_meters is not None:
        session.threshold_meters = sample.threshold_meters
    if sample.auto_swap is not None:
        session.auto_swap = sample.auto_swap

    decision = session.observe(GeoPoint(latitude=sample.latitude, longitude=sample.longitude))
    _save_session(request, session)
    return _admission_response(session, decision)


# ==========================================
# REGISTER ATTENDANCE
# ==========================================
@router.post("/{course_id}/register", response_model=AttendanceOut, status_code=status.HTTP_201_CREATED)
def register(
    request: Request,
    course_id: str,
    form: RegistrationRequest,
    store: RecordStore = Depends(get_store),
):
    if not normalize_student_id(form.matric_number):
        raise MissingStudentIdentifier()

    session = _load_session(request, course_id)
    if session.venue is None:
        session.resolve_venue(_venue_of(_require_class(store, course_id)))

    if form.latitude is not None and form.longitude is not None:
        decision = session.observe(GeoPoint(latitude=form.latitude, longitude=form.longitude))
    else:
        decision = session.evaluate()
    _save_session(request, session)

    if decision.undetermined:
        raise HTTPException(
            status_code=status.HTTP_428_PRECONDITION_REQUIRED,
            detail="Location not yet determined. Allow location access and try again.",
        )
    if not decision.admitted:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"You must be within {decision.threshold_meters:g} meters of the lecture venue to register.",
        )

    ledger = RegistrationLedger(store, status_threshold_meters=config.ATTENDANCE_STATUS_THRESHOLD_METERS)
    try:
        record = ledger.register(
            course_id,
            form.matric_number,
            form.name,
            decision.distance_meters,
            decision.threshold_meters,
            timeout=config.STORE_TIMEOUT_SECONDS,
        )
    except DuplicateRegistration:
        _clear_session(request, course_id)
        raise

    # The next student on this device starts without our position or venue
    _clear_session(request, course_id)

    return AttendanceOut(
        student_matric_no=record.student_matric_no,
        student_name=record.student_name,
        timestamp=record.timestamp,
        is_present=record.is_present,
        distance_from_class=record.distance_from_class,
        location_verification_status=record.location_verification_status.value,
    )
