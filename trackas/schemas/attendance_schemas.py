import datetime as dt
from typing import Optional

from pydantic import BaseModel, Field

from trackas.admission import MAX_THRESHOLD_METERS, MIN_THRESHOLD_METERS


class Coordinates(BaseModel):
    lat: float
    lng: float


class PositionSample(BaseModel):
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    threshold_meters: Optional[float] = Field(None, ge=MIN_THRESHOLD_METERS, le=MAX_THRESHOLD_METERS)
    auto_swap: Optional[bool] = None


class AdmissionResponse(BaseModel):
    course_id: str
    distance_meters: Optional[float]
    within_threshold: Optional[bool]
    undetermined: bool
    threshold_meters: float
    auto_swap: bool
    venue: Optional[Coordinates]
    venue_swapped: bool
    device: Optional[Coordinates]


class RegistrationRequest(BaseModel):
    name: str = ""
    matric_number: str = ""
    # Optional fresh sample sent with the form
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)


class AttendanceOut(BaseModel):
    student_matric_no: str
    student_name: str
    timestamp: dt.datetime
    is_present: bool
    distance_from_class: float
    location_verification_status: str


class ClassDetails(BaseModel):
    course_id: str
    course_title: str
    course_code: str
    date: Optional[dt.date]
    time: Optional[dt.datetime]
    location_name: Optional[str]
    note: Optional[str]
    venue: Optional[Coordinates]
    threshold_meters: float
    auto_swap: bool
