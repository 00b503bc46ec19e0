import datetime as dt
from typing import Optional

from pydantic import BaseModel, Field

class ScheduleClassRequest(BaseModel):
    course_title: str = Field(..., min_length=1)
    course_code: str = Field(..., min_length=1)
    lecture_venue: str = Field(..., min_length=1)
    date: dt.date
    time: dt.time
    note: Optional[str] = None
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    # Lecturer noticed the picked coordinates came in transposed
    swap_coordinates: bool = False

class ScheduledClassOut(BaseModel):
    course_id: str
    registration_link: str

class ClassSummary(BaseModel):
    course_id: str
    course_title: str
    course_code: str
    date: Optional[dt.date]
    time: Optional[dt.datetime]
    location_name: Optional[str]
    note: Optional[str]
    attendance_count: int
