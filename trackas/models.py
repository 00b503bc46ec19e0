import uuid

from sqlalchemy import Column, Integer, String, Float, ForeignKey, DateTime, Date, Boolean, Text, UniqueConstraint
from sqlalchemy.orm import relationship
from trackas.db import Base


def _new_course_id():
    return str(uuid.uuid4())


class Lecturer(Base):
    __tablename__ = "lecturers"

    id = Column(Integer, primary_key=True, index=True)
    staff_no = Column(String, unique=True, index=True)
    name = Column(String)
    email = Column(String, unique=True, index=True, nullable=True)
    password_hash = Column(String)

    classes = relationship("ScheduledClass", back_populates="lecturer")


class ScheduledClass(Base):
    __tablename__ = "classes"

    course_id = Column(String(36), primary_key=True, default=_new_course_id)
    lecturer_id = Column(Integer, ForeignKey("lecturers.id"))

    course_title = Column(String)
    course_code = Column(String, index=True)
    date = Column(Date)
    time = Column(DateTime)

    # --- VENUE ---
    location = Column(Text, nullable=True)         # SRID=4326;POINT(<lon> <lat>) or JSON
    location_name = Column(String, nullable=True)  # Display name picked by the lecturer
    # -------------

    note = Column(Text, nullable=True)
    created_at = Column(DateTime)

    lecturer = relationship("Lecturer", back_populates="classes")
    attendance = relationship(
        "Attendance",
        back_populates="scheduled_class",
        order_by="Attendance.id",
    )


ATTENDANCE_UNIQUE_CONSTRAINT = "uq_attendance_class_student"


class Attendance(Base):
    __tablename__ = "attendance"
    # One record per student per class; the store enforces it atomically.
    __table_args__ = (
        UniqueConstraint("class_id", "student_matric_no", name=ATTENDANCE_UNIQUE_CONSTRAINT),
    )

    id = Column(Integer, primary_key=True, index=True)
    class_id = Column(String(36), ForeignKey("classes.course_id"), index=True)
    student_name = Column(String)
    student_matric_no = Column(String)
    timestamp = Column(DateTime)
    is_present = Column(Boolean, default=True)
    distance_from_class = Column(Float)
    location_verification_status = Column(String)

    scheduled_class = relationship("ScheduledClass", back_populates="attendance")
