# seed_db.py

import logging
from datetime import date, datetime, time

from sqlalchemy.orm import Session

from trackas.auth_router import get_password_hash
from trackas.db import SessionLocal, engine, Base
from trackas.domain import NewClass
from trackas.geo import GeoPoint, encode_point
from trackas.logging_config import setup_logging
from trackas.models import Lecturer
from trackas.store import SqlRecordStore

logger = logging.getLogger("trackas.seed")


def seed_lecturer(db: Session, password: str) -> Lecturer:
    lecturer = db.query(Lecturer).filter(Lecturer.staff_no == "L1001").first()
    if lecturer:
        logger.info("Lecturer L1001 already exists. Skipping.")
        return lecturer

    lecturer = Lecturer(
        staff_no="L1001",
        name="Dr. Smith",
        email="smith@example.edu",
        password_hash=get_password_hash(password),
    )
    db.add(lecturer)
    db.commit()
    db.refresh(lecturer)
    logger.info("Created lecturer L1001 (password: %s)", password)
    return lecturer


def seed_class(db: Session, lecturer: Lecturer) -> str:
    today = date.today()
    course_id = SqlRecordStore(db).insert_class(
        NewClass(
            course_title="Introduction to Computing",
            course_code="CSC101",
            date=today,
            time=datetime.combine(today, time(9, 0)),
            location=encode_point(GeoPoint(latitude=6.5244, longitude=3.3792)),
            location_name="Lecture Theatre 1",
            note="Bring your lab manual",
            lecturer_id=lecturer.id,
        )
    )
    logger.info("Created demo class %s", course_id)
    return course_id


def seed():
    setup_logging()
    Base.metadata.create_all(bind=engine)  # Ensure tables exist
    db = SessionLocal()
    try:
        lecturer = seed_lecturer(db, password="password123")
        if not lecturer.classes:
            seed_class(db, lecturer)
    finally:
        db.close()


if __name__ == "__main__":
    seed()
