from datetime import date, datetime

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from trackas.auth_router import get_password_hash
from trackas.db import Base
from trackas.dependencies import get_db
from trackas.domain import NewClass
from trackas.main import app
from trackas.models import Lecturer
from trackas.store import SqlRecordStore

LECTURER_PASSWORD = "password123"


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def store(db):
    return SqlRecordStore(db)


@pytest.fixture
def lecturer(db):
    lecturer = Lecturer(
        staff_no="L1001",
        name="Dr. Smith",
        email="smith@example.edu",
        password_hash=get_password_hash(LECTURER_PASSWORD),
    )
    db.add(lecturer)
    db.commit()
    db.refresh(lecturer)
    return lecturer


@pytest.fixture
def make_class(store, lecturer):
    def _make(location="SRID=4326;POINT(3.3792 6.5244)", course_code="CSC101"):
        return store.insert_class(
            NewClass(
                course_title="Introduction to Computing",
                course_code=course_code,
                date=date(2026, 10, 19),
                time=datetime(2026, 10, 19, 9, 0),
                location=location,
                location_name="Lecture Theatre 1",
                note="Bring your lab manual",
                lecturer_id=lecturer.id,
            )
        )

    return _make


@pytest.fixture
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def lecturer_client(client, lecturer):
    response = client.post("/login", json={"staff_no": lecturer.staff_no, "password": LECTURER_PASSWORD})
    assert response.status_code == 200
    return client
