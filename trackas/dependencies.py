# trackas/dependencies.py

from fastapi import Request, HTTPException, status, Depends
from sqlalchemy.orm import Session
from trackas.db import SessionLocal
from trackas.models import Lecturer
from trackas.store import SqlRecordStore

def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

def get_store(db: Session = Depends(get_db)) -> SqlRecordStore:
    return SqlRecordStore(db)

def get_current_lecturer(request: Request, db: Session = Depends(get_db)) -> Lecturer:
    """Fetches the lecturer from the session cookie, or answers 401."""

    lecturer_id = request.session.get("lecturer_id")
    if not lecturer_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )

    lecturer = db.query(Lecturer).filter(Lecturer.id == lecturer_id).one_or_none()

    # Cookie outlived the lecturer row (deleted DB)
    if not lecturer:
        request.session.clear()
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User details not found.",
        )

    return lecturer
