import logging

from fastapi import APIRouter, Request, Depends, HTTPException, status
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from trackas.dependencies import get_db, get_current_lecturer
from trackas.models import Lecturer
from trackas.schemas.auth_schemas import LecturerOut, LoginRequest

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])
pwd_context = CryptContext(schemes=["sha256_crypt"], deprecated="auto")


def get_password_hash(password):
    return pwd_context.hash(password)


@router.post("/login", response_model=LecturerOut)
async def login(request: Request, credentials: LoginRequest, db: Session = Depends(get_db)):
    lecturer = db.query(Lecturer).filter(Lecturer.staff_no == credentials.staff_no).first()

    if not lecturer or not pwd_context.verify(credentials.password, lecturer.password_hash):
        logger.warning("Failed login for staff number %s", credentials.staff_no)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid Staff Number or Password",
        )

    request.session["lecturer_id"] = lecturer.id
    request.session["lecturer_name"] = lecturer.name
    return LecturerOut(id=lecturer.id, staff_no=lecturer.staff_no, name=lecturer.name)


@router.get("/logout")
async def logout(request: Request):
    request.session.clear()
    return {"detail": "Logged out"}


@router.get("/me", response_model=LecturerOut)
async def me(lecturer: Lecturer = Depends(get_current_lecturer)):
    return LecturerOut(id=lecturer.id, staff_no=lecturer.staff_no, name=lecturer.name)
