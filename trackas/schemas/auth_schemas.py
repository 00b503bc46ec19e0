from pydantic import BaseModel

class LoginRequest(BaseModel):
    staff_no: str
    password: str

class LecturerOut(BaseModel):
    id: int
    staff_no: str
    name: str
