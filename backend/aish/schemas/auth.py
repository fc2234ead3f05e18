from pydantic import BaseModel


class DoctorSummary(BaseModel):
    name: str


class RegisterResponse(BaseModel):
    message: str
    name: str


class LoginResponse(BaseModel):
    message: str
    name: str
    role: str
