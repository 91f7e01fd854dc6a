from pydantic import BaseModel, EmailStr, field_validator

from booking.models.doctor import DoctorPublic


class DoctorLoginRequest(BaseModel):
    email: EmailStr
    password: str


class PatientLoginRequest(BaseModel):
    name: str
    phone: str

    @field_validator("name", "phone")
    @classmethod
    def strip_value(cls, value: str) -> str:
        return value.strip()


class DoctorToken(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int  # seconds
    doctor: DoctorPublic


class PatientToken(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int  # seconds
    name: str
    phone: str


class PatientIdentity(BaseModel):
    name: str
    phone: str
