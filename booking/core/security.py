from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt
from passlib.context import CryptContext

from booking.core.config import settings

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=12)

ROLE_DOCTOR = "doctor"
ROLE_PATIENT = "patient"


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def _encode(subject: str, role: str, lifetime: timedelta, **claims: str) -> str:
    expire = datetime.now(UTC) + lifetime
    to_encode = {"sub": subject, "exp": expire, "role": role, **claims}
    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)


def create_doctor_token(doctor_id: int) -> str:
    """Doctor token, valid for one working shift; the doctor logs in again afterwards."""
    return _encode(
        str(doctor_id),
        ROLE_DOCTOR,
        timedelta(minutes=settings.doctor_token_expire_minutes),
    )


def create_patient_token(phone: str, name: str) -> str:
    """Patient identity token: subject is the phone number, name travels as a claim."""
    return _encode(
        phone,
        ROLE_PATIENT,
        timedelta(days=settings.patient_token_expire_days),
        name=name,
    )


def decode_token(token: str, role: str) -> dict | None:
    """Claims of a valid, unexpired token issued for `role`, else None."""
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except JWTError:
        return None
    if payload.get("role") != role or not payload.get("sub"):
        return None
    return payload
