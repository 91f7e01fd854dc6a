from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from booking.api.schemas.auth import PatientIdentity
from booking.core.db import get_session
from booking.core.security import ROLE_DOCTOR, ROLE_PATIENT, decode_token
from booking.models.doctor import Doctor
from booking.services.auth_service import get_doctor_by_id

security = HTTPBearer(auto_error=False)

__all__ = ["get_session", "get_current_doctor", "get_current_patient"]


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def _bearer_claims(credentials: HTTPAuthorizationCredentials | None, role: str) -> dict:
    if not credentials or credentials.scheme.lower() != "bearer":
        raise _unauthorized("Missing or invalid authorization header")
    claims = decode_token(credentials.credentials, role)
    if not claims:
        other = ROLE_PATIENT if role == ROLE_DOCTOR else ROLE_DOCTOR
        if decode_token(credentials.credentials, other):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"This action requires a {role} token",
            )
        raise _unauthorized("Invalid or expired token")
    return claims


async def get_current_doctor(
    session: AsyncSession = Depends(get_session),
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> Doctor:
    claims = _bearer_claims(credentials, ROLE_DOCTOR)
    try:
        doctor_id = int(claims["sub"])
    except ValueError:
        raise _unauthorized("Invalid token")
    doctor = await get_doctor_by_id(session, doctor_id)
    if not doctor:
        raise _unauthorized("Doctor not found")
    return doctor


async def get_current_patient(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> PatientIdentity:
    """Patient identity comes from the signed token only; there is no patient table."""
    claims = _bearer_claims(credentials, ROLE_PATIENT)
    name = (claims.get("name") or "").strip()
    if not name:
        raise _unauthorized("Invalid token")
    return PatientIdentity(name=name, phone=claims["sub"])
