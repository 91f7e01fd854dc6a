import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from booking.api.deps import get_current_doctor, get_session
from booking.api.schemas.auth import (
    DoctorLoginRequest,
    DoctorToken,
    PatientLoginRequest,
    PatientToken,
)
from booking.models.doctor import Doctor, DoctorPublic
from booking.services.auth_service import doctor_to_public, login_doctor, make_patient_token

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/doctor/login", response_model=DoctorToken)
async def doctor_login(
    body: DoctorLoginRequest,
    session: AsyncSession = Depends(get_session),
) -> DoctorToken:
    issued = await login_doctor(session, body.email, body.password)
    if not issued:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
        )
    doctor, token, expires_in = issued
    logger.info("Doctor %s logged in", doctor.id)
    return DoctorToken(
        access_token=token,
        expires_in=expires_in,
        doctor=doctor_to_public(doctor),
    )


@router.get("/doctor/me", response_model=DoctorPublic)
async def doctor_me(current_doctor: Doctor = Depends(get_current_doctor)) -> DoctorPublic:
    return doctor_to_public(current_doctor)


@router.post("/patient", response_model=PatientToken)
async def patient_login(body: PatientLoginRequest) -> PatientToken:
    """Identify a patient by name and phone; the returned token carries both."""
    issued = make_patient_token(body.name, body.phone)
    if not issued:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Name and phone are required",
        )
    token, expires_in = issued
    return PatientToken(
        access_token=token,
        expires_in=expires_in,
        name=body.name,
        phone=body.phone,
    )
