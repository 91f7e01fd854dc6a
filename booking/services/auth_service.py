import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from booking.core.config import settings
from booking.core.security import (
    create_doctor_token,
    create_patient_token,
    hash_password,
    verify_password,
)
from booking.models.doctor import Doctor, DoctorCreate, DoctorPublic

logger = logging.getLogger(__name__)


async def get_doctor_by_email(session: AsyncSession, email: str) -> Doctor | None:
    result = await session.execute(select(Doctor).where(Doctor.email == email.strip().lower()))
    return result.scalar_one_or_none()


async def get_doctor_by_id(session: AsyncSession, doctor_id: int) -> Doctor | None:
    result = await session.execute(select(Doctor).where(Doctor.id == doctor_id))
    return result.scalar_one_or_none()


async def create_doctor(session: AsyncSession, data: DoctorCreate) -> Doctor:
    doctor = Doctor(
        email=data.email.strip().lower(),
        full_name=data.full_name,
        hashed_password=hash_password(data.password),
    )
    session.add(doctor)
    await session.flush()
    await session.refresh(doctor)
    return doctor


async def ensure_bootstrap_doctor(session: AsyncSession) -> Doctor | None:
    """Create the doctor account from settings if configured and not present yet."""
    if not settings.doctor_bootstrap_enabled:
        return None
    existing = await get_doctor_by_email(session, settings.doctor_email)
    if existing:
        return existing
    doctor = await create_doctor(
        session,
        DoctorCreate(
            email=settings.doctor_email,
            password=settings.doctor_password,
            full_name=settings.doctor_full_name,
        ),
    )
    logger.info("Created bootstrap doctor account %s", doctor.email)
    return doctor


def doctor_to_public(doctor: Doctor) -> DoctorPublic:
    return DoctorPublic(id=doctor.id, email=doctor.email, full_name=doctor.full_name)


def make_patient_token(name: str, phone: str) -> tuple[str, int] | None:
    """Issue a patient identity token; None when name or phone is blank."""
    name = name.strip()
    phone = phone.strip()
    if not name or not phone:
        return None
    return create_patient_token(phone, name), settings.patient_token_expire_days * 24 * 60 * 60


async def login_doctor(
    session: AsyncSession, email: str, password: str
) -> tuple[Doctor, str, int] | None:
    """Check credentials and issue a shift-long doctor token with its lifetime in seconds."""
    doctor = await get_doctor_by_email(session, email)
    if not doctor or not verify_password(password, doctor.hashed_password):
        return None
    return doctor, create_doctor_token(doctor.id), settings.doctor_token_expire_minutes * 60
