import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from booking.api.deps import get_current_patient, get_session
from booking.api.routes.slots import appointment_to_public, slot_to_public
from booking.api.schemas.auth import PatientIdentity
from booking.api.schemas.slot import AppointmentWithSlot
from booking.models.appointment import Appointment
from booking.services.appointment_service import get_patient_appointments

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/appointments", tags=["appointments"])


def _with_slot(a: Appointment) -> AppointmentWithSlot:
    return AppointmentWithSlot(
        **appointment_to_public(a).model_dump(),
        slot=slot_to_public(a.slot),
    )


@router.get("/me", response_model=list[AppointmentWithSlot])
async def my_appointments(
    session: AsyncSession = Depends(get_session),
    patient: PatientIdentity = Depends(get_current_patient),
) -> list[AppointmentWithSlot]:
    try:
        appointments = await get_patient_appointments(session, patient.phone)
    except SQLAlchemyError as e:
        logger.exception("List appointments failed")
        raise HTTPException(status_code=500, detail="Could not load appointments") from e
    return [_with_slot(a) for a in appointments]
