import logging
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from booking.api.deps import get_current_patient, get_session
from booking.api.schemas.auth import PatientIdentity
from booking.api.schemas.slot import BookingResponse
from booking.models.appointment import Appointment, AppointmentPublic
from booking.models.slot import Slot, SlotPublic
from booking.services.appointment_service import MISSING_DETAILS, SLOT_UNAVAILABLE, book_slot
from booking.services.slot_service import get_available_slots, slot_end_time

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/slots", tags=["slots"])


def slot_to_public(slot: Slot) -> SlotPublic:
    return SlotPublic(
        id=slot.id,
        start_time=slot.start_time,
        end_time=slot_end_time(slot),
        status=slot.status,
    )


def appointment_to_public(a: Appointment) -> AppointmentPublic:
    return AppointmentPublic(
        id=a.id,
        slot_id=a.slot_id,
        patient_name=a.patient_name,
        patient_phone=a.patient_phone,
        created_at=a.created_at,
    )


@router.get("/available", response_model=list[SlotPublic])
async def available_slots(
    date_param: date = Query(..., alias="date"),
    session: AsyncSession = Depends(get_session),
) -> list[SlotPublic]:
    """AVAILABLE slots for the given date (server local time), earliest first."""
    try:
        slots = await get_available_slots(session, date_param)
    except SQLAlchemyError as e:
        logger.exception("Loading available slots for %s failed", date_param)
        raise HTTPException(status_code=500, detail="Could not load available slots") from e
    return [slot_to_public(s) for s in slots]


@router.post("/{slot_id}/book", response_model=BookingResponse)
async def book(
    slot_id: int,
    response: Response,
    session: AsyncSession = Depends(get_session),
    patient: PatientIdentity = Depends(get_current_patient),
) -> BookingResponse:
    result = await book_slot(session, slot_id, patient.name, patient.phone)
    if result.success:
        response.status_code = status.HTTP_201_CREATED
    elif result.message == MISSING_DETAILS:
        response.status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    elif result.message == SLOT_UNAVAILABLE:
        response.status_code = status.HTTP_409_CONFLICT
    else:
        response.status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    return BookingResponse(**result.model_dump())
