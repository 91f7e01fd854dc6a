import logging
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from booking.api.deps import get_current_doctor, get_session
from booking.api.routes.slots import appointment_to_public, slot_to_public
from booking.api.schemas.slot import (
    GenerateSlotsRequest,
    GenerateSlotsResponse,
    ScheduleSlot,
    ScheduleSummary,
    ToggleSlotResponse,
)
from booking.models.doctor import Doctor
from booking.models.slot import Slot, SlotStatus
from booking.services.slot_service import (
    generate_slots_for_day,
    get_doctor_schedule,
    get_schedule_summary,
    toggle_slot_status,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/doctor", tags=["doctor"])


def _to_schedule_slot(slot: Slot) -> ScheduleSlot:
    appointment = None
    if slot.status == SlotStatus.BOOKED and slot.appointment is not None:
        appointment = appointment_to_public(slot.appointment)
    return ScheduleSlot(**slot_to_public(slot).model_dump(), appointment=appointment)


@router.post("/slots/generate", response_model=GenerateSlotsResponse)
async def generate_slots(
    body: GenerateSlotsRequest,
    response: Response,
    session: AsyncSession = Depends(get_session),
    current_doctor: Doctor = Depends(get_current_doctor),
) -> GenerateSlotsResponse:
    try:
        count = await generate_slots_for_day(session, body.date)
    except SQLAlchemyError:
        await session.rollback()
        logger.exception("Generating slots for %s failed", body.date)
        response.status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
        return GenerateSlotsResponse(success=False, count=0)
    return GenerateSlotsResponse(success=True, count=count)


@router.get("/schedule", response_model=list[ScheduleSlot])
async def doctor_schedule(
    date_param: date | None = Query(None, alias="date"),
    session: AsyncSession = Depends(get_session),
    current_doctor: Doctor = Depends(get_current_doctor),
) -> list[ScheduleSlot]:
    try:
        slots = await get_doctor_schedule(session, date_param)
    except SQLAlchemyError as e:
        logger.exception("Loading doctor schedule failed")
        raise HTTPException(status_code=500, detail="Could not load schedule") from e
    return [_to_schedule_slot(s) for s in slots]


@router.get("/schedule/summary", response_model=ScheduleSummary)
async def schedule_summary(
    date_param: date = Query(..., alias="date"),
    session: AsyncSession = Depends(get_session),
    current_doctor: Doctor = Depends(get_current_doctor),
) -> ScheduleSummary:
    """Totals for the day's dashboard header."""
    try:
        counts = await get_schedule_summary(session, date_param)
    except SQLAlchemyError as e:
        logger.exception("Loading schedule summary for %s failed", date_param)
        raise HTTPException(status_code=500, detail="Could not load schedule summary") from e
    return ScheduleSummary(
        date=date_param,
        total=sum(counts.values()),
        available=counts[SlotStatus.AVAILABLE],
        booked=counts[SlotStatus.BOOKED],
        blocked=counts[SlotStatus.BLOCKED],
    )


@router.post("/slots/{slot_id}/toggle", response_model=ToggleSlotResponse)
async def toggle_slot(
    slot_id: int,
    response: Response,
    session: AsyncSession = Depends(get_session),
    current_doctor: Doctor = Depends(get_current_doctor),
) -> ToggleSlotResponse:
    try:
        slot = await toggle_slot_status(session, slot_id)
    except SQLAlchemyError:
        await session.rollback()
        logger.exception("Toggling slot %s failed", slot_id)
        response.status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
        return ToggleSlotResponse(success=False)
    if not slot:
        response.status_code = status.HTTP_404_NOT_FOUND
        return ToggleSlotResponse(success=False)
    return ToggleSlotResponse(success=True, status=slot.status)
