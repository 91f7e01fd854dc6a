import logging

from pydantic import BaseModel
from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import contains_eager

from booking.models.appointment import Appointment
from booking.models.slot import Slot, SlotStatus
from booking.services.slot_service import get_slot

logger = logging.getLogger(__name__)

MISSING_DETAILS = "Missing details"
SLOT_UNAVAILABLE = "Slot unavailable"
BOOKING_FAILED = "Booking failed"


class BookingResult(BaseModel):
    success: bool
    message: str | None = None
    appointment_id: int | None = None


async def book_slot(
    session: AsyncSession, slot_id: int, name: str, phone: str
) -> BookingResult:
    """Book an AVAILABLE slot for a patient.

    The slot flip and the appointment insert commit together. The flip is a
    conditional update (only while still AVAILABLE) and appointments.slot_id is
    unique, so two concurrent bookings of the same slot cannot both succeed.
    Failures come back as a result, never as an exception.

    A booking is its own unit of work: the session is committed on success and
    rolled back on failure before this returns, so callers must not have other
    pending changes on it. A rollback expires every object the session holds;
    keep plain ids rather than loaded instances across a failed call.
    """
    name = (name or "").strip()
    phone = (phone or "").strip()
    if not name or not phone:
        return BookingResult(success=False, message=MISSING_DETAILS)

    try:
        slot = await get_slot(session, slot_id)
        if not slot or slot.status != SlotStatus.AVAILABLE:
            return BookingResult(success=False, message=SLOT_UNAVAILABLE)

        result = await session.execute(
            update(Slot)
            .where(Slot.id == slot_id, Slot.status == SlotStatus.AVAILABLE)
            .values(status=SlotStatus.BOOKED)
        )
        if result.rowcount != 1:
            await session.rollback()
            logger.debug("Slot %s was taken between check and update", slot_id)
            return BookingResult(success=False, message=SLOT_UNAVAILABLE)

        appointment = Appointment(slot_id=slot_id, patient_name=name, patient_phone=phone)
        session.add(appointment)
        await session.commit()
    except IntegrityError:
        await session.rollback()
        logger.debug("Slot %s already has an appointment", slot_id)
        return BookingResult(success=False, message=SLOT_UNAVAILABLE)
    except SQLAlchemyError:
        await session.rollback()
        logger.exception("Booking slot %s failed", slot_id)
        return BookingResult(success=False, message=BOOKING_FAILED)

    logger.info("Booked slot %s (appointment %s)", slot_id, appointment.id)
    return BookingResult(success=True, appointment_id=appointment.id)


async def get_patient_appointments(session: AsyncSession, phone: str) -> list[Appointment]:
    """Appointments for an exact phone match with their slot, most recent slot first."""
    result = await session.execute(
        select(Appointment)
        .join(Appointment.slot)
        .options(contains_eager(Appointment.slot))
        .where(Appointment.patient_phone == phone)
        .order_by(Slot.start_time.desc())
        .execution_options(populate_existing=True)
    )
    return list(result.scalars().all())
