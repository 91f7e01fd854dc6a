from datetime import date

from pydantic import BaseModel

from booking.models.appointment import AppointmentPublic
from booking.models.slot import SlotPublic, SlotStatus


class GenerateSlotsRequest(BaseModel):
    date: date


class GenerateSlotsResponse(BaseModel):
    success: bool
    count: int


class ToggleSlotResponse(BaseModel):
    success: bool
    status: SlotStatus | None = None


class ScheduleSlot(SlotPublic):
    """Doctor view: the appointment is present only on BOOKED slots."""
    appointment: AppointmentPublic | None = None


class AppointmentWithSlot(AppointmentPublic):
    slot: SlotPublic


class BookingResponse(BaseModel):
    success: bool
    message: str | None = None
    appointment_id: int | None = None


class ScheduleSummary(BaseModel):
    date: date
    total: int
    available: int
    booked: int
    blocked: int
