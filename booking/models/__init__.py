from booking.models.doctor import Doctor, DoctorCreate, DoctorPublic
from booking.models.slot import Slot, SlotPublic, SlotStatus
from booking.models.appointment import Appointment, AppointmentPublic

__all__ = [
    "Doctor",
    "DoctorCreate",
    "DoctorPublic",
    "Slot",
    "SlotPublic",
    "SlotStatus",
    "Appointment",
    "AppointmentPublic",
]
