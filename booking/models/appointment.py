from datetime import UTC, datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import DateTime
from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:
    from booking.models.slot import Slot


def _utc_naive_now() -> datetime:
    """Naive UTC for TIMESTAMP WITHOUT TIME ZONE columns."""
    return datetime.now(UTC).replace(tzinfo=None)


class Appointment(SQLModel, table=True):
    __tablename__ = "appointments"
    id: int | None = Field(default=None, primary_key=True)
    slot_id: int = Field(foreign_key="slots.id", unique=True, index=True)  # one booking per slot
    patient_name: str
    patient_phone: str = Field(index=True)
    created_at: datetime = Field(default_factory=_utc_naive_now, sa_type=DateTime(timezone=False))

    slot: Optional["Slot"] = Relationship(back_populates="appointment")


class AppointmentPublic(SQLModel):
    id: int
    slot_id: int
    patient_name: str
    patient_phone: str
    created_at: datetime
