from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Optional

from sqlalchemy import DateTime
from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:
    from booking.models.appointment import Appointment


class SlotStatus(str, Enum):
    AVAILABLE = "AVAILABLE"
    BOOKED = "BOOKED"
    BLOCKED = "BLOCKED"


class Slot(SQLModel, table=True):
    __tablename__ = "slots"
    id: int | None = Field(default=None, primary_key=True)
    # Naive wall-clock time in the server's local zone; one slot per start
    start_time: datetime = Field(sa_type=DateTime(timezone=False), unique=True, index=True)
    status: SlotStatus = Field(default=SlotStatus.AVAILABLE, index=True)

    appointment: Optional["Appointment"] = Relationship(
        back_populates="slot",
        sa_relationship_kwargs={"uselist": False},
    )


class SlotPublic(SQLModel):
    id: int
    start_time: datetime
    end_time: datetime
    status: SlotStatus
