import logging
from datetime import date, datetime, time, timedelta

from sqlalchemy import func, insert, select, update
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from booking.core.config import settings
from booking.models.slot import Slot, SlotStatus

logger = logging.getLogger(__name__)

# AVAILABLE <-> BLOCKED; BOOKED slots are never toggled so an appointment is never orphaned
_TOGGLE_TARGETS = {
    SlotStatus.AVAILABLE: SlotStatus.BLOCKED,
    SlotStatus.BLOCKED: SlotStatus.AVAILABLE,
}


def day_bounds(d: date) -> tuple[datetime, datetime]:
    """Start and end of the given day, both inclusive."""
    return datetime.combine(d, time.min), datetime.combine(d, time.max)


def slot_times_for_date(d: date) -> list[datetime]:
    """Candidate slot start times for the given date (server local time, business hours)."""
    slots: list[datetime] = []
    start = datetime(d.year, d.month, d.day, settings.business_start_hour, 0, 0)
    end = datetime(d.year, d.month, d.day, settings.business_end_hour, 0, 0)
    delta = timedelta(minutes=settings.slot_duration_minutes)
    current = start
    while current < end:
        slots.append(current)
        current += delta
    return slots


def slot_end_time(slot: Slot) -> datetime:
    return slot.start_time + timedelta(minutes=settings.slot_duration_minutes)


async def get_existing_slot_starts(
    session: AsyncSession, start_inclusive: datetime, end_inclusive: datetime
) -> set[datetime]:
    result = await session.execute(
        select(Slot.start_time).where(
            Slot.start_time >= start_inclusive,
            Slot.start_time <= end_inclusive,
        )
    )
    return {row[0] for row in result.all()}


def _insert_ignoring_duplicates(session: AsyncSession, rows: list[dict]):
    """INSERT ... ON CONFLICT (start_time) DO NOTHING for the dialects we deploy on."""
    dialect = session.get_bind().dialect.name
    if dialect == "postgresql":
        return pg_insert(Slot.__table__).values(rows).on_conflict_do_nothing(index_elements=["start_time"])
    if dialect == "sqlite":
        return sqlite_insert(Slot.__table__).values(rows).on_conflict_do_nothing(index_elements=["start_time"])
    return insert(Slot.__table__).values(rows)


async def generate_slots_for_day(session: AsyncSession, d: date) -> int:
    """Create the AVAILABLE slots for `d` that do not exist yet. Returns the number created.

    Existing start times are read once and the rest is written as one insert that
    skips conflicts on the unique start_time, so repeated or concurrent calls for
    the same day never produce duplicates.
    """
    candidates = slot_times_for_date(d)
    if not candidates:
        return 0
    existing = await get_existing_slot_starts(session, candidates[0], candidates[-1])
    missing = [t for t in candidates if t not in existing]
    if not missing:
        return 0
    rows = [{"start_time": t, "status": SlotStatus.AVAILABLE} for t in missing]
    result = await session.execute(_insert_ignoring_duplicates(session, rows))
    await session.flush()
    created = result.rowcount if result.rowcount is not None and result.rowcount >= 0 else len(missing)
    logger.info("Generated %d slot(s) for %s", created, d.isoformat())
    return created


async def get_doctor_schedule(session: AsyncSession, d: date | None = None) -> list[Slot]:
    """All slots (optionally for one day) with their appointment loaded, earliest first."""
    q = (
        select(Slot)
        .options(selectinload(Slot.appointment))
        .order_by(Slot.start_time)
        .execution_options(populate_existing=True)
    )
    if d is not None:
        start, end = day_bounds(d)
        q = q.where(Slot.start_time >= start, Slot.start_time <= end)
    result = await session.execute(q)
    return list(result.scalars().all())


async def get_available_slots(session: AsyncSession, d: date) -> list[Slot]:
    start, end = day_bounds(d)
    result = await session.execute(
        select(Slot)
        .where(
            Slot.start_time >= start,
            Slot.start_time <= end,
            Slot.status == SlotStatus.AVAILABLE,
        )
        .order_by(Slot.start_time)
        .execution_options(populate_existing=True)
    )
    return list(result.scalars().all())


async def get_schedule_summary(session: AsyncSession, d: date) -> dict[SlotStatus, int]:
    """Slot count per status for the day; statuses with no slots count as 0."""
    start, end = day_bounds(d)
    result = await session.execute(
        select(Slot.status, func.count(Slot.id))
        .where(Slot.start_time >= start, Slot.start_time <= end)
        .group_by(Slot.status)
    )
    counts = {s: 0 for s in SlotStatus}
    for slot_status, n in result.all():
        counts[SlotStatus(slot_status)] = n
    return counts


async def get_slot(session: AsyncSession, slot_id: int) -> Slot | None:
    result = await session.execute(select(Slot).where(Slot.id == slot_id))
    return result.scalar_one_or_none()


async def toggle_slot_status(session: AsyncSession, slot_id: int) -> Slot | None:
    """Flip AVAILABLE <-> BLOCKED. BOOKED is left unchanged. None if the slot does not exist.

    The write only applies if the status is still the one read, so a booking that
    lands in between is never overwritten.
    """
    slot = await get_slot(session, slot_id)
    if not slot:
        return None
    target = _TOGGLE_TARGETS.get(slot.status)
    if target is None:
        return slot
    await session.execute(
        update(Slot)
        .where(Slot.id == slot_id, Slot.status == slot.status)
        .values(status=target)
    )
    await session.flush()
    await session.refresh(slot)
    return slot
