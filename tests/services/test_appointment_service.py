from datetime import date, datetime

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError

from booking.models.appointment import Appointment
from booking.models.slot import Slot, SlotStatus
from booking.services.appointment_service import (
    BOOKING_FAILED,
    MISSING_DETAILS,
    SLOT_UNAVAILABLE,
    book_slot,
    get_patient_appointments,
)
from booking.services.slot_service import (
    generate_slots_for_day,
    get_available_slots,
    toggle_slot_status,
)

DAY = date(2024, 6, 10)


@pytest.fixture
async def slots(session) -> list[Slot]:
    await generate_slots_for_day(session, DAY)
    await session.commit()
    result = await session.execute(select(Slot).order_by(Slot.start_time))
    return list(result.scalars().all())


async def _appointment_count(session) -> int:
    return await session.scalar(select(func.count()).select_from(Appointment))


async def test_booking_available_slot_creates_one_appointment(session, slots) -> None:
    slot = slots[0]

    result = await book_slot(session, slot.id, "Jane Doe", "5550123")

    assert result.success is True
    assert result.message is None
    refreshed = await session.get(Slot, slot.id, populate_existing=True)
    assert refreshed.status == SlotStatus.BOOKED
    appointments = (await session.execute(select(Appointment))).scalars().all()
    assert len(appointments) == 1
    assert appointments[0].id == result.appointment_id
    assert appointments[0].slot_id == slot.id
    assert appointments[0].patient_name == "Jane Doe"
    assert appointments[0].patient_phone == "5550123"


async def test_booking_strips_patient_details(session, slots) -> None:
    result = await book_slot(session, slots[0].id, "  Jane Doe ", " 5550123 ")

    assert result.success is True
    history = await get_patient_appointments(session, "5550123")
    assert history[0].patient_name == "Jane Doe"


@pytest.mark.parametrize(("name", "phone"), [("", "5550123"), ("Jane Doe", ""), ("   ", "  "), (None, None)])
async def test_booking_requires_name_and_phone(session, slots, name, phone) -> None:
    result = await book_slot(session, slots[0].id, name, phone)

    assert result.success is False
    assert result.message == MISSING_DETAILS
    assert await _appointment_count(session) == 0


async def test_booking_already_booked_slot_fails(session, slots) -> None:
    slot_id = slots[0].id
    await book_slot(session, slot_id, "Jane Doe", "5550123")

    result = await book_slot(session, slot_id, "John Roe", "5550999")

    assert result.success is False
    assert result.message == SLOT_UNAVAILABLE
    assert await _appointment_count(session) == 1
    assert await get_patient_appointments(session, "5550999") == []


async def test_booking_blocked_slot_fails_without_changes(session, slots) -> None:
    slot_id = slots[3].id
    await toggle_slot_status(session, slot_id)
    await session.commit()

    result = await book_slot(session, slot_id, "Jane Doe", "5550123")

    assert result.success is False
    assert result.message == SLOT_UNAVAILABLE
    refreshed = await session.get(Slot, slot_id, populate_existing=True)
    assert refreshed.status == SlotStatus.BLOCKED
    assert await _appointment_count(session) == 0


async def test_booking_unknown_slot_fails(session, slots) -> None:
    result = await book_slot(session, 12345, "Jane Doe", "5550123")

    assert result.success is False
    assert result.message == SLOT_UNAVAILABLE
    assert await _appointment_count(session) == 0


async def test_booking_loses_race_when_slot_taken_after_check(session_maker, slots) -> None:
    slot_id = slots[0].id
    async with session_maker() as first, session_maker() as second:
        # first session reads the slot while it is still AVAILABLE
        stale = await first.get(Slot, slot_id)
        assert stale.status == SlotStatus.AVAILABLE

        won = await book_slot(second, slot_id, "John Roe", "5550999")
        lost = await book_slot(first, slot_id, "Jane Doe", "5550123")

    assert won.success is True
    assert lost.success is False
    assert lost.message == SLOT_UNAVAILABLE
    async with session_maker() as check:
        appointments = (await check.execute(select(Appointment))).scalars().all()
        assert [(a.slot_id, a.patient_phone) for a in appointments] == [(slot_id, "5550999")]


async def test_booking_rejected_by_unique_appointment_per_slot(session, slots) -> None:
    # a failed booking rolls the session back, which expires the loaded slots
    slot_id = slots[1].id
    # an orphan appointment left on an AVAILABLE slot still blocks a second booking
    session.add(Appointment(slot_id=slot_id, patient_name="Ghost", patient_phone="000"))
    await session.commit()

    result = await book_slot(session, slot_id, "Jane Doe", "5550123")

    assert result.success is False
    assert result.message == SLOT_UNAVAILABLE
    refreshed = await session.get(Slot, slot_id, populate_existing=True)
    assert refreshed.status == SlotStatus.AVAILABLE
    assert await _appointment_count(session) == 1


async def test_booking_reports_storage_failure(session, slots, monkeypatch: pytest.MonkeyPatch) -> None:
    async def broken_commit():
        raise OperationalError("COMMIT", {}, Exception("connection lost"))

    slot_id = slots[0].id
    monkeypatch.setattr(session, "commit", broken_commit)

    result = await book_slot(session, slot_id, "Jane Doe", "5550123")

    assert result.success is False
    assert result.message == BOOKING_FAILED
    refreshed = await session.get(Slot, slot_id, populate_existing=True)
    assert refreshed.status == SlotStatus.AVAILABLE
    assert await _appointment_count(session) == 0


async def test_successful_booking_is_committed_on_return(session_maker, session, slots) -> None:
    slot_id = slots[2].id

    result = await book_slot(session, slot_id, "Jane Doe", "5550123")
    # nothing is left pending for the caller; its rollback undoes nothing
    await session.rollback()

    assert result.success is True
    async with session_maker() as other:
        slot = await other.get(Slot, slot_id)
        appointment = await other.get(Appointment, result.appointment_id)
    assert slot.status == SlotStatus.BOOKED
    assert appointment.slot_id == slot_id


async def test_patient_history_is_exact_match_and_newest_first(session, slots) -> None:
    await generate_slots_for_day(session, date(2024, 6, 12))
    await session.commit()
    later = (await session.execute(
        select(Slot).where(Slot.start_time == datetime(2024, 6, 12, 14, 0))
    )).scalar_one()
    await book_slot(session, slots[0].id, "Jane Doe", "5550123")
    await book_slot(session, later.id, "Jane Doe", "5550123")
    await book_slot(session, slots[1].id, "Jane Doe", "55501234")

    history = await get_patient_appointments(session, "5550123")

    assert [a.slot.start_time for a in history] == [
        datetime(2024, 6, 12, 14, 0),
        datetime(2024, 6, 10, 9, 0),
    ]
    assert all(a.patient_phone == "5550123" for a in history)


async def test_booking_scenario(session) -> None:
    assert await generate_slots_for_day(session, DAY) == 16
    await session.commit()
    nine = (await session.execute(
        select(Slot).where(Slot.start_time == datetime(2024, 6, 10, 9, 0))
    )).scalar_one()

    result = await book_slot(session, nine.id, "Jane Doe", "5550123")

    assert result.success is True
    assert (await session.get(Slot, nine.id, populate_existing=True)).status == SlotStatus.BOOKED
    assert len(await get_available_slots(session, DAY)) == 15
    history = await get_patient_appointments(session, "5550123")
    assert len(history) == 1
    assert history[0].slot.start_time == datetime(2024, 6, 10, 9, 0)
