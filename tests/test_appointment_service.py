from datetime import UTC, datetime

import pytest

from conftest import make_override
from slotwise.core.errors import ConflictError, NotFoundError, ValidationError
from slotwise.models.appointment import AppointmentCreate, AppointmentStatus
from slotwise.services.appointment_service import (
    create_appointment,
    list_appointments,
    update_appointment_status,
)
from slotwise.services.availability_service import get_available_slots


def at(hour, minute=0):
    return datetime(2025, 3, 10, hour, minute, tzinfo=UTC)


def request(event_type_id, start, name="Ada Lovelace"):
    return AppointmentCreate(
        event_type_id=event_type_id,
        start=start,
        client_name=name,
        client_email="ada@example.com",
    )


@pytest.fixture
def event_type(store):
    event_type = store.add_event_type(duration=30, buffer_time=0)
    store.set_overrides(event_type.id, [make_override("2025-03-10", ("09:00", "10:00"))])
    return event_type


@pytest.mark.asyncio
async def test_books_offered_slot(store, event_type):
    appointment = await create_appointment(store, request(event_type.id, at(9)))

    assert appointment.id is not None
    assert appointment.status == AppointmentStatus.confirmed.value
    assert appointment.start_utc == datetime(2025, 3, 10, 9, 0)
    assert appointment.end_utc == datetime(2025, 3, 10, 9, 30)


@pytest.mark.asyncio
async def test_requires_approval_books_as_pending(store):
    event_type = store.add_event_type(requires_approval=True)
    store.set_overrides(event_type.id, [make_override("2025-03-10", ("09:00", "10:00"))])

    appointment = await create_appointment(store, request(event_type.id, at(9, 30)))

    assert appointment.status == AppointmentStatus.pending.value


@pytest.mark.asyncio
async def test_naive_start_is_utc(store, event_type):
    appointment = await create_appointment(store, request(event_type.id, datetime(2025, 3, 10, 9, 30)))
    assert appointment.start_utc == datetime(2025, 3, 10, 9, 30)


@pytest.mark.asyncio
async def test_booked_slot_disappears(store, event_type):
    await create_appointment(store, request(event_type.id, at(9)))
    assert await get_available_slots(store, event_type.id, at(9).date()) == [at(9, 30)]


@pytest.mark.asyncio
async def test_second_booking_of_same_slot_conflicts(store, event_type):
    await create_appointment(store, request(event_type.id, at(9)))
    with pytest.raises(ConflictError):
        await create_appointment(store, request(event_type.id, at(9), name="Grace Hopper"))


@pytest.mark.asyncio
async def test_stale_slot_conflicts_with_overlapping_appointment(store, event_type):
    # booked through another channel after the client loaded the slot list
    store.add_appointment(event_type.id, at(9, 15), at(9, 45))
    with pytest.raises(ConflictError):
        await create_appointment(store, request(event_type.id, at(9, 30)))


@pytest.mark.asyncio
async def test_adjacent_booking_is_admitted(store, event_type):
    store.add_appointment(event_type.id, at(9), at(9, 30))
    appointment = await create_appointment(store, request(event_type.id, at(9, 30)))
    assert appointment.start_utc == datetime(2025, 3, 10, 9, 30)


@pytest.mark.asyncio
async def test_cancelled_appointment_frees_the_slot(store, event_type):
    store.add_appointment(event_type.id, at(9), at(9, 30), status="cancelled")
    appointment = await create_appointment(store, request(event_type.id, at(9)))
    assert appointment.status == AppointmentStatus.confirmed.value


@pytest.mark.asyncio
@pytest.mark.parametrize("start", [at(9, 10), at(10), at(8, 30)])
async def test_start_outside_offered_slots_is_rejected(store, event_type, start):
    with pytest.raises(ValidationError):
        await create_appointment(store, request(event_type.id, start))


@pytest.mark.asyncio
async def test_date_without_availability_is_rejected(store, event_type):
    with pytest.raises(ValidationError):
        await create_appointment(store, request(event_type.id, datetime(2025, 3, 11, 9, 0, tzinfo=UTC)))


@pytest.mark.asyncio
async def test_unknown_event_type(store):
    with pytest.raises(NotFoundError):
        await create_appointment(store, request(999, at(9)))


@pytest.mark.asyncio
async def test_closed_event_type_rejects_bookings(store):
    event_type = store.add_event_type(status="closed")
    store.set_overrides(event_type.id, [make_override("2025-03-10", ("09:00", "10:00"))])
    with pytest.raises(ValidationError):
        await create_appointment(store, request(event_type.id, at(9)))


@pytest.mark.asyncio
async def test_cancel_then_rebook(store, event_type):
    appointment = await create_appointment(store, request(event_type.id, at(9)))

    cancelled = await update_appointment_status(store, appointment.id, AppointmentStatus.cancelled)
    assert cancelled.status == AppointmentStatus.cancelled.value

    rebooked = await create_appointment(store, request(event_type.id, at(9), name="Grace Hopper"))
    assert rebooked.id != appointment.id


@pytest.mark.asyncio
async def test_reactivating_over_a_new_booking_conflicts(store, event_type):
    first = await create_appointment(store, request(event_type.id, at(9)))
    await update_appointment_status(store, first.id, AppointmentStatus.cancelled)
    await create_appointment(store, request(event_type.id, at(9), name="Grace Hopper"))

    with pytest.raises(ConflictError):
        await update_appointment_status(store, first.id, AppointmentStatus.confirmed)


@pytest.mark.asyncio
async def test_approve_pending(store):
    event_type = store.add_event_type(requires_approval=True)
    store.set_overrides(event_type.id, [make_override("2025-03-10", ("09:00", "10:00"))])
    appointment = await create_appointment(store, request(event_type.id, at(9)))

    approved = await update_appointment_status(store, appointment.id, AppointmentStatus.confirmed)

    assert approved.status == AppointmentStatus.confirmed.value


@pytest.mark.asyncio
async def test_update_unknown_appointment(store):
    with pytest.raises(NotFoundError):
        await update_appointment_status(store, 999, AppointmentStatus.cancelled)


@pytest.mark.asyncio
async def test_list_appointments_hides_cancelled_by_default(store, event_type):
    kept = store.add_appointment(event_type.id, at(9), at(9, 30))
    store.add_appointment(event_type.id, at(9, 30), at(10), status="cancelled")

    assert [a.id for a in await list_appointments(store, event_type.id)] == [kept.id]
    assert len(await list_appointments(store, event_type.id, include_cancelled=True)) == 2


@pytest.mark.asyncio
async def test_list_appointments_unknown_event_type(store):
    with pytest.raises(NotFoundError):
        await list_appointments(store, 999)
