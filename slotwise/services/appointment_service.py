import logging
from datetime import timedelta

from slotwise.core.dates import as_utc, get_tz, to_naive_utc
from slotwise.core.errors import ConflictError, NotFoundError, ValidationError
from slotwise.models.appointment import Appointment, AppointmentCreate, AppointmentStatus
from slotwise.services.event_type_service import require_event_type
from slotwise.services.slot_service import compute_slots
from slotwise.services.store import BookingStore

logger = logging.getLogger(__name__)


async def create_appointment(store: BookingStore, data: AppointmentCreate) -> Appointment:
    """
    Admit a booking.

    The slot list a client saw may be stale, so the start is re-checked
    against the configured windows here and the store re-checks overlap with
    current appointments atomically before inserting.
    """
    event_type = await require_event_type(store, data.event_type_id)
    if not event_type.is_bookable:
        raise ValidationError(f"Event type is {event_type.status} and not accepting bookings")

    tz = get_tz(event_type.timezone)
    start = as_utc(data.start)
    end = start + timedelta(minutes=event_type.duration)

    overrides = await store.get_overrides_for_event_type(event_type.id)
    offered = {as_utc(slot) for slot in compute_slots(event_type, overrides, start.astimezone(tz), (), tz)}
    if start not in offered:
        raise ValidationError("Requested start time is not an offered slot")

    status = AppointmentStatus.pending if event_type.requires_approval else AppointmentStatus.confirmed
    appointment = Appointment(
        event_type_id=event_type.id,
        start_utc=to_naive_utc(start),
        end_utc=to_naive_utc(end),
        status=status.value,
        client_name=data.client_name,
        client_email=str(data.client_email),
        client_phone=data.client_phone or None,
        notes=data.notes or None,
    )
    try:
        appointment = await store.insert_appointment_if_free(appointment)
    except ConflictError:
        logger.warning("Booking conflict for event type %s at %s", event_type.id, start.isoformat())
        raise
    logger.info(
        "Appointment %s booked for event type %s at %s (%s)",
        appointment.id,
        event_type.id,
        start.isoformat(),
        appointment.status,
    )
    return appointment


async def list_appointments(
    store: BookingStore, event_type_id: int, include_cancelled: bool = False
) -> list[Appointment]:
    await require_event_type(store, event_type_id)
    return await store.get_appointments_for_event_type(
        event_type_id, excluding_cancelled=not include_cancelled
    )


async def update_appointment_status(
    store: BookingStore, appointment_id: int, status: AppointmentStatus
) -> Appointment:
    """Approve, cancel or complete; bringing back a cancelled booking re-checks conflicts."""
    appointment = await store.get_appointment(appointment_id)
    if appointment is None:
        raise NotFoundError("Appointment not found")
    if appointment.status == status.value:
        return appointment
    reactivating = (
        appointment.status == AppointmentStatus.cancelled.value
        and status != AppointmentStatus.cancelled
    )
    appointment = await store.set_appointment_status(appointment, status, check_conflict=reactivating)
    logger.info("Appointment %s is now %s", appointment.id, appointment.status)
    return appointment
