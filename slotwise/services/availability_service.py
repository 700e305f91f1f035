import logging
from datetime import date, datetime, time, timedelta

import pytz

from slotwise.core.config import settings
from slotwise.core.dates import get_tz, localize, month_bounds, to_naive_utc
from slotwise.models.event_type import EventType
from slotwise.services.slot_service import available_dates, compute_slots
from slotwise.services.store import BookingStore

logger = logging.getLogger(__name__)


def _day_span(start: date, end: date, tz: pytz.tzinfo.BaseTzInfo) -> tuple[datetime, datetime]:
    """Naive UTC bounds covering the local days start..end."""
    span_start = localize(start, time.min, tz)
    span_end = localize(end + timedelta(days=1), time.min, tz)
    return to_naive_utc(span_start), to_naive_utc(span_end)


async def _queryable_event_type(store: BookingStore, event_type_id: int) -> EventType | None:
    """Event type to answer availability for; None means no availability."""
    event_type = await store.get_event_type(event_type_id)
    if event_type is None:
        logger.debug("Event type %s not found, no availability", event_type_id)
        return None
    if not event_type.is_bookable:
        logger.debug("Event type %s is %s, no availability", event_type_id, event_type.status)
        return None
    return event_type


async def get_slot_intervals(
    store: BookingStore, event_type_id: int, day: date
) -> list[tuple[datetime, datetime]]:
    """Open (start, end) intervals on ``day`` (a local calendar date of the event type)."""
    event_type = await _queryable_event_type(store, event_type_id)
    if event_type is None:
        return []
    overrides = await store.get_overrides_for_event_type(event_type_id)
    if not overrides:
        return []
    tz = get_tz(event_type.timezone)
    span_start, span_end = _day_span(day, day, tz)
    appointments = await store.get_appointments_for_event_type(
        event_type_id, excluding_cancelled=True, start=span_start, end=span_end
    )
    slots = compute_slots(event_type, overrides, day, appointments, tz)
    logger.debug("Event type %s on %s: %d slot(s)", event_type_id, day, len(slots))
    duration = timedelta(minutes=event_type.duration)
    return [(start, start + duration) for start in slots]


async def get_available_slots(store: BookingStore, event_type_id: int, day: date) -> list[datetime]:
    """Bookable start instants on ``day``."""
    return [start for start, _ in await get_slot_intervals(store, event_type_id, day)]


async def get_available_dates(
    store: BookingStore,
    event_type_id: int,
    month: str | None = None,
    today: date | None = None,
) -> list[str]:
    """
    Dates with at least one open slot.

    With ``month`` ("YYYY-MM") the whole month is scanned; otherwise from
    today through ``settings.booking_horizon_days``. Overrides and
    appointments are fetched once for the range.
    """
    if month is not None:
        start, end = month_bounds(month)
    event_type = await _queryable_event_type(store, event_type_id)
    if event_type is None:
        return []
    tz = get_tz(event_type.timezone)
    if month is None:
        start = today or datetime.now(tz).date()
        end = start + timedelta(days=settings.booking_horizon_days)
    overrides = await store.get_overrides_for_event_type(event_type_id)
    if not overrides:
        return []
    span_start, span_end = _day_span(start, end, tz)
    appointments = await store.get_appointments_for_event_type(
        event_type_id, excluding_cancelled=True, start=span_start, end=span_end
    )
    return available_dates(event_type, overrides, appointments, start, end, tz)
