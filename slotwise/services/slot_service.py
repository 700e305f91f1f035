import logging
from collections.abc import Iterable, Sequence
from datetime import UTC, date, datetime, timedelta
from typing import Protocol

import pytz

from slotwise.core.dates import as_utc, date_key, get_tz, iter_dates, localize, parse_date_key, parse_hhmm
from slotwise.core.errors import ValidationError
from slotwise.models.appointment import AppointmentStatus
from slotwise.models.availability import DateOverride, TimeSlot

logger = logging.getLogger(__name__)


class SlotSettings(Protocol):
    duration: int
    buffer_time: int


class BookedInterval(Protocol):
    start_utc: datetime
    end_utc: datetime
    status: str


def _check_cadence(event_type: SlotSettings) -> tuple[timedelta, timedelta]:
    duration = event_type.duration
    buffer_time = event_type.buffer_time or 0
    if not isinstance(duration, int) or duration <= 0:
        raise ValidationError(f"duration must be a positive number of minutes, got {duration!r}")
    if not isinstance(buffer_time, int) or buffer_time < 0:
        raise ValidationError(f"buffer_time must be zero or more minutes, got {buffer_time!r}")
    return timedelta(minutes=duration), timedelta(minutes=buffer_time)


def _resolve_tz(event_type: SlotSettings, tz: pytz.tzinfo.BaseTzInfo | str | None) -> pytz.tzinfo.BaseTzInfo:
    if tz is None:
        tz = getattr(event_type, "timezone", None) or "UTC"
    if isinstance(tz, str):
        return get_tz(tz)
    return tz


def overlaps(start: datetime, end: datetime, other_start: datetime, other_end: datetime) -> bool:
    """Half-open overlap: touching endpoints do not overlap."""
    return start < other_end and end > other_start


def active_intervals(appointments: Iterable[BookedInterval]) -> list[tuple[datetime, datetime]]:
    """UTC intervals of every appointment that still holds its time."""
    return [
        (as_utc(appt.start_utc), as_utc(appt.end_utc))
        for appt in appointments
        if appt.status != AppointmentStatus.cancelled.value
    ]


def is_conflicting(start: datetime, end: datetime, appointments: Iterable[BookedInterval]) -> bool:
    start, end = as_utc(start), as_utc(end)
    return any(overlaps(start, end, a_start, a_end) for a_start, a_end in active_intervals(appointments))


def find_override(overrides: Iterable[DateOverride], key: str) -> DateOverride | None:
    for override in overrides:
        if override.date == key:
            return override
    return None


def _window_slots(
    day: date,
    slot: TimeSlot,
    duration: timedelta,
    buffer_time: timedelta,
    tz: pytz.tzinfo.BaseTzInfo,
    booked: Sequence[tuple[datetime, datetime]],
) -> list[datetime]:
    start_time = parse_hhmm(slot.start_time)
    end_time = parse_hhmm(slot.end_time)
    if start_time >= end_time:
        raise ValidationError(f"Window {slot.start_time}-{slot.end_time} ends before it starts")

    # Walk in absolute time so a DST change inside a window keeps a fixed cadence
    window_start = localize(day, start_time, tz).astimezone(UTC)
    window_end = localize(day, end_time, tz).astimezone(UTC)
    step = duration + buffer_time

    slots: list[datetime] = []
    cursor = window_start
    while cursor + duration <= window_end:
        candidate_end = cursor + duration
        if not any(overlaps(cursor, candidate_end, a_start, a_end) for a_start, a_end in booked):
            slots.append(cursor.astimezone(tz))
        cursor += step
    return slots


def compute_slots(
    event_type: SlotSettings,
    overrides: Iterable[DateOverride],
    target_date: date | datetime,
    appointments: Iterable[BookedInterval] = (),
    tz: pytz.tzinfo.BaseTzInfo | str | None = None,
) -> list[datetime]:
    """
    Bookable start instants for one day.

    Args:
        event_type: anything with ``duration`` and ``buffer_time`` (minutes)
        overrides: the event type's date overrides
        target_date: the day; aware datetimes are keyed in ``tz``
        appointments: existing appointments; cancelled ones are ignored
        tz: zone the overrides were authored in (defaults to the event type's)

    Returns:
        list[datetime]: aware datetimes in ``tz``, ascending. Overlapping
        windows are not merged, so the same start may appear twice.
    """
    duration, buffer_time = _check_cadence(event_type)
    tz = _resolve_tz(event_type, tz)

    key = date_key(target_date, tz)
    override = find_override(overrides, key)
    if override is None or not override.available or not override.time_slots:
        return []

    day = parse_date_key(key)
    booked = active_intervals(appointments)

    slots: list[datetime] = []
    for slot in override.time_slots:
        slots.extend(_window_slots(day, slot, duration, buffer_time, tz, booked))

    slots.sort()
    return slots


def available_dates(
    event_type: SlotSettings,
    overrides: Iterable[DateOverride],
    appointments: Iterable[BookedInterval],
    start_date: date,
    end_date: date,
    tz: pytz.tzinfo.BaseTzInfo | str | None = None,
) -> list[str]:
    """Date keys between start_date and end_date (inclusive) with at least one slot."""
    overrides = list(overrides)
    appointments = list(appointments)
    tz = _resolve_tz(event_type, tz)
    dates: list[str] = []
    for day in iter_dates(start_date, end_date):
        if compute_slots(event_type, overrides, day, appointments, tz):
            dates.append(date_key(day))
    logger.debug("available_dates %s..%s: %d day(s) open", start_date, end_date, len(dates))
    return dates


def slot_count(window_minutes: int, duration: int, buffer_time: int = 0) -> int:
    """Closed-form number of slots a conflict-free window yields."""
    if duration <= 0:
        raise ValidationError("duration must be positive")
    if window_minutes < duration:
        return 0
    return (window_minutes - duration) // (duration + buffer_time) + 1
