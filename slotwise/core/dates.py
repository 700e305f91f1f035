"""
Date-key and timezone helpers.

Every calendar date in the service is keyed by the wall-clock year-month-day
in the event type's zone ("YYYY-MM-DD"), never by truncating a UTC ISO
timestamp. Instants are stored as naive UTC.
"""

import calendar
import re
from collections.abc import Iterator
from datetime import UTC, date, datetime, time, timedelta

import pytz

from slotwise.core.errors import ValidationError

HHMM_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"
DATE_KEY_PATTERN = r"^\d{4}-\d{2}-\d{2}$"
MONTH_PATTERN = r"^\d{4}-\d{2}$"

_HHMM_RE = re.compile(HHMM_PATTERN)
_DATE_KEY_RE = re.compile(DATE_KEY_PATTERN)
_MONTH_RE = re.compile(MONTH_PATTERN)


def parse_hhmm(value: str) -> time:
    """Parse a zero-padded 24h "HH:MM" string."""
    if not isinstance(value, str) or not _HHMM_RE.match(value):
        raise ValidationError(f"Invalid time {value!r}, expected HH:MM")
    hours, minutes = value.split(":")
    return time(int(hours), int(minutes))


def parse_date_key(value: str) -> date:
    if not isinstance(value, str) or not _DATE_KEY_RE.match(value):
        raise ValidationError(f"Invalid date {value!r}, expected YYYY-MM-DD")
    try:
        return date.fromisoformat(value)
    except ValueError as e:
        raise ValidationError(f"Invalid date {value!r}: {e}") from e


def get_tz(name: str) -> pytz.tzinfo.BaseTzInfo:
    try:
        return pytz.timezone(name)
    except pytz.UnknownTimeZoneError as e:
        raise ValidationError(f"Unknown timezone {name!r}") from e


def date_key(value: date | datetime, tz: pytz.tzinfo.BaseTzInfo | None = None) -> str:
    """
    Local calendar key for a date or instant.

    A naive datetime is taken as wall-clock time already; an aware one is
    converted into ``tz`` first so that 23:30 in Bogota stays on its own day.
    """
    if isinstance(value, datetime):
        if value.tzinfo is not None and tz is not None:
            value = value.astimezone(tz)
        value = value.date()
    return f"{value.year:04d}-{value.month:02d}-{value.day:02d}"


def day_of_week(d: date) -> int:
    """0 = Sunday ... 6 = Saturday."""
    return d.isoweekday() % 7


def iter_dates(start: date, end: date) -> Iterator[date]:
    """Every calendar date from start to end, both inclusive."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def month_bounds(month: str) -> tuple[date, date]:
    """First and last day of a "YYYY-MM" month."""
    if not isinstance(month, str) or not _MONTH_RE.match(month):
        raise ValidationError(f"Invalid month {month!r}, expected YYYY-MM")
    year, month_number = (int(part) for part in month.split("-"))
    if not 1 <= month_number <= 12:
        raise ValidationError(f"Invalid month {month!r}")
    last_day = calendar.monthrange(year, month_number)[1]
    return date(year, month_number, 1), date(year, month_number, last_day)


def localize(d: date, t: time, tz: pytz.tzinfo.BaseTzInfo) -> datetime:
    """Wall-clock ``t`` on ``d`` in ``tz`` as an aware datetime."""
    return tz.localize(datetime.combine(d, t))


def as_utc(dt: datetime) -> datetime:
    """Aware UTC datetime; naive input is taken as UTC (storage convention)."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def to_naive_utc(dt: datetime) -> datetime:
    """Convert to naive UTC for TIMESTAMP WITHOUT TIME ZONE columns."""
    if dt.tzinfo is not None:
        return dt.astimezone(UTC).replace(tzinfo=None)
    return dt


def utc_naive_now() -> datetime:
    return datetime.now(UTC).replace(tzinfo=None)
