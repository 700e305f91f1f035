from datetime import datetime
from enum import Enum

from pydantic import NaiveDatetime, field_validator
from sqlmodel import Field, SQLModel

from slotwise.core.config import settings
from slotwise.core.dates import get_tz, utc_naive_now


class EventTypeStatus(str, Enum):
    online = "online"
    private = "private"
    archived = "archived"
    closed = "closed"


# archived/closed event types keep answering queries, with zero slots
BOOKABLE_STATUSES = frozenset({EventTypeStatus.online.value, EventTypeStatus.private.value})


def _clean_name(value: str) -> str:
    if not value.strip():
        raise ValueError("name must not be blank")
    return value.strip()


def _check_duration(value: int) -> int:
    if not settings.min_duration_minutes <= value <= settings.max_duration_minutes:
        raise ValueError(
            f"duration must be between {settings.min_duration_minutes} "
            f"and {settings.max_duration_minutes} minutes"
        )
    return value


def _check_buffer(value: int) -> int:
    if value < 0:
        raise ValueError("buffer_time must not be negative")
    return value


def _check_timezone(value: str) -> str:
    get_tz(value)
    return value


def _check_status(value: str) -> str:
    return EventTypeStatus(value).value


class EventTypeBase(SQLModel):
    name: str = Field(max_length=200)
    description: str | None = None
    duration: int  # minutes
    buffer_time: int = 0  # minutes
    color: str | None = Field(default=None, max_length=20)
    requires_approval: bool = False
    timezone: str = Field(default_factory=lambda: settings.default_timezone, max_length=64)
    status: str = Field(default=EventTypeStatus.online.value, max_length=20)


class EventType(EventTypeBase, table=True):
    __tablename__ = "event_types"
    id: int | None = Field(default=None, primary_key=True)
    created_at: NaiveDatetime = Field(default_factory=utc_naive_now)

    @property
    def is_bookable(self) -> bool:
        return self.status in BOOKABLE_STATUSES


class EventTypeCreate(EventTypeBase):
    @field_validator("name")
    @classmethod
    def _name(cls, value: str) -> str:
        return _clean_name(value)

    @field_validator("duration")
    @classmethod
    def _duration(cls, value: int) -> int:
        return _check_duration(value)

    @field_validator("buffer_time")
    @classmethod
    def _buffer(cls, value: int) -> int:
        return _check_buffer(value)

    @field_validator("timezone")
    @classmethod
    def _timezone(cls, value: str) -> str:
        return _check_timezone(value)

    @field_validator("status")
    @classmethod
    def _status(cls, value: str) -> str:
        return _check_status(value)


class EventTypeUpdate(SQLModel):
    """Partial update; only fields present in the request are applied."""

    name: str | None = Field(default=None, max_length=200)
    description: str | None = None
    duration: int | None = None
    buffer_time: int | None = None
    color: str | None = Field(default=None, max_length=20)
    requires_approval: bool | None = None
    timezone: str | None = Field(default=None, max_length=64)
    status: str | None = Field(default=None, max_length=20)

    @field_validator("name", "duration", "buffer_time", "requires_approval", "timezone", "status")
    @classmethod
    def _not_null(cls, value, info):
        if value is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return value

    @field_validator("name")
    @classmethod
    def _name(cls, value: str) -> str:
        return _clean_name(value)

    @field_validator("duration")
    @classmethod
    def _duration(cls, value: int) -> int:
        return _check_duration(value)

    @field_validator("buffer_time")
    @classmethod
    def _buffer(cls, value: int) -> int:
        return _check_buffer(value)

    @field_validator("timezone")
    @classmethod
    def _timezone(cls, value: str) -> str:
        return _check_timezone(value)

    @field_validator("status")
    @classmethod
    def _status(cls, value: str) -> str:
        return _check_status(value)


class EventTypePublic(EventTypeBase):
    id: int
    created_at: datetime
