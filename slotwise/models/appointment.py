from datetime import datetime
from enum import Enum

from pydantic import EmailStr, NaiveDatetime
from sqlmodel import Field, SQLModel

from slotwise.core.dates import utc_naive_now


class AppointmentStatus(str, Enum):
    pending = "pending"
    confirmed = "confirmed"
    cancelled = "cancelled"
    completed = "completed"


class Appointment(SQLModel, table=True):
    __tablename__ = "appointments"
    id: int | None = Field(default=None, primary_key=True)
    event_type_id: int = Field(foreign_key="event_types.id", index=True)
    start_utc: NaiveDatetime = Field(index=True)
    end_utc: NaiveDatetime
    status: str = Field(default=AppointmentStatus.confirmed.value, max_length=20, index=True)
    client_name: str
    client_email: str
    client_phone: str | None = None
    notes: str | None = None
    created_at: NaiveDatetime = Field(default_factory=utc_naive_now)
    updated_at: NaiveDatetime = Field(default_factory=utc_naive_now)


class AppointmentCreate(SQLModel):
    event_type_id: int
    start: datetime  # naive values are taken as UTC
    client_name: str
    client_email: EmailStr
    client_phone: str | None = None
    notes: str | None = None


class AppointmentPublic(SQLModel):
    id: int
    event_type_id: int
    start_utc: datetime
    end_utc: datetime
    status: AppointmentStatus
    client_name: str
    client_email: str
    client_phone: str | None = None
    notes: str | None = None
    created_at: datetime
