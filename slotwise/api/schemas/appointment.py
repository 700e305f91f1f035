from datetime import datetime

from pydantic import BaseModel, EmailStr, Field

from slotwise.models.appointment import AppointmentStatus


class BookAppointmentRequest(BaseModel):
    event_type_id: int
    start: datetime
    client_name: str = Field(min_length=1, max_length=200)
    client_email: EmailStr
    client_phone: str | None = None
    notes: str | None = None


class AppointmentStatusUpdate(BaseModel):
    status: AppointmentStatus
