from fastapi import APIRouter, Depends, Query, status

from slotwise.api.deps import get_store
from slotwise.api.schemas.appointment import AppointmentStatusUpdate, BookAppointmentRequest
from slotwise.models.appointment import Appointment, AppointmentCreate, AppointmentPublic
from slotwise.services.appointment_service import (
    create_appointment,
    list_appointments,
    update_appointment_status,
)
from slotwise.services.store import BookingStore

router = APIRouter(tags=["appointments"])


def _to_public(a: Appointment) -> AppointmentPublic:
    """Build public response; datetimes stay naive UTC as stored."""
    return AppointmentPublic(
        id=a.id,
        event_type_id=a.event_type_id,
        start_utc=a.start_utc,
        end_utc=a.end_utc,
        status=a.status,
        client_name=a.client_name,
        client_email=a.client_email,
        client_phone=a.client_phone,
        notes=a.notes,
        created_at=a.created_at,
    )


@router.post("/appointments", response_model=AppointmentPublic, status_code=status.HTTP_201_CREATED)
async def book_appointment(
    body: BookAppointmentRequest,
    store: BookingStore = Depends(get_store),
) -> AppointmentPublic:
    data = AppointmentCreate(
        event_type_id=body.event_type_id,
        start=body.start,
        client_name=body.client_name,
        client_email=body.client_email,
        client_phone=body.client_phone,
        notes=body.notes,
    )
    appointment = await create_appointment(store, data)
    return _to_public(appointment)


@router.get("/event-types/{event_type_id}/appointments", response_model=list[AppointmentPublic])
async def list_event_type_appointments(
    event_type_id: int,
    include_cancelled: bool = Query(False),
    store: BookingStore = Depends(get_store),
) -> list[AppointmentPublic]:
    appointments = await list_appointments(store, event_type_id, include_cancelled=include_cancelled)
    return [_to_public(a) for a in appointments]


@router.patch("/appointments/{appointment_id}", response_model=AppointmentPublic)
async def change_appointment_status(
    appointment_id: int,
    body: AppointmentStatusUpdate,
    store: BookingStore = Depends(get_store),
) -> AppointmentPublic:
    appointment = await update_appointment_status(store, appointment_id, body.status)
    return _to_public(appointment)
