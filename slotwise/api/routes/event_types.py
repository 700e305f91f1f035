from fastapi import APIRouter, Depends, status

from slotwise.api.deps import get_store
from slotwise.models.event_type import EventType, EventTypeCreate, EventTypePublic, EventTypeUpdate
from slotwise.services.event_type_service import (
    create_event_type,
    delete_event_type,
    list_event_types,
    require_event_type,
    update_event_type,
)
from slotwise.services.store import BookingStore

router = APIRouter(prefix="/event-types", tags=["event-types"])


def _to_public(event_type: EventType) -> EventTypePublic:
    return EventTypePublic.model_validate(event_type, from_attributes=True)


@router.get("", response_model=list[EventTypePublic])
async def read_event_types(store: BookingStore = Depends(get_store)) -> list[EventTypePublic]:
    return [_to_public(event_type) for event_type in await list_event_types(store)]


@router.post("", response_model=EventTypePublic, status_code=status.HTTP_201_CREATED)
async def add_event_type(
    body: EventTypeCreate,
    store: BookingStore = Depends(get_store),
) -> EventTypePublic:
    return _to_public(await create_event_type(store, body))


@router.get("/{event_type_id}", response_model=EventTypePublic)
async def read_event_type(
    event_type_id: int,
    store: BookingStore = Depends(get_store),
) -> EventTypePublic:
    return _to_public(await require_event_type(store, event_type_id))


@router.patch("/{event_type_id}", response_model=EventTypePublic)
async def edit_event_type(
    event_type_id: int,
    body: EventTypeUpdate,
    store: BookingStore = Depends(get_store),
) -> EventTypePublic:
    return _to_public(await update_event_type(store, event_type_id, body))


@router.delete("/{event_type_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_event_type(
    event_type_id: int,
    store: BookingStore = Depends(get_store),
) -> None:
    await delete_event_type(store, event_type_id)
