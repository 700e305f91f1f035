import logging

from slotwise.core.errors import NotFoundError
from slotwise.models.event_type import EventType, EventTypeCreate, EventTypeUpdate
from slotwise.services.store import BookingStore

logger = logging.getLogger(__name__)


async def require_event_type(store: BookingStore, event_type_id: int) -> EventType:
    event_type = await store.get_event_type(event_type_id)
    if event_type is None:
        raise NotFoundError("Event type not found")
    return event_type


async def list_event_types(store: BookingStore) -> list[EventType]:
    return await store.list_event_types()


async def create_event_type(store: BookingStore, data: EventTypeCreate) -> EventType:
    event_type = await store.create_event_type(data)
    logger.info("Event type %s created (%s, %d min)", event_type.id, event_type.name, event_type.duration)
    return event_type


async def update_event_type(store: BookingStore, event_type_id: int, data: EventTypeUpdate) -> EventType:
    """
    Apply a partial update.

    Existing overrides and appointments are left as they are; a new duration or
    buffer only changes the slots offered from now on.
    """
    event_type = await require_event_type(store, event_type_id)
    changes = data.model_dump(exclude_unset=True)
    if not changes:
        return event_type
    event_type = await store.update_event_type(event_type, data)
    logger.info("Event type %s updated: %s", event_type_id, ", ".join(sorted(changes)))
    return event_type


async def delete_event_type(store: BookingStore, event_type_id: int) -> None:
    event_type = await require_event_type(store, event_type_id)
    await store.delete_event_type(event_type)
    logger.info("Event type %s deleted", event_type_id)
