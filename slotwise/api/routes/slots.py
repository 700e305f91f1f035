from datetime import date

from fastapi import APIRouter, Depends, Query

from slotwise.api.deps import get_store
from slotwise.api.schemas.availability import AvailableDatesResponse, AvailableSlotsResponse, SlotInfo
from slotwise.core.dates import MONTH_PATTERN
from slotwise.services.availability_service import get_available_dates, get_slot_intervals
from slotwise.services.store import BookingStore

router = APIRouter(prefix="/event-types", tags=["slots"])


@router.get("/{event_type_id}/slots", response_model=AvailableSlotsResponse)
async def available_slots(
    event_type_id: int,
    date_param: date = Query(..., alias="date"),
    store: BookingStore = Depends(get_store),
) -> AvailableSlotsResponse:
    """Open slots on a local calendar date; an unknown event type simply has none."""
    intervals = await get_slot_intervals(store, event_type_id, date_param)
    return AvailableSlotsResponse(
        date=date_param.isoformat(),
        slots=[SlotInfo(start=start, end=end) for start, end in intervals],
    )


@router.get("/{event_type_id}/dates", response_model=AvailableDatesResponse)
async def available_dates(
    event_type_id: int,
    month: str | None = Query(None, pattern=MONTH_PATTERN),
    store: BookingStore = Depends(get_store),
) -> AvailableDatesResponse:
    dates = await get_available_dates(store, event_type_id, month=month)
    return AvailableDatesResponse(month=month, dates=dates)
