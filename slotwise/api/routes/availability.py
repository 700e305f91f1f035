from fastapi import APIRouter, Depends, status

from slotwise.api.deps import get_store
from slotwise.api.schemas.availability import AvailabilityResponse, OverridesResponse
from slotwise.models.availability import DateOverride, RecurringRule
from slotwise.services.rule_service import (
    add_rule,
    delete_rule,
    get_availability,
    reconcile_rules,
    replace_overrides,
)
from slotwise.services.store import BookingStore

router = APIRouter(prefix="/event-types", tags=["availability"])


@router.get("/{event_type_id}/availability", response_model=AvailabilityResponse)
async def read_availability(
    event_type_id: int,
    store: BookingStore = Depends(get_store),
) -> AvailabilityResponse:
    overrides, rules = await get_availability(store, event_type_id)
    return AvailabilityResponse(overrides=overrides, rules=rules)


@router.put("/{event_type_id}/availability/overrides", response_model=OverridesResponse)
async def put_overrides(
    event_type_id: int,
    body: list[DateOverride],
    store: BookingStore = Depends(get_store),
) -> OverridesResponse:
    overrides = await replace_overrides(store, event_type_id, body)
    return OverridesResponse(overrides=overrides)


@router.post(
    "/{event_type_id}/availability/rules",
    response_model=OverridesResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_rule(
    event_type_id: int,
    body: RecurringRule,
    store: BookingStore = Depends(get_store),
) -> OverridesResponse:
    overrides = await add_rule(store, event_type_id, body)
    return OverridesResponse(overrides=overrides)


@router.delete("/{event_type_id}/availability/rules/{rule_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_rule(
    event_type_id: int,
    rule_id: str,
    store: BookingStore = Depends(get_store),
) -> None:
    await delete_rule(store, event_type_id, rule_id)


@router.post("/{event_type_id}/availability/rules/reconcile", response_model=OverridesResponse)
async def reconcile(
    event_type_id: int,
    store: BookingStore = Depends(get_store),
) -> OverridesResponse:
    overrides = await reconcile_rules(store, event_type_id)
    return OverridesResponse(overrides=overrides)
