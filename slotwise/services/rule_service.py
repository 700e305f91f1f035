import logging
from collections.abc import Sequence

from slotwise.core.errors import ConflictError, NotFoundError
from slotwise.models.availability import DateOverride, RecurringRule
from slotwise.services import rule_expander
from slotwise.services.event_type_service import require_event_type
from slotwise.services.store import BookingStore, validate_overrides

logger = logging.getLogger(__name__)


async def get_availability(
    store: BookingStore, event_type_id: int
) -> tuple[list[DateOverride], list[RecurringRule]]:
    await require_event_type(store, event_type_id)
    overrides = await store.get_overrides_for_event_type(event_type_id)
    rules = await store.get_rules(event_type_id)
    return overrides, rules


async def replace_overrides(
    store: BookingStore, event_type_id: int, overrides: Sequence[DateOverride]
) -> list[DateOverride]:
    """Replace the whole override set as authored by the organizer."""
    await require_event_type(store, event_type_id)
    validated = validate_overrides(overrides)
    await store.save_overrides(event_type_id, validated)
    logger.info("Event type %s: %d override(s) saved", event_type_id, len(validated))
    return validated


async def add_rule(store: BookingStore, event_type_id: int, rule: RecurringRule) -> list[DateOverride]:
    await require_event_type(store, event_type_id)
    rules = await store.get_rules(event_type_id)
    if any(existing.id == rule.id for existing in rules):
        raise ConflictError(f"Rule {rule.id} already exists")
    overrides = await store.get_overrides_for_event_type(event_type_id)
    expanded = rule_expander.expand([rule], overrides)
    await store.save_rule(event_type_id, rule)
    await store.save_overrides(event_type_id, expanded)
    logger.info(
        "Event type %s: rule %s added, %d override(s) now",
        event_type_id,
        rule.id,
        len(expanded),
    )
    return expanded


async def delete_rule(store: BookingStore, event_type_id: int, rule_id: str) -> list[DateOverride]:
    await require_event_type(store, event_type_id)
    if not await store.delete_rule(event_type_id, rule_id):
        raise NotFoundError("Rule not found")
    overrides = await store.get_overrides_for_event_type(event_type_id)
    remaining = rule_expander.remove_rule(rule_id, overrides)
    await store.save_overrides(event_type_id, remaining)
    logger.info(
        "Event type %s: rule %s removed, %d override(s) dropped",
        event_type_id,
        rule_id,
        len(overrides) - len(remaining),
    )
    return remaining


async def reconcile_rules(store: BookingStore, event_type_id: int) -> list[DateOverride]:
    """Re-apply the stored rules, e.g. after overrides were edited by hand."""
    await require_event_type(store, event_type_id)
    rules = await store.get_rules(event_type_id)
    overrides = await store.get_overrides_for_event_type(event_type_id)
    reconciled = rule_expander.reconcile(rules, overrides)
    await store.save_overrides(event_type_id, reconciled)
    return reconciled
