"""
Recurring rule expansion.

Rules are an authoring convenience: they are expanded into concrete dated
overrides before being saved and are never consulted at booking time. Every
generated slot carries the ids of the rules that produced it, so rules can be
added, removed and re-applied without touching manually authored dates.

All functions are pure and return new override lists.
"""

from collections.abc import Iterable

from slotwise.core.dates import date_key, day_of_week, iter_dates
from slotwise.models.availability import DateOverride, RecurringRule, TimeSlot


def _merge_slot(slots: list[TimeSlot], new_slot: TimeSlot) -> list[TimeSlot]:
    """Union ``new_slot`` into ``slots``; identical windows share provenance."""
    merged: list[TimeSlot] = []
    found = False
    for slot in slots:
        if slot.window == new_slot.window:
            found = True
            rule_ids = sorted(set(slot.rule_ids) | set(new_slot.rule_ids))
            slot = slot.model_copy(update={"rule_ids": rule_ids})
        merged.append(slot)
    if not found:
        merged.append(new_slot)
    return merged


def _index(overrides: Iterable[DateOverride]) -> dict[str, DateOverride]:
    return {override.date: override.model_copy(deep=True) for override in overrides}


def _sorted(by_date: dict[str, DateOverride]) -> list[DateOverride]:
    return [by_date[key] for key in sorted(by_date)]


def expand(rules: Iterable[RecurringRule], existing: Iterable[DateOverride]) -> list[DateOverride]:
    """Merge the dates generated by ``rules`` into ``existing``; manual dates are left alone."""
    by_date = _index(existing)
    for rule in rules:
        for day in iter_dates(rule.start_date, rule.end_date):
            weekday = day_of_week(day)
            if weekday not in rule.days_of_week:
                continue
            key = date_key(day)
            current = by_date.get(key)
            if current is not None and current.is_manual:
                continue
            slot = TimeSlot(
                day_of_week=weekday,
                start_time=rule.start_time,
                end_time=rule.end_time,
                rule_ids=[rule.id],
            )
            if current is None:
                by_date[key] = DateOverride(date=key, available=True, time_slots=[slot])
            else:
                current.time_slots = _merge_slot(current.time_slots, slot)
    return _sorted(by_date)


def remove_rule(rule_id: str, existing: Iterable[DateOverride]) -> list[DateOverride]:
    """
    Withdraw everything ``rule_id`` generated.

    Slots still claimed by another rule survive with that rule as provenance.
    A date whose slots all came from rules disappears once it has none left;
    dates holding manual slots (or marked unavailable) are kept.
    """
    result: list[DateOverride] = []
    for override in existing:
        generated = not override.is_manual
        slots: list[TimeSlot] = []
        for slot in override.time_slots:
            if rule_id not in slot.rule_ids:
                slots.append(slot)
                continue
            remaining = [other for other in slot.rule_ids if other != rule_id]
            if remaining:
                slots.append(slot.model_copy(update={"rule_ids": remaining}))
        if generated and not slots:
            continue
        result.append(override.model_copy(update={"time_slots": slots}, deep=True))
    return sorted(result, key=lambda override: override.date)


def reconcile(rules: Iterable[RecurringRule], existing: Iterable[DateOverride]) -> list[DateOverride]:
    """
    Bring ``existing`` in line with exactly ``rules``.

    Provenance of rules no longer present is withdrawn, generated-only dates
    are rebuilt from the current rules and manual dates are kept as they are.
    """
    rules = list(rules)
    overrides = list(existing)
    live_ids = {rule.id for rule in rules}
    stale_ids = {
        rule_id
        for override in overrides
        for slot in override.time_slots
        for rule_id in slot.rule_ids
    } - live_ids
    for rule_id in sorted(stale_ids):
        overrides = remove_rule(rule_id, overrides)
    manual = [override for override in overrides if override.is_manual]
    return expand(rules, manual)
