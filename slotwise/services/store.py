"""
Storage collaborator used by the scheduling services.

The services only talk to a ``BookingStore``; ``SqlBookingStore`` is the
SQLModel/asyncpg implementation built per request by ``api.deps.get_store``.
Overrides and rules are validated here on every read and write.
"""

import logging
from collections.abc import Sequence
from datetime import datetime
from typing import Protocol

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from slotwise.core.dates import to_naive_utc, utc_naive_now
from slotwise.core.errors import ConflictError, ValidationError
from slotwise.models.appointment import Appointment, AppointmentStatus
from slotwise.models.availability import (
    DateOverride,
    DateOverrideRecord,
    RecurringRule,
    RecurringRuleRecord,
)
from slotwise.models.event_type import EventType, EventTypeCreate, EventTypeUpdate

logger = logging.getLogger(__name__)


class BookingStore(Protocol):
    async def get_event_type(self, event_type_id: int) -> EventType | None: ...

    async def list_event_types(self) -> list[EventType]: ...

    async def create_event_type(self, data: EventTypeCreate) -> EventType: ...

    async def update_event_type(self, event_type: EventType, data: EventTypeUpdate) -> EventType: ...

    async def delete_event_type(self, event_type: EventType) -> None: ...

    async def get_overrides_for_event_type(self, event_type_id: int) -> list[DateOverride]: ...

    async def save_overrides(self, event_type_id: int, overrides: Sequence[DateOverride]) -> None: ...

    async def get_rules(self, event_type_id: int) -> list[RecurringRule]: ...

    async def save_rule(self, event_type_id: int, rule: RecurringRule) -> None: ...

    async def delete_rule(self, event_type_id: int, rule_id: str) -> bool: ...

    async def get_appointments_for_event_type(
        self,
        event_type_id: int,
        excluding_cancelled: bool = True,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> list[Appointment]: ...

    async def get_appointment(self, appointment_id: int) -> Appointment | None: ...

    async def insert_appointment_if_free(self, appointment: Appointment) -> Appointment: ...

    async def set_appointment_status(
        self, appointment: Appointment, status: AppointmentStatus, check_conflict: bool = False
    ) -> Appointment: ...


def validate_override(data: DateOverride | dict) -> DateOverride:
    """Re-validate an override at the storage boundary."""
    payload = data.model_dump() if isinstance(data, DateOverride) else data
    try:
        return DateOverride.model_validate(payload)
    except PydanticValidationError as e:
        raise ValidationError(f"Invalid date override: {e}") from e


def validate_overrides(overrides: Sequence[DateOverride]) -> list[DateOverride]:
    validated = [validate_override(override) for override in overrides]
    seen: set[str] = set()
    for override in validated:
        if override.date in seen:
            raise ValidationError(f"Duplicate override for {override.date}")
        seen.add(override.date)
    return sorted(validated, key=lambda override: override.date)


def _override_from_record(record: DateOverrideRecord) -> DateOverride:
    return validate_override(
        {"date": record.date, "available": record.available, "time_slots": record.time_slots or []}
    )


def _rule_from_record(record: RecurringRuleRecord) -> RecurringRule:
    try:
        return RecurringRule.model_validate(
            {
                "id": record.id,
                "days_of_week": record.days_of_week,
                "start_time": record.start_time,
                "end_time": record.end_time,
                "start_date": record.start_date,
                "end_date": record.end_date,
            }
        )
    except PydanticValidationError as e:
        raise ValidationError(f"Invalid recurring rule {record.id}: {e}") from e


class SqlBookingStore:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_event_type(self, event_type_id: int) -> EventType | None:
        result = await self.session.execute(select(EventType).where(EventType.id == event_type_id))
        return result.scalar_one_or_none()

    async def list_event_types(self) -> list[EventType]:
        result = await self.session.execute(select(EventType).order_by(EventType.id))
        return list(result.scalars().all())

    async def create_event_type(self, data: EventTypeCreate) -> EventType:
        event_type = EventType(**data.model_dump())
        self.session.add(event_type)
        await self.session.flush()
        await self.session.refresh(event_type)
        return event_type

    async def update_event_type(self, event_type: EventType, data: EventTypeUpdate) -> EventType:
        for key, value in data.model_dump(exclude_unset=True).items():
            setattr(event_type, key, value)
        self.session.add(event_type)
        await self.session.flush()
        await self.session.refresh(event_type)
        return event_type

    async def delete_event_type(self, event_type: EventType) -> None:
        """Delete the event type together with its overrides, rules and appointments."""
        for model in (DateOverrideRecord, RecurringRuleRecord, Appointment):
            await self.session.execute(delete(model).where(model.event_type_id == event_type.id))
        await self.session.delete(event_type)
        await self.session.flush()

    async def get_overrides_for_event_type(self, event_type_id: int) -> list[DateOverride]:
        result = await self.session.execute(
            select(DateOverrideRecord)
            .where(DateOverrideRecord.event_type_id == event_type_id)
            .order_by(DateOverrideRecord.date)
        )
        return [_override_from_record(record) for record in result.scalars().all()]

    async def save_overrides(self, event_type_id: int, overrides: Sequence[DateOverride]) -> None:
        validated = validate_overrides(overrides)
        await self.session.execute(
            delete(DateOverrideRecord).where(DateOverrideRecord.event_type_id == event_type_id)
        )
        for override in validated:
            self.session.add(
                DateOverrideRecord(
                    event_type_id=event_type_id,
                    date=override.date,
                    available=override.available,
                    time_slots=[slot.model_dump() for slot in override.time_slots],
                )
            )
        await self.session.flush()
        logger.debug("Saved %d override(s) for event type %s", len(validated), event_type_id)

    async def get_rules(self, event_type_id: int) -> list[RecurringRule]:
        result = await self.session.execute(
            select(RecurringRuleRecord)
            .where(RecurringRuleRecord.event_type_id == event_type_id)
            .order_by(RecurringRuleRecord.created_at)
        )
        return [_rule_from_record(record) for record in result.scalars().all()]

    async def save_rule(self, event_type_id: int, rule: RecurringRule) -> None:
        record = RecurringRuleRecord(
            id=rule.id,
            event_type_id=event_type_id,
            days_of_week=sorted(rule.days_of_week),
            start_time=rule.start_time,
            end_time=rule.end_time,
            start_date=rule.start_date,
            end_date=rule.end_date,
        )
        # rule ids are unique across event types
        existing = await self.session.execute(
            select(RecurringRuleRecord.id).where(RecurringRuleRecord.id == rule.id)
        )
        if existing.first() is not None:
            raise ConflictError(f"Rule {rule.id} already exists")
        self.session.add(record)
        try:
            await self.session.flush()
        except IntegrityError as e:
            raise ConflictError(f"Rule {rule.id} already exists") from e

    async def delete_rule(self, event_type_id: int, rule_id: str) -> bool:
        result = await self.session.execute(
            delete(RecurringRuleRecord).where(
                RecurringRuleRecord.event_type_id == event_type_id,
                RecurringRuleRecord.id == rule_id,
            )
        )
        await self.session.flush()
        return bool(result.rowcount)

    async def get_appointments_for_event_type(
        self,
        event_type_id: int,
        excluding_cancelled: bool = True,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> list[Appointment]:
        q = select(Appointment).where(Appointment.event_type_id == event_type_id)
        if excluding_cancelled:
            q = q.where(Appointment.status != AppointmentStatus.cancelled.value)
        if start is not None:
            q = q.where(Appointment.end_utc > to_naive_utc(start))
        if end is not None:
            q = q.where(Appointment.start_utc < to_naive_utc(end))
        result = await self.session.execute(q.order_by(Appointment.start_utc))
        return list(result.scalars().all())

    async def get_appointment(self, appointment_id: int) -> Appointment | None:
        result = await self.session.execute(select(Appointment).where(Appointment.id == appointment_id))
        return result.scalar_one_or_none()

    async def _lock_event_type(self, event_type_id: int) -> None:
        # Serializes bookings per event type until the transaction ends
        await self.session.execute(
            select(EventType.id).where(EventType.id == event_type_id).with_for_update()
        )

    async def _overlapping_ids(
        self,
        event_type_id: int,
        start_utc: datetime,
        end_utc: datetime,
        exclude_id: int | None = None,
    ) -> list[int]:
        q = select(Appointment.id).where(
            Appointment.event_type_id == event_type_id,
            Appointment.status != AppointmentStatus.cancelled.value,
            Appointment.start_utc < end_utc,
            Appointment.end_utc > start_utc,
        )
        if exclude_id is not None:
            q = q.where(Appointment.id != exclude_id)
        result = await self.session.execute(q)
        return [row[0] for row in result.all()]

    async def insert_appointment_if_free(self, appointment: Appointment) -> Appointment:
        await self._lock_event_type(appointment.event_type_id)
        clashes = await self._overlapping_ids(
            appointment.event_type_id, appointment.start_utc, appointment.end_utc
        )
        if clashes:
            raise ConflictError("This time is no longer available, please pick another slot")
        self.session.add(appointment)
        await self.session.flush()
        await self.session.refresh(appointment)
        return appointment

    async def set_appointment_status(
        self, appointment: Appointment, status: AppointmentStatus, check_conflict: bool = False
    ) -> Appointment:
        if check_conflict:
            await self._lock_event_type(appointment.event_type_id)
            clashes = await self._overlapping_ids(
                appointment.event_type_id,
                appointment.start_utc,
                appointment.end_utc,
                exclude_id=appointment.id,
            )
            if clashes:
                raise ConflictError("Another appointment now holds this time")
        appointment.status = status.value
        appointment.updated_at = utc_naive_now()
        self.session.add(appointment)
        await self.session.flush()
        await self.session.refresh(appointment)
        return appointment
