from slotwise.models.event_type import EventType, EventTypeCreate, EventTypePublic, EventTypeUpdate
from slotwise.models.availability import (
    DateOverride,
    DateOverrideRecord,
    RecurringRule,
    RecurringRuleRecord,
    TimeSlot,
)
from slotwise.models.appointment import (
    Appointment,
    AppointmentCreate,
    AppointmentPublic,
    AppointmentStatus,
)

__all__ = [
    "EventType",
    "EventTypeCreate",
    "EventTypePublic",
    "EventTypeUpdate",
    "DateOverride",
    "DateOverrideRecord",
    "RecurringRule",
    "RecurringRuleRecord",
    "TimeSlot",
    "Appointment",
    "AppointmentCreate",
    "AppointmentPublic",
    "AppointmentStatus",
]
