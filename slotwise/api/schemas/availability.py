from datetime import datetime

from pydantic import BaseModel

from slotwise.models.availability import DateOverride, RecurringRule


class SlotInfo(BaseModel):
    start: datetime
    end: datetime


class AvailableSlotsResponse(BaseModel):
    date: str  # YYYY-MM-DD
    slots: list[SlotInfo]


class AvailableDatesResponse(BaseModel):
    month: str | None = None  # YYYY-MM, None for the default horizon
    dates: list[str]


class AvailabilityResponse(BaseModel):
    overrides: list[DateOverride]
    rules: list[RecurringRule]


class OverridesResponse(BaseModel):
    overrides: list[DateOverride]
