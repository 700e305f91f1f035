from datetime import date
from uuid import uuid4

from pydantic import NaiveDatetime, field_validator, model_validator
from sqlalchemy import JSON, Column, UniqueConstraint
from sqlmodel import Field, SQLModel

from slotwise.core.dates import parse_date_key, parse_hhmm, utc_naive_now


class TimeSlot(SQLModel):
    """
    A bookable window on one day.

    ``rule_ids`` is the provenance tag: empty for a manually authored slot,
    otherwise the recurring rules that generated it.
    """

    day_of_week: int = Field(default=0, ge=0, le=6)  # 0 = Sunday
    start_time: str
    end_time: str
    rule_ids: list[str] = Field(default_factory=list)

    @field_validator("start_time", "end_time")
    @classmethod
    def _check_hhmm(cls, value: str) -> str:
        parse_hhmm(value)
        return value

    @model_validator(mode="after")
    def _check_order(self) -> "TimeSlot":
        if self.start_time >= self.end_time:
            raise ValueError(f"start_time {self.start_time} must be before end_time {self.end_time}")
        return self

    @property
    def is_manual(self) -> bool:
        return not self.rule_ids

    @property
    def window(self) -> tuple[str, str]:
        return self.start_time, self.end_time


class DateOverride(SQLModel):
    date: str  # YYYY-MM-DD, local calendar date
    available: bool = True
    time_slots: list[TimeSlot] = Field(default_factory=list)

    @field_validator("date")
    @classmethod
    def _check_date(cls, value: str) -> str:
        parse_date_key(value)
        return value

    @property
    def is_manual(self) -> bool:
        """True unless every slot on the date came from a recurring rule."""
        if not self.available or not self.time_slots:
            return True
        return any(slot.is_manual for slot in self.time_slots)


class RecurringRule(SQLModel):
    id: str = Field(default_factory=lambda: uuid4().hex, min_length=1, max_length=32)
    days_of_week: set[int]  # 0 = Sunday
    start_time: str
    end_time: str
    start_date: date
    end_date: date

    @field_validator("start_time", "end_time")
    @classmethod
    def _check_hhmm(cls, value: str) -> str:
        parse_hhmm(value)
        return value

    @model_validator(mode="after")
    def _check_rule(self) -> "RecurringRule":
        if not self.days_of_week:
            raise ValueError("days_of_week must not be empty")
        if any(not 0 <= day <= 6 for day in self.days_of_week):
            raise ValueError("days_of_week values must be between 0 and 6")
        if self.start_time >= self.end_time:
            raise ValueError(f"start_time {self.start_time} must be before end_time {self.end_time}")
        if self.start_date >= self.end_date:
            raise ValueError(f"start_date {self.start_date} must be before end_date {self.end_date}")
        return self


class DateOverrideRecord(SQLModel, table=True):
    __tablename__ = "date_overrides"
    __table_args__ = (
        UniqueConstraint("event_type_id", "date", name="uq_date_overrides_event_type_date"),
    )
    id: int | None = Field(default=None, primary_key=True)
    event_type_id: int = Field(foreign_key="event_types.id", index=True)
    date: str = Field(max_length=10)
    available: bool = True
    time_slots: list[dict] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))


class RecurringRuleRecord(SQLModel, table=True):
    __tablename__ = "recurring_rules"
    id: str = Field(primary_key=True, max_length=32)
    event_type_id: int = Field(foreign_key="event_types.id", index=True)
    days_of_week: list[int] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    start_time: str = Field(max_length=5)
    end_time: str = Field(max_length=5)
    start_date: date
    end_date: date
    created_at: NaiveDatetime = Field(default_factory=utc_naive_now)
