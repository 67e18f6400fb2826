"""Work period domain models.

A work period is a named block of working time, such as a shift or a focus
session. Activities recorded during it can be attributed to it, and
statistics compare the work time of those activities with the length of the
periods.
"""

from datetime import datetime
from typing import Any
from uuid import uuid4

from pydantic import BaseModel, Field, field_validator, model_validator

from toodo.domain.shared.errors import InvalidWorkPeriodError
from toodo.domain.todo.models import as_utc, elapsed_seconds, utcnow


class WorkPeriod(BaseModel):
    """A named time range on a given date.

    `date` is the calendar day the period is filed under; it defaults to the
    start time.
    """

    id: str = Field(default_factory=lambda: str(uuid4()))
    name: str
    date: datetime
    start_time: datetime
    end_time: datetime
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    model_config = {"frozen": True}

    @model_validator(mode="before")
    @classmethod
    def _default_date(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("date") is None:
            data = {**data, "date": data.get("start_time")}
        return data

    @field_validator("date", "start_time", "end_time", "created_at", "updated_at")
    @classmethod
    def _aware(cls, value: datetime) -> datetime:
        return as_utc(value)

    @model_validator(mode="after")
    def _check_range(self) -> "WorkPeriod":
        if self.start_time > self.end_time:
            raise InvalidWorkPeriodError(self.start_time, self.end_time)
        return self

    @property
    def duration_seconds(self) -> int:
        return elapsed_seconds(self.start_time, self.end_time)

    def covers(self, moment: datetime) -> bool:
        """True if moment falls inside [start_time, end_time]."""
        return self.start_time <= as_utc(moment) <= self.end_time

    def overlaps(self, start_time: datetime, end_time: datetime) -> bool:
        """True if the half-open ranges [start, end) intersect."""
        return self.start_time < as_utc(end_time) and as_utc(start_time) < self.end_time

    def update(self, now: datetime | None = None, **fields: Any) -> "WorkPeriod":
        """Return a copy with name, date, start_time or end_time replaced.

        Raises:
            InvalidWorkPeriodError: the new range ends before it starts
        """
        protected = {"id", "created_at", "updated_at"}
        illegal = protected.intersection(fields)
        if illegal:
            raise ValueError(f"Fields cannot be updated directly: {', '.join(sorted(illegal))}")
        return type(self).model_validate(
            {**self.model_dump(), **fields, "updated_at": now or utcnow()}
        )


class WorkPeriodStatistics(BaseModel):
    """Totals over the work periods in a date range, in seconds.

    Only activities that carry work time count. A todo's time is added to
    every tag the todo has, so the per-tag totals can exceed the overall
    activity time.
    """

    work_period_count: int = 0
    total_work_period_time: int = 0
    total_activity_time: int = 0
    utilization_rate: float = 0.0
    activities_by_todo: dict[str, int] = Field(default_factory=dict)
    activities_by_tag: dict[str, int] = Field(default_factory=dict)
