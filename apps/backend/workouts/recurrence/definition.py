from __future__ import annotations

import datetime as dt
from typing import Any

from pydantic import BaseModel, ConfigDict, field_serializer, field_validator

from .dates import canonical_day_name, normalize_date


def _required_date(value: Any) -> dt.date:
    day = normalize_date(value)
    if day is None:
        raise ValueError(f"invalid date: {value!r}")
    return day

class WorkoutDefinition(BaseModel):
    """One recurring workout as the engine sees it.

    Instances are never stored: whether the workout happens on a date is
    derived from ``day_of_week``, the ``added_date``/``end_date`` range and
    the two per-date sets.
    """

    model_config = ConfigDict(frozen=True)

    id: int | None = None
    owner_id: int | None = None
    title: str
    reps: int
    load: float | None = None
    day_of_week: str
    notes: str | None = None
    added_date: dt.date
    end_date: dt.date | None = None
    completion_dates: frozenset[dt.date] = frozenset()
    skipped_dates: frozenset[dt.date] = frozenset()
    created_at: dt.datetime | None = None
    updated_at: dt.datetime | None = None

    @field_validator("day_of_week", mode="before")
    @classmethod
    def validate_day_of_week(cls, value: Any) -> str:
        day = canonical_day_name(value)
        if day is None:
            raise ValueError(f"unknown day of week: {value!r}")
        return day

    @field_validator("added_date", mode="before")
    @classmethod
    def validate_added_date(cls, value: Any) -> dt.date:
        return _required_date(value)

    @field_validator("end_date", mode="before")
    @classmethod
    def validate_end_date(cls, value: Any) -> dt.date | None:
        if value is None:
            return None
        return _required_date(value)

    @field_validator("completion_dates", "skipped_dates", mode="before")
    @classmethod
    def validate_date_set(cls, value: Any) -> frozenset[dt.date]:
        days = set()
        for item in value or ():
            day = normalize_date(item)
            if day is None:
                raise ValueError(f"invalid date in set: {item!r}")
            days.add(day)
        return frozenset(days)

    @field_serializer("completion_dates", "skipped_dates")
    def serialize_date_set(self, value: frozenset[dt.date]) -> list[str]:
        return [day.isoformat() for day in sorted(value)]

    def is_completed_on(self, day: dt.date) -> bool:
        return day in self.completion_dates

    def is_skipped_on(self, day: dt.date) -> bool:
        return day in self.skipped_dates
