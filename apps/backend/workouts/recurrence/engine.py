"""Recurrence expansion: which definitions occur on which dates."""
from __future__ import annotations

import datetime as dt
from collections.abc import Iterable, Sequence

from .dates import normalize_date, weekday_name
from .definition import WorkoutDefinition

NO_INSTANCE = "no_instance"
SCHEDULED = "scheduled"
COMPLETED = "completed"
SKIPPED = "skipped"

_OLDEST = dt.datetime.min.replace(tzinfo=dt.timezone.utc)


def _created_key(definition: WorkoutDefinition) -> dt.datetime:
    created = definition.created_at
    if created is None:
        return _OLDEST
    # Naive timestamps are taken as UTC, as in normalize_date.
    if created.tzinfo is None:
        return created.replace(tzinfo=dt.timezone.utc)
    return created


def _in_range(definition: WorkoutDefinition, day: dt.date) -> bool:
    if weekday_name(day) != definition.day_of_week:
        return False
    if day < definition.added_date:
        return False
    return definition.end_date is None or day <= definition.end_date


def occurs_on(definition: WorkoutDefinition, day: dt.date) -> bool:
    return _in_range(definition, day) and day not in definition.skipped_dates


def is_scheduled(definition: WorkoutDefinition, day: dt.date) -> bool:
    """Like :func:`occurs_on` but ignoring per-date skips."""
    return occurs_on(definition.model_copy(update={"skipped_dates": frozenset()}), day)


def instance_state(definition: WorkoutDefinition, day: dt.date) -> str:
    # A date may be in both sets; the skip suppresses the instance.
    if not is_scheduled(definition, day):
        return NO_INSTANCE
    if day in definition.skipped_dates:
        return SKIPPED
    if day in definition.completion_dates:
        return COMPLETED
    return SCHEDULED


def _canonical_week(week: Iterable) -> list[dt.date]:
    days = []
    for raw in week:
        day = normalize_date(raw)
        if day is None:
            raise ValueError(f"invalid date in week: {raw!r}")
        if day not in days:
            days.append(day)
    return days


def expand_week(
    definitions: Sequence[WorkoutDefinition], week: Iterable
) -> dict[dt.date, list[WorkoutDefinition]]:
    """Bucket every occurring definition under each requested date.

    Buckets keep the order of ``week`` and list the most recently created
    definition first; ties keep the input order.
    """
    buckets: dict[dt.date, list[WorkoutDefinition]] = {}
    for day in _canonical_week(week):
        matches = [d for d in definitions if occurs_on(d, day)]
        matches.sort(key=_created_key, reverse=True)
        buckets[day] = matches
    return buckets


def day_summary(bucket: Sequence[WorkoutDefinition], day: dt.date) -> dict[str, int]:
    return {
        "planned_count": len(bucket),
        "completed_count": sum(1 for d in bucket if d.is_completed_on(day)),
    }
