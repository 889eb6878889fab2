"""Pure per-definition mutations. Persistence happens in the service layer."""
from __future__ import annotations

import datetime as dt
from typing import Any

from .definition import WorkoutDefinition

EDITABLE_FIELDS = ("title", "reps", "load", "day_of_week", "notes", "added_date", "end_date")


def _toggle(days: frozenset[dt.date], day: dt.date, present: bool) -> frozenset[dt.date]:
    if present:
        return days | {day}
    return days - {day}


def apply_fields(definition: WorkoutDefinition, changes: dict[str, Any]) -> WorkoutDefinition:
    unknown = set(changes) - set(EDITABLE_FIELDS)
    if unknown:
        raise KeyError(f"not editable: {sorted(unknown)}")
    if not changes:
        return definition
    return definition.model_copy(update=changes)


def set_completion(definition: WorkoutDefinition, day: dt.date, complete: bool) -> WorkoutDefinition:
    updated = _toggle(definition.completion_dates, day, complete)
    if updated == definition.completion_dates:
        return definition
    return definition.model_copy(update={"completion_dates": updated})


def set_skip(definition: WorkoutDefinition, day: dt.date, skip: bool) -> WorkoutDefinition:
    updated = _toggle(definition.skipped_dates, day, skip)
    if updated == definition.skipped_dates:
        return definition
    return definition.model_copy(update={"skipped_dates": updated})


def truncate(definition: WorkoutDefinition, end_date: dt.date) -> WorkoutDefinition:
    # History on or before end_date (completions, skips) is left as is.
    return definition.model_copy(update={"end_date": end_date})
