from __future__ import annotations

import datetime as dt
import logging
from collections.abc import Iterable
from typing import Any

from django.contrib.auth.models import User
from django.db import transaction
from django.utils import timezone

from workouts.errors import DuplicateError, TransientStoreError, ValidationError
from workouts.recurrence import (
    WorkoutDefinition,
    apply_fields,
    canonical_day_name,
    day_before,
    day_summary,
    expand_week,
    is_scheduled,
    set_completion,
    set_skip,
    truncate,
    weekday_name,
)
from workouts.schemas import OccurrenceDelete, WorkoutCreate, WorkoutUpdate
from workouts.serializers import WorkoutInstanceSerializer
from workouts.services import store

logger = logging.getLogger(__name__)


def _today() -> dt.date:
    return timezone.now().astimezone(dt.timezone.utc).date()


def _ensure_unique(user: User, *, title: str, day_of_week: str, exclude_id: int | None = None) -> None:
    """Reject a case-insensitive (title, day) collision.

    Best effort: if the lookup itself fails the write goes ahead.
    """
    try:
        duplicate = store.has_duplicate(user, title=title, day_of_week=day_of_week, exclude_id=exclude_id)
    except TransientStoreError:
        logger.warning(
            "Duplicate check failed for user=%s title=%r day=%s; continuing",
            user.pk,
            title,
            day_of_week,
            exc_info=True,
        )
        return
    if duplicate:
        raise DuplicateError()


def list_workouts(user: User, day: str | None = None) -> list[WorkoutDefinition]:
    if not day:
        return store.list_definitions(user)
    canonical = canonical_day_name(day)
    if canonical is None:
        raise ValidationError(
            ["day"],
            [{"field": "day", "message": "Day of week must be between Sunday and Saturday"}],
            message="Invalid day parameter",
        )
    return store.list_definitions(user, canonical)


def get_workout(user: User, pk) -> WorkoutDefinition:
    return store.get_definition(user, pk)


def create_workout(user: User, data: Any) -> WorkoutDefinition:
    payload = WorkoutCreate.parse(data)
    _ensure_unique(user, title=payload.title, day_of_week=payload.day_of_week)
    definition = WorkoutDefinition(
        owner_id=user.pk,
        title=payload.title,
        reps=payload.reps,
        load=payload.load,
        day_of_week=payload.day_of_week,
        notes=payload.notes,
        added_date=payload.added_date or _today(),
    )
    return store.create_definition(user, definition)


def _date_op_error(message: str) -> ValidationError:
    return ValidationError(["date"], [{"field": "date", "message": message}])


def _apply_date_ops(definition: WorkoutDefinition, payload: WorkoutUpdate) -> WorkoutDefinition:
    day = payload.date
    if day is None:
        raise _date_op_error("date is required to mark a workout complete or skipped")
    # Undoing is always allowed so stale markers outside the range can be cleared.
    if (payload.complete or payload.skip) and not is_scheduled(definition, day):
        raise _date_op_error(f"Workout is not scheduled on {day.isoformat()}")
    if payload.complete is not None:
        definition = set_completion(definition, day, payload.complete)
    if payload.skip is not None:
        definition = set_skip(definition, day, payload.skip)
    return definition


@transaction.atomic
def update_workout(user: User, pk, data: Any) -> WorkoutDefinition:
    """Field edits plus an optional per-date complete/skip, all or nothing.

    Everything is validated against the edited definition before the single
    write; a failure leaves the stored row untouched.
    """
    payload = WorkoutUpdate.parse(data)
    changes = payload.field_changes()
    current = store.get_definition(user, pk)
    updated = apply_fields(current, changes)
    if "title" in changes or "day_of_week" in changes:
        _ensure_unique(user, title=updated.title, day_of_week=updated.day_of_week, exclude_id=current.id)
    if payload.has_date_ops():
        updated = _apply_date_ops(updated, payload)
    if updated == current:
        return current
    return store.replace_definition(user, updated)


def mark_completion(user: User, pk, day: Any, complete: bool = True) -> WorkoutDefinition:
    return update_workout(user, pk, {"date": day, "complete": complete})


def mark_skip(user: User, pk, day: Any, skip: bool = True) -> WorkoutDefinition:
    return update_workout(user, pk, {"date": day, "skip": skip})


@transaction.atomic
def truncate_series(user: User, pk, end_date: Any) -> WorkoutDefinition:
    payload = WorkoutUpdate.parse({"end_date": end_date})
    if payload.end_date is None:
        raise ValidationError(["end_date"], [{"field": "end_date", "message": "Must be a valid date"}])
    current = store.get_definition(user, pk)
    logger.info("Truncating workout id=%s user=%s at %s", current.id, user.pk, payload.end_date.isoformat())
    return store.replace_definition(user, truncate(current, payload.end_date))


@transaction.atomic
def delete_series(user: User, pk) -> WorkoutDefinition:
    definition = store.delete_definition(user, pk)
    logger.info("Deleted workout series id=%s user=%s", definition.id, user.pk)
    return definition


def delete_occurrence(user: User, pk, data: Any) -> tuple[str, WorkoutDefinition]:
    """Remove one occurrence, every occurrence from a date on, or the series."""
    payload = OccurrenceDelete.parse(data)
    if payload.scope == "this":
        return payload.scope, mark_skip(user, pk, payload.date, True)
    if payload.scope == "future":
        current = store.get_definition(user, pk)
        try:
            end_date = day_before(payload.date)
        except OverflowError:
            raise _date_op_error("Date is out of range") from None
        if current.end_date is not None and current.end_date < end_date:
            return payload.scope, current
        return payload.scope, truncate_series(user, pk, end_date)
    return payload.scope, delete_series(user, pk)


def week_plan(user: User, week: Iterable[dt.date]) -> dict[str, Any]:
    buckets = expand_week(store.list_definitions(user), week)
    days = []
    for day, bucket in buckets.items():
        days.append(
            {
                "date": day.isoformat(),
                "day_of_week": weekday_name(day),
                **day_summary(bucket, day),
                "workouts": WorkoutInstanceSerializer(bucket, many=True, context={"date": day}).data,
            }
        )
    dates = list(buckets)
    return {
        "week_start": dates[0].isoformat() if dates else None,
        "week_end": dates[-1].isoformat() if dates else None,
        "days": days,
    }
