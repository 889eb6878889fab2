"""Owner-scoped persistence for workout definitions.

Every function takes the owning user first; nothing here can reach another
owner's rows.
"""
from __future__ import annotations

import datetime as dt
from collections.abc import Iterable

from django.contrib.auth.models import User
from django.db import DatabaseError, transaction

from workouts.errors import NotFoundError, TransientStoreError
from workouts.models import Workout
from workouts.recurrence import WorkoutDefinition


def _date_list(days: Iterable[dt.date]) -> list[str]:
    return [day.isoformat() for day in sorted(days)]


def to_definition(row: Workout) -> WorkoutDefinition:
    return WorkoutDefinition(
        id=row.pk,
        owner_id=row.user_id,
        title=row.title,
        reps=row.reps,
        load=row.load,
        day_of_week=row.day_of_week,
        notes=row.notes or None,
        added_date=row.added_date or row.created_at,
        end_date=row.end_date,
        completion_dates=row.completion_dates or [],
        skipped_dates=row.skipped_dates or [],
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _write(row: Workout, definition: WorkoutDefinition) -> None:
    row.title = definition.title
    row.reps = definition.reps
    row.load = definition.load
    row.day_of_week = definition.day_of_week
    row.notes = definition.notes or ""
    row.added_date = definition.added_date
    row.end_date = definition.end_date
    row.completion_dates = _date_list(definition.completion_dates)
    row.skipped_dates = _date_list(definition.skipped_dates)


def list_definitions(user: User, day: str | None = None) -> list[WorkoutDefinition]:
    rows = Workout.objects.filter(user=user)
    if day:
        rows = rows.filter(day_of_week=day)
    return [to_definition(row) for row in rows.order_by("-created_at", "-id")]


def get_row(user: User, pk) -> Workout:
    row = Workout.objects.filter(user=user, pk=pk).first()
    if row is None:
        raise NotFoundError()
    return row


def get_definition(user: User, pk) -> WorkoutDefinition:
    return to_definition(get_row(user, pk))


def create_definition(user: User, definition: WorkoutDefinition) -> WorkoutDefinition:
    row = Workout(user=user)
    _write(row, definition)
    row.save()
    return to_definition(row)


def replace_definition(user: User, definition: WorkoutDefinition) -> WorkoutDefinition:
    row = get_row(user, definition.id)
    _write(row, definition)
    row.save()
    return to_definition(row)


def delete_definition(user: User, pk) -> WorkoutDefinition:
    row = get_row(user, pk)
    definition = to_definition(row)
    row.delete()
    return definition


def has_duplicate(user: User, *, title: str, day_of_week: str, exclude_id: int | None = None) -> bool:
    query = Workout.objects.filter(user=user, day_of_week=day_of_week, title__iexact=title.strip())
    if exclude_id is not None:
        query = query.exclude(pk=exclude_id)
    try:
        # Savepoint so a failed lookup doesn't poison the caller's transaction.
        with transaction.atomic():
            return query.exists()
    except DatabaseError as exc:
        raise TransientStoreError() from exc
