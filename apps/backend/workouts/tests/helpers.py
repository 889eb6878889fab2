import datetime as dt

from workouts.recurrence import WorkoutDefinition

UTC = dt.timezone.utc


def definition(**overrides) -> WorkoutDefinition:
    values = {
        "id": 1,
        "owner_id": 1,
        "title": "Squat",
        "reps": 5,
        "load": 100,
        "day_of_week": "Monday",
        "added_date": dt.date(2025, 1, 1),
        "created_at": dt.datetime(2025, 1, 1, 12, 0, tzinfo=UTC),
    }
    values.update(overrides)
    return WorkoutDefinition(**values)
