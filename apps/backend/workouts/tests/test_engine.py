import datetime as dt

import pydantic
from django.test import SimpleTestCase

from workouts.recurrence import (
    COMPLETED,
    NO_INSTANCE,
    SCHEDULED,
    SKIPPED,
    consecutive_dates,
    day_summary,
    expand_week,
    instance_state,
    occurs_on,
    WorkoutDefinition,
)

from .helpers import UTC, definition

WEEK = consecutive_dates(dt.date(2025, 1, 5), 7)
NEXT_WEEK = consecutive_dates(dt.date(2025, 1, 12), 7)
MONDAY = dt.date(2025, 1, 6)


def occurring_days(buckets, workout):
    return [day for day, bucket in buckets.items() if workout in bucket]


class OccursOnTests(SimpleTestCase):
    def test_weekday_must_match(self):
        workout = definition()
        self.assertTrue(occurs_on(workout, MONDAY))
        self.assertFalse(occurs_on(workout, dt.date(2025, 1, 7)))

    def test_range_is_inclusive_on_both_ends(self):
        workout = definition(added_date=MONDAY, end_date=dt.date(2025, 1, 13))
        self.assertFalse(occurs_on(workout, dt.date(2024, 12, 30)))
        self.assertTrue(occurs_on(workout, MONDAY))
        self.assertTrue(occurs_on(workout, dt.date(2025, 1, 13)))
        self.assertFalse(occurs_on(workout, dt.date(2025, 1, 20)))

    def test_open_ended_series_recurs_forever(self):
        self.assertTrue(occurs_on(definition(), dt.date(2030, 1, 7)))

    def test_skip_always_wins(self):
        workout = definition(skipped_dates=[MONDAY], completion_dates=[MONDAY])
        self.assertFalse(occurs_on(workout, MONDAY))

    def test_pure_and_repeatable(self):
        workout = definition(skipped_dates=["2025-01-13"])
        before = workout.model_dump()
        results = [occurs_on(workout, day) for day in WEEK + NEXT_WEEK]
        self.assertEqual(results, [occurs_on(workout, day) for day in WEEK + NEXT_WEEK])
        self.assertEqual(workout.model_dump(), before)


class InstanceStateTests(SimpleTestCase):
    def test_states(self):
        workout = definition(completion_dates=[MONDAY], skipped_dates=[dt.date(2025, 1, 13)])
        self.assertEqual(instance_state(workout, MONDAY), COMPLETED)
        self.assertEqual(instance_state(workout, dt.date(2025, 1, 13)), SKIPPED)
        self.assertEqual(instance_state(workout, dt.date(2025, 1, 20)), SCHEDULED)
        self.assertEqual(instance_state(workout, dt.date(2025, 1, 21)), NO_INSTANCE)
        self.assertEqual(instance_state(workout, dt.date(2024, 12, 30)), NO_INSTANCE)

    def test_skip_reported_over_completion_when_both_are_set(self):
        workout = definition(completion_dates=[MONDAY], skipped_dates=[MONDAY])
        self.assertEqual(instance_state(workout, MONDAY), SKIPPED)


class ExpandWeekScenarioTests(SimpleTestCase):
    def test_monday_series_lands_on_monday_only(self):
        workout = definition()
        buckets = expand_week([workout], WEEK)
        self.assertEqual(list(buckets), list(WEEK))
        self.assertEqual(occurring_days(buckets, workout), [MONDAY])

    def test_skipped_date_removes_the_only_instance(self):
        workout = definition(skipped_dates=[MONDAY])
        self.assertEqual(occurring_days(expand_week([workout], WEEK), workout), [])

    def test_end_date_before_the_week_hides_it(self):
        workout = definition(end_date=dt.date(2025, 1, 5))
        self.assertEqual(occurring_days(expand_week([workout], NEXT_WEEK), workout), [])
        # 2025-01-06 is after the end date too.
        self.assertEqual(occurring_days(expand_week([workout], WEEK), workout), [])

    def test_end_date_keeps_earlier_instances(self):
        workout = definition(end_date=dt.date(2025, 1, 11))
        self.assertEqual(occurring_days(expand_week([workout], WEEK), workout), [MONDAY])
        self.assertEqual(occurring_days(expand_week([workout], NEXT_WEEK), workout), [])

    def test_series_starting_mid_week(self):
        workout = definition(added_date=dt.date(2025, 1, 7))
        self.assertEqual(occurring_days(expand_week([workout], WEEK), workout), [])
        self.assertEqual(occurring_days(expand_week([workout], NEXT_WEEK), workout), [dt.date(2025, 1, 13)])


class ExpandWeekOrderingTests(SimpleTestCase):
    def test_newest_first_with_stable_ties(self):
        older = definition(id=1, title="Squat", created_at=dt.datetime(2025, 1, 1, tzinfo=UTC))
        newer = definition(id=2, title="Bench", created_at=dt.datetime(2025, 1, 3, tzinfo=UTC))
        tie_a = definition(id=3, title="Row", created_at=dt.datetime(2025, 1, 2, tzinfo=UTC))
        tie_b = definition(id=4, title="Dip", created_at=dt.datetime(2025, 1, 2, tzinfo=UTC))
        buckets = expand_week([older, tie_a, newer, tie_b], WEEK)
        self.assertEqual([w.id for w in buckets[MONDAY]], [2, 3, 4, 1])

    def test_mixes_naive_aware_and_missing_creation_times(self):
        naive = definition(id=1, created_at=dt.datetime(2025, 1, 2, 12, 0))
        aware = definition(id=2, title="Bench", created_at=dt.datetime(2025, 1, 2, 13, 0, tzinfo=UTC))
        unsaved = definition(id=3, title="Row", created_at=None)
        buckets = expand_week([unsaved, naive, aware], [MONDAY])
        self.assertEqual([w.id for w in buckets[MONDAY]], [2, 1, 3])

    def test_accepts_any_date_like_week(self):
        workout = definition()
        buckets = expand_week([workout], ["2025-01-06T10:00:00Z", MONDAY, "2025-01-13"])
        self.assertEqual(list(buckets), [MONDAY, dt.date(2025, 1, 13)])
        self.assertEqual(buckets[MONDAY], [workout])

    def test_invalid_week_date_raises(self):
        with self.assertRaises(ValueError):
            expand_week([definition()], ["someday"])

    def test_day_summary_counts_completions(self):
        done = definition(id=1, completion_dates=[MONDAY])
        pending = definition(id=2, title="Bench")
        hidden = definition(id=3, title="Row", completion_dates=[MONDAY], skipped_dates=[MONDAY])
        bucket = expand_week([done, pending, hidden], [MONDAY])[MONDAY]
        self.assertEqual(day_summary(bucket, MONDAY), {"planned_count": 2, "completed_count": 1})


class WorkoutDefinitionTests(SimpleTestCase):
    def test_date_sets_are_canonical(self):
        workout = definition(completion_dates=["2025-01-06T10:00:00Z", "2025-01-06", MONDAY])
        self.assertEqual(workout.completion_dates, frozenset({MONDAY}))
        self.assertEqual(workout.model_dump(mode="json")["completion_dates"], ["2025-01-06"])

    def test_day_of_week_is_stored_capitalized(self):
        self.assertEqual(definition(day_of_week="monday").day_of_week, "Monday")

    def test_rejects_non_dates_in_sets(self):
        with self.assertRaises(pydantic.ValidationError):
            definition(skipped_dates=["soon"])

    def test_is_immutable(self):
        workout = definition()
        with self.assertRaises(pydantic.ValidationError):
            workout.title = "Deadlift"
        self.assertIsInstance(workout, WorkoutDefinition)
