from .dates import (
    DAY_NAMES,
    canonical_day_name,
    consecutive_dates,
    day_before,
    normalize_date,
    shift_week,
    week_dates,
    weekday_name,
)
from .definition import WorkoutDefinition
from .engine import (
    COMPLETED,
    NO_INSTANCE,
    SCHEDULED,
    SKIPPED,
    day_summary,
    expand_week,
    instance_state,
    is_scheduled,
    occurs_on,
)
from .mutations import apply_fields, set_completion, set_skip, truncate

__all__ = [
    "COMPLETED",
    "DAY_NAMES",
    "NO_INSTANCE",
    "SCHEDULED",
    "SKIPPED",
    "WorkoutDefinition",
    "apply_fields",
    "canonical_day_name",
    "consecutive_dates",
    "day_before",
    "day_summary",
    "expand_week",
    "instance_state",
    "is_scheduled",
    "normalize_date",
    "occurs_on",
    "set_completion",
    "set_skip",
    "shift_week",
    "truncate",
    "week_dates",
    "weekday_name",
]
