from __future__ import annotations

import datetime as dt
import math
from collections.abc import Mapping
from typing import Annotated, Any, Literal

import pydantic
from django.conf import settings
from pydantic import AliasChoices, BaseModel, BeforeValidator, ConfigDict, Field

from .errors import ValidationError
from .recurrence import canonical_day_name, normalize_date

TITLE_MAX_LENGTH = 255
# Upper bound of a PositiveIntegerField on every supported backend.
REPS_MAX = 2147483647

_FIELD_NAMES = {
    "dayOfWeek": "day_of_week",
    "addedDate": "added_date",
    "endDate": "end_date",
}


def _clean_title(value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValueError("Title is required")
    if len(value.strip()) > TITLE_MAX_LENGTH:
        raise ValueError(f"Title must be at most {TITLE_MAX_LENGTH} characters")
    return value.strip()


def _clean_reps(value: Any) -> int:
    if value is None or value == "" or isinstance(value, bool):
        raise ValueError("Reps is required")
    try:
        number = float(value.strip() if isinstance(value, str) else value)
    except (TypeError, ValueError, OverflowError):
        raise ValueError("Reps must be a positive whole number") from None
    if not math.isfinite(number) or not number.is_integer() or number < 1:
        raise ValueError("Reps must be a positive whole number")
    if number > REPS_MAX:
        raise ValueError(f"Reps must be at most {REPS_MAX}")
    return int(number)


def _clean_load(value: Any) -> float | None:
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise ValueError("Load must be a positive number")
    try:
        number = float(value.strip() if isinstance(value, str) else value)
    except (TypeError, ValueError, OverflowError):
        raise ValueError("Load must be a positive number") from None
    if not math.isfinite(number) or number < 1:
        raise ValueError("Load must be at least 1")
    return number


def _clean_day(value: Any) -> str:
    day = canonical_day_name(value)
    if day is None:
        raise ValueError("Day of week must be between Sunday and Saturday")
    return day


def _clean_notes(value: Any) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValueError("Notes must be text")
    cleaned = value.strip()
    limit = getattr(settings, "WORKOUT_NOTES_MAX_LENGTH", 500)
    if len(cleaned) > limit:
        raise ValueError(f"Notes must be at most {limit} characters")
    return cleaned or None


def _clean_date(value: Any) -> dt.date:
    day = normalize_date(value)
    if day is None:
        raise ValueError("Must be a valid date")
    return day


def _clean_optional_date(value: Any) -> dt.date | None:
    if value is None:
        return None
    return _clean_date(value)


def _clean_flag(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in {"true", "false"}:
        return value.strip().lower() == "true"
    raise ValueError("Must be true or false")


Title = Annotated[str, BeforeValidator(_clean_title)]
Reps = Annotated[int, BeforeValidator(_clean_reps)]
Load = Annotated[float | None, BeforeValidator(_clean_load)]
DayOfWeek = Annotated[str, BeforeValidator(_clean_day)]
Notes = Annotated[str | None, BeforeValidator(_clean_notes)]
Date = Annotated[dt.date, BeforeValidator(_clean_date)]
OptionalDate = Annotated[dt.date | None, BeforeValidator(_clean_optional_date)]


class _Payload(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    @classmethod
    def parse(cls, data: Any):
        if data is None:
            data = {}
        if not isinstance(data, Mapping):
            raise ValidationError(["__all__"], [{"field": "__all__", "message": "Expected a JSON object"}])
        try:
            return cls.model_validate(dict(data))
        except pydantic.ValidationError as exc:
            raise _as_validation_error(exc) from exc

    def provided(self) -> dict[str, Any]:
        return {name: getattr(self, name) for name in self.model_fields_set}


class WorkoutCreate(_Payload):
    title: Title
    reps: Reps
    load: Load = None
    day_of_week: DayOfWeek = Field(validation_alias=AliasChoices("day_of_week", "dayOfWeek"))
    notes: Notes = None
    added_date: OptionalDate = Field(default=None, validation_alias=AliasChoices("added_date", "addedDate"))


class WorkoutUpdate(_Payload):
    # None is only accepted where it clears the field (load, notes, end_date).
    title: Annotated[str | None, BeforeValidator(_clean_title)] = None
    reps: Annotated[int | None, BeforeValidator(_clean_reps)] = None
    load: Load = None
    day_of_week: Annotated[str | None, BeforeValidator(_clean_day)] = Field(
        default=None, validation_alias=AliasChoices("day_of_week", "dayOfWeek")
    )
    notes: Notes = None
    added_date: Annotated[dt.date | None, BeforeValidator(_clean_date)] = Field(
        default=None, validation_alias=AliasChoices("added_date", "addedDate")
    )
    end_date: OptionalDate = Field(default=None, validation_alias=AliasChoices("end_date", "endDate"))
    date: Annotated[dt.date | None, BeforeValidator(_clean_date)] = None
    complete: Annotated[bool | None, BeforeValidator(_clean_flag)] = None
    skip: Annotated[bool | None, BeforeValidator(_clean_flag)] = None

    def field_changes(self) -> dict[str, Any]:
        return {k: v for k, v in self.provided().items() if k not in {"date", "complete", "skip"}}

    def has_date_ops(self) -> bool:
        return bool({"complete", "skip"} & self.model_fields_set)


class OccurrenceDelete(_Payload):
    date: Date
    scope: Literal["this", "future", "all"] = "this"


def _as_validation_error(exc: pydantic.ValidationError) -> ValidationError:
    fields = []
    details = []
    for err in exc.errors():
        loc = err.get("loc") or ("__all__",)
        field = _FIELD_NAMES.get(str(loc[0]), str(loc[0]))
        message = str(err.get("msg") or "Invalid value")
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        if err.get("type") == "missing":
            message = "This field is required"
        if field in fields:
            continue
        fields.append(field)
        details.append({"field": field, "message": message})
    return ValidationError(fields, details)
