"""Canonical dates and the weekday table shared by the recurrence engine.

A canonical date is a plain :class:`datetime.date`: the UTC calendar day of
whatever instant was supplied. Two canonical dates are equal iff their
(year, month, day) triples match, which makes them safe set members.
"""
from __future__ import annotations

import datetime as dt
import math
from typing import Any

from django.utils.dateparse import parse_date, parse_datetime

DAY_NAMES: tuple[str, ...] = (
    "Sunday",
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
)

_DAY_LOOKUP = {name.lower(): name for name in DAY_NAMES}


def _utc_day(value: dt.datetime) -> dt.date:
    if value.tzinfo is None:
        return value.date()
    return value.astimezone(dt.timezone.utc).date()


def normalize_date(raw: Any) -> dt.date | None:
    """Return the UTC calendar date of ``raw`` or ``None`` if it can't be read.

    Accepts ``datetime`` (naive values are taken as UTC), ``date``, ISO 8601
    strings with or without time and offset, and POSIX timestamps in seconds.
    """
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, dt.datetime):
        return _utc_day(raw)
    if isinstance(raw, dt.date):
        return raw
    if isinstance(raw, (int, float)):
        if not math.isfinite(raw):
            return None
        try:
            return dt.datetime.fromtimestamp(raw, tz=dt.timezone.utc).date()
        except (OverflowError, OSError, ValueError):
            return None
    if not isinstance(raw, str):
        return None
    text = raw.strip()
    if not text:
        return None
    try:
        day = parse_date(text)
        if day is not None:
            return day
        moment = parse_datetime(text)
    except ValueError:
        return None
    if moment is None:
        return None
    return _utc_day(moment)


def canonical_day_name(value: Any) -> str | None:
    if not isinstance(value, str):
        return None
    return _DAY_LOOKUP.get(value.strip().lower())


def weekday_name(day: dt.date) -> str:
    # date.weekday() counts from Monday; the table starts on Sunday.
    return DAY_NAMES[(day.weekday() + 1) % 7]


def day_before(day: dt.date) -> dt.date:
    return day - dt.timedelta(days=1)


def consecutive_dates(start: dt.date, count: int = 7) -> tuple[dt.date, ...]:
    return tuple(start + dt.timedelta(days=i) for i in range(count))


def week_dates(anchor: dt.date) -> tuple[dt.date, ...]:
    """The Sunday-to-Saturday week containing ``anchor``."""
    sunday = anchor - dt.timedelta(days=(anchor.weekday() + 1) % 7)
    return consecutive_dates(sunday, 7)


def shift_week(week: tuple[dt.date, ...], offset: int) -> tuple[dt.date, ...]:
    return tuple(day + dt.timedelta(weeks=offset) for day in week)
