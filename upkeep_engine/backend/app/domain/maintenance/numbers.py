# backend/app/domain/maintenance/numbers.py
from __future__ import annotations

import math
from datetime import date, datetime

SECONDS_PER_DAY = 24 * 60 * 60


def round_half_up(value: float, places: int = 0) -> float:
    """
    Half-up rounding (2.5 -> 3, 112.5 -> 113).

    Python's round() is banker's rounding; every displayed cost and score here
    rounds half-up instead.
    """
    factor = 10**places
    return math.floor(value * factor + 0.5) / factor


def round_int(value: float) -> int:
    return int(round_half_up(value, 0))


def days_between_ceil(start: datetime, end: datetime) -> int:
    """Whole days from start to end, partial days counted as a full day."""
    return math.ceil((end - start).total_seconds() / SECONDS_PER_DAY)


def property_age(year_built: int | None, *, now: datetime, default_age: int) -> int:
    if year_built is None:
        return int(default_age)
    return max(0, now.year - int(year_built))


def format_us_date(d: date) -> str:
    return f"{d.month}/{d.day}/{d.year}"
