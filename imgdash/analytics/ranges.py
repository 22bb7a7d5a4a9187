"""Shared range, granularity and calendar-week helpers for the analytics modules.

Control values are plain strings so they travel unchanged through query
parameters, CLI flags and the session state.
"""

from datetime import date, datetime, timedelta, timezone
from typing import Optional, Union

# Heatmap lookback window -> days back from today ("all" is data-dependent)
LOOKBACK_DAYS = {
    "3_months": 90,
    "6_months": 182,
    "1_year": 364,
}
LOOKBACKS = ("3_months", "6_months", "1_year", "all")
DEFAULT_LOOKBACK_DAYS = 364

# Chart range -> length of the window ending now ("all" has no cutoff)
RANGE_DELTAS = {
    "1_day": timedelta(days=1),
    "1_week": timedelta(days=7),
    "1_month": timedelta(days=30),
    "3_months": timedelta(days=90),
    "1_year": timedelta(days=365),
}
RANGES = ("1_day", "1_week", "1_month", "3_months", "1_year", "all")

GRANULARITIES = ("hour", "day", "week", "month")

# Locale-independent month abbreviations for labels
MONTH_ABBR = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")

WEEKDAY_NAMES = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")


def parse_lookback(value: str) -> str:
    if value not in LOOKBACKS:
        raise ValueError(f"Unknown lookback '{value}', expected one of {', '.join(LOOKBACKS)}")
    return value


def parse_range(value: str) -> str:
    if value not in RANGES:
        raise ValueError(f"Unknown range '{value}', expected one of {', '.join(RANGES)}")
    return value


def parse_granularity(value: str) -> str:
    if value not in GRANULARITIES:
        raise ValueError(
            f"Unknown granularity '{value}', expected one of {', '.join(GRANULARITIES)}"
        )
    return value


def parse_week_start(value: Union[str, int]) -> int:
    """
    Convert a week-start setting to a Python weekday (0=Monday, 6=Sunday).

    Accepts a day name ("sunday", "Mon") or an int.
    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid week start: {value!r}")
    if isinstance(value, int):
        if 0 <= value <= 6:
            return value
        raise ValueError(f"Invalid week start: {value!r}")
    if isinstance(value, str):
        name = value.strip().lower()
        for index, day in enumerate(WEEKDAY_NAMES):
            if name and day.startswith(name) and len(name) >= 3:
                return index
    raise ValueError(f"Invalid week start: {value!r}")


def week_offset(day: date, week_start: int = 6) -> int:
    """Position of day within its calendar week (0 = week start)."""
    return (day.weekday() - week_start) % 7


def week_start_of(day: date, week_start: int = 6) -> date:
    """The week-start day on or before day."""
    return day - timedelta(days=week_offset(day, week_start))


def lookback_days(
    lookback: str,
    today: date,
    earliest: Optional[date] = None,
) -> int:
    """
    Number of days the heatmap reaches back from today.

    For "all" this is the span from the earliest event to today, or the
    one-year default when there are no events.
    """
    parse_lookback(lookback)
    if lookback != "all":
        return LOOKBACK_DAYS[lookback]
    if earliest is None:
        return DEFAULT_LOOKBACK_DAYS
    return max((today - earliest).days, 0)


def range_cutoff(range_name: str, now: Optional[datetime] = None) -> Optional[datetime]:
    """
    Earliest instant included by a chart range.

    Returns None for "all". Events strictly older than the cutoff are excluded.
    """
    parse_range(range_name)
    if range_name == "all":
        return None
    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return now - RANGE_DELTAS[range_name]
