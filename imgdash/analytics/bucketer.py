"""Multi-series time bucketer.

Groups events into time buckets at a chosen granularity, one count per
series per bucket. Buckets are sparse: only intervals holding at least one
event are materialized.

Bucket keys are zero-padded and big-endian, so lexical order is time order:
    hour   2024-03-01T10:00
    day    2024-03-01
    week   2024-02-25        (week-start day on or before the event)
    month  2024-03
"""

from datetime import datetime, timezone, tzinfo
from typing import Dict, Iterable, List, Optional, Tuple

from imgdash.analytics.ranges import MONTH_ABBR, parse_granularity, range_cutoff, week_start_of
from imgdash.models.entities import Bucket, EventRecord
from imgdash.utils.timestamps import parse_timestamp, to_local


def _event_instant(event) -> Optional[datetime]:
    """Aware timestamp of an event, or None if it cannot be read."""
    ts = getattr(event, "timestamp", None)
    if isinstance(ts, str):
        ts = parse_timestamp(ts)
    if not isinstance(ts, datetime):
        return None
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts


def bucket_key(local_dt: datetime, granularity: str, week_start: int = 6) -> str:
    """Derive the bucket key of a local timestamp."""
    day = local_dt.date()
    if granularity == "hour":
        return f"{day.isoformat()}T{local_dt.hour:02d}:00"
    if granularity == "day":
        return day.isoformat()
    if granularity == "week":
        return week_start_of(day, week_start).isoformat()
    if granularity == "month":
        return day.isoformat()[:7]
    raise ValueError(f"Unknown granularity '{granularity}'")


def bucket_label(key: str, granularity: str) -> str:
    """
    Human-readable label for a bucket key.

    Derived from the key alone, so the same key always gets the same label.
    """
    year, month = key[:4], int(key[5:7])
    mon = MONTH_ABBR[month - 1]
    if granularity == "month":
        return f"{mon} {year}"

    day = int(key[8:10])
    if granularity == "hour":
        return f"{mon} {day}, {key[11:16]}"
    if granularity == "week":
        return f"Week of {mon} {day}, {year}"
    return f"{mon} {day}, {year}"


def bucket_events(
    events: Iterable[EventRecord],
    granularity: str = "day",
    range_name: str = "all",
    now: Optional[datetime] = None,
    tz: Optional[tzinfo] = None,
    week_start: int = 6,
) -> Tuple[Bucket, ...]:
    """
    Bucket events by time and series.

    Args:
        events: Normalized events, any order
        granularity: hour, day, week or month
        range_name: 1_day, 1_week, 1_month, 3_months, 1_year or all
        now: End of the range window (defaults to the current time)
        tz: Zone used for local dates/hours (None = process local time)
        week_start: Python weekday that begins a week bucket (6 = Sunday)

    Returns:
        Buckets ascending by key. Events with unreadable timestamps are dropped.
    """
    parse_granularity(granularity)
    cutoff = range_cutoff(range_name, now)

    buckets: Dict[str, Bucket] = {}
    for event in events:
        ts = _event_instant(event)
        if ts is None:
            continue
        if cutoff is not None and ts < cutoff:
            continue
        local = to_local(ts, tz)
        if local is None:
            continue

        key = bucket_key(local, granularity, week_start)
        current = buckets.get(key)
        if current is None:
            current = Bucket(key=key, label=bucket_label(key, granularity))
            buckets[key] = current
        current.series_counts[event.series_id] = current.series_counts.get(event.series_id, 0) + 1

    return tuple(buckets[key] for key in sorted(buckets))


def series_universe(events: Iterable[EventRecord]) -> List[str]:
    """Series ids in order of first appearance."""
    seen: Dict[str, None] = {}
    for event in events:
        seen.setdefault(event.series_id, None)
    return list(seen)


def series_totals(buckets: Iterable[Bucket]) -> Dict[str, int]:
    """Per-series totals across a bucketing result."""
    totals: Dict[str, int] = {}
    for b in buckets:
        for series_id, count in b.series_counts.items():
            totals[series_id] = totals.get(series_id, 0) + count
    return totals
