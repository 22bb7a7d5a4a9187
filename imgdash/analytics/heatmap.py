"""Calendar heatmap builder.

Buckets events into a week-aligned day grid, GitHub-contribution style.
Columns are weeks, rows are weekdays. Every day from the week-aligned start
to today gets a cell, zero-count days included, and the final week is padded
with placeholder cells so the grid is always rectangular.
"""

from collections import Counter
from datetime import date, datetime, timedelta, tzinfo
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from imgdash.analytics.ranges import MONTH_ABBR, lookback_days, week_offset, week_start_of
from imgdash.models.entities import EventRecord, HeatmapCell
from imgdash.utils.timestamps import to_local


def local_date_counts(
    events: Iterable[EventRecord],
    tz: Optional[tzinfo] = None,
) -> Counter:
    """Count events per local calendar day, skipping unusable timestamps."""
    counts: Counter = Counter()
    for event in events:
        local = to_local(getattr(event, "timestamp", None), tz)
        if local is None:
            continue
        counts[local.date()] += 1
    return counts


def build_heatmap(
    events: Iterable[EventRecord],
    lookback: str = "1_year",
    today: Optional[date] = None,
    tz: Optional[tzinfo] = None,
    week_start: int = 6,
) -> Tuple[HeatmapCell, ...]:
    """
    Build the calendar heatmap grid.

    Args:
        events: Normalized events
        lookback: One of 3_months, 6_months, 1_year, all
        today: Last real day of the grid (defaults to today in tz)
        tz: Zone used for local dates (None = process local time)
        week_start: Python weekday that begins a week column (6 = Sunday)

    Returns:
        Cells ordered by date. weekday 0 always starts a new week_index.
    """
    if today is None:
        today = datetime.now(tz).date()

    counts = local_date_counts(events, tz)
    earliest = min(counts) if counts else None

    start = today - timedelta(days=lookback_days(lookback, today, earliest))
    start = week_start_of(start, week_start)

    cells: List[HeatmapCell] = []
    week_index = 0
    day = start
    while True:
        weekday = week_offset(day, week_start)
        placeholder = day > today
        if placeholder and weekday == 0:
            break
        if weekday == 0 and cells:
            week_index += 1

        cells.append(HeatmapCell(
            date=day,
            count=0 if placeholder else counts.get(day, 0),
            weekday=weekday,
            week_index=week_index,
            is_placeholder=placeholder,
        ))
        day += timedelta(days=1)

    return tuple(cells)


def intensity_tier(count: int, thresholds: Sequence[int]) -> int:
    """
    Map a day count to a color-intensity tier.

    Tier 0 is empty; each threshold reached adds one tier.
    """
    return sum(1 for t in thresholds if count >= t)


def month_labels(cells: Sequence[HeatmapCell]) -> List[Tuple[int, str]]:
    """(week_index, month abbreviation) for each column where a new month starts."""
    labels: List[Tuple[int, str]] = []
    last_month = None
    for cell in cells:
        if cell.weekday != 0:
            continue
        if cell.date.month != last_month:
            labels.append((cell.week_index, MONTH_ABBR[cell.date.month - 1]))
            last_month = cell.date.month
    return labels


def events_on_day(
    events: Iterable[EventRecord],
    day: date,
    tz: Optional[tzinfo] = None,
) -> Tuple[EventRecord, ...]:
    """Drill-down: the events behind one heatmap cell, oldest first."""
    matching = []
    for event in events:
        local = to_local(getattr(event, "timestamp", None), tz)
        if local is not None and local.date() == day:
            matching.append(event)
    matching.sort(key=lambda e: e.timestamp)
    return tuple(matching)


def heatmap_summary(cells: Sequence[HeatmapCell]) -> Dict[str, Any]:
    """Totals shown above the heatmap."""
    real = [c for c in cells if not c.is_placeholder]
    total = sum(c.count for c in real)
    active_days = sum(1 for c in real if c.count > 0)

    busiest = None
    for cell in real:
        if cell.count > 0 and (busiest is None or cell.count > busiest.count):
            busiest = cell

    return {
        "total": total,
        "active_days": active_days,
        "days": len(real),
        "max_count": busiest.count if busiest else 0,
        "busiest_day": busiest.date.isoformat() if busiest else None,
        "weeks": (cells[-1].week_index + 1) if cells else 0,
    }
