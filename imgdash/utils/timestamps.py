"""
Timestamp utilities for imgdash.

Handles parsing and local-time conversion of event timestamps.
API timestamps are ISO-8601, usually UTC with a 'Z' suffix.
"""

import re
from datetime import datetime, timezone, tzinfo
from typing import Optional, Union

# Seconds followed by a fraction of any length
_FRACTION = re.compile(r"(\d{2}:\d{2}:\d{2})\.(\d+)")


def _six_digit_fraction(match) -> str:
    return f"{match.group(1)}.{match.group(2)[:6].ljust(6, '0')}"


def parse_timestamp(ts: Optional[str]) -> Optional[datetime]:
    """
    Parse an ISO-8601 timestamp to a timezone-aware datetime.

    Naive timestamps are taken to be UTC.
    Returns None if parsing fails.

    Args:
        ts: Timestamp string like "2026-01-15T10:30:00.123Z"

    Returns:
        aware datetime, or None if parsing failed
    """
    if not ts or not isinstance(ts, str):
        return None

    try:
        # Handle 'Z' suffix (UTC indicator)
        if ts.endswith('Z'):
            ts = ts[:-1] + '+00:00'

        # fromisoformat before 3.11 only takes 3 or 6 fraction digits
        ts = _FRACTION.sub(_six_digit_fraction, ts, count=1)
        parsed = datetime.fromisoformat(ts)
    except (ValueError, TypeError):
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def to_local(
    ts: Union[datetime, str, None],
    tz: Optional[tzinfo] = None,
) -> Optional[datetime]:
    """
    Convert a timestamp to local wall-clock time.

    Args:
        ts: datetime or ISO-8601 string
        tz: target zone, or None for the process local time

    Returns:
        aware datetime in the target zone, or None if ts is unusable
    """
    if isinstance(ts, str):
        ts = parse_timestamp(ts)
    if not isinstance(ts, datetime):
        return None

    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)

    try:
        return ts.astimezone(tz)
    except (OverflowError, ValueError):
        return None


def to_local_display(ts: Optional[datetime], tz: Optional[tzinfo] = None) -> str:
    """Format a timestamp in local time for display, "N/A" if missing."""
    local = to_local(ts, tz)
    if not local:
        return "N/A"
    return local.strftime('%Y-%m-%d %H:%M:%S')


def to_iso_string(dt: Optional[datetime]) -> Optional[str]:
    """
    Convert datetime to ISO-8601 string for serialization.

    Args:
        dt: datetime object

    Returns:
        ISO format string or None if input is None
    """
    if not dt:
        return None
    return dt.isoformat()
