"""
Field extractor for raw generation events.

Flattens the API's per-series event objects into EventRecord entities.
"""

from typing import Any, Dict, Optional, Tuple

from imgdash.etl.validator import raw_timestamp, validate_event, validate_series_id
from imgdash.models.entities import EventRecord
from imgdash.utils.timestamps import parse_timestamp


def _as_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, (str, int)) and not isinstance(value, bool):
        text = str(value).strip()
        return text or None
    return None


def extract_user(entry: Dict[str, Any]) -> Tuple[str, Optional[str], Optional[str]]:
    """
    Extract (user_id, name, email) from a raw event.

    Accepts flat user_id/user_name/user_email fields or a nested
    user object with id, name (or full_name) and email.
    """
    user = entry.get('user')
    if not isinstance(user, dict):
        user = {}

    user_id = _as_text(entry.get('user_id')) or _as_text(user.get('id')) or ''
    name = (
        _as_text(entry.get('user_name'))
        or _as_text(user.get('name'))
        or _as_text(user.get('full_name'))
    )
    email = _as_text(entry.get('user_email')) or _as_text(user.get('email'))
    return user_id, name, email


def extract_event(entry: Any, series_id: Any) -> Optional[EventRecord]:
    """
    Extract an EventRecord from a raw event.

    Args:
        entry: Raw event object from the API
        series_id: Series (generation tool) the event was listed under

    Returns:
        EventRecord or None if the entry is invalid
    """
    if not validate_series_id(series_id):
        return None
    if not validate_event(entry):
        return None

    timestamp = parse_timestamp(raw_timestamp(entry))
    user_id, user_name, user_email = extract_user(entry)
    app_id = _as_text(entry.get('app_id')) or _as_text(entry.get('app')) or ''

    return EventRecord(
        timestamp=timestamp,
        series_id=series_id.strip(),
        user_id=user_id,
        app_id=app_id,
        user_name=user_name,
        user_email=user_email,
    )
