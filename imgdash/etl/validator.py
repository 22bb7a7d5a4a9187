"""
Validation for raw generation events.

Raw events arrive as loosely-typed JSON. Anything failing these rules is
dropped by the normalizer instead of propagating as an ambiguous value.
"""

from typing import Any, Dict, Optional

from imgdash.utils.timestamps import parse_timestamp

TIMESTAMP_KEYS = ('created_at', 'timestamp')


class ValidationResult:
    """Result of validating an entry."""

    def __init__(self, valid: bool, reason: Optional[str] = None):
        self.valid = valid
        self.reason = reason

    def __bool__(self):
        return self.valid


def raw_timestamp(entry: Dict[str, Any]) -> Optional[str]:
    """Return the first timestamp field present on a raw event."""
    for key in TIMESTAMP_KEYS:
        value = entry.get(key)
        if value:
            return value
    return None


def validate_series_id(series_id: Any) -> ValidationResult:
    """A series id must be a non-empty string."""
    if not isinstance(series_id, str) or not series_id.strip():
        return ValidationResult(False, "Missing or invalid series id")
    return ValidationResult(True)


def validate_event(entry: Any) -> ValidationResult:
    """
    Validate a raw event object.

    Rules:
    - Must be a JSON object
    - Must carry a parseable created_at (or timestamp)

    Args:
        entry: One element of a series' event list

    Returns:
        ValidationResult with valid flag and reason if invalid
    """
    if not isinstance(entry, dict):
        return ValidationResult(False, f"Event is not an object: {type(entry).__name__}")

    timestamp_str = raw_timestamp(entry)
    if not timestamp_str:
        return ValidationResult(False, "Missing timestamp")

    if not parse_timestamp(timestamp_str):
        return ValidationResult(False, f"Invalid timestamp format: {timestamp_str}")

    return ValidationResult(True)
