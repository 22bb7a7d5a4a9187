"""
ETL package - normalization of raw generation-event snapshots.

Main entry point is normalize_events(), which turns the API's
series -> events mapping into a flat, immutable tuple of EventRecord.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterator, Tuple

from imgdash.etl.extractor import extract_event
from imgdash.models.entities import EventRecord

logger = logging.getLogger(__name__)

SERIES_KEYS = ('series_id', 'tool')


def _iter_raw(raw: Any) -> Iterator[Tuple[Any, Any]]:
    """Yield (series_id, raw_event) pairs from a mapping or a flat list."""
    if isinstance(raw, dict):
        for series_id, entries in raw.items():
            if not isinstance(entries, list):
                logger.debug("Skipping series %r: events are not a list", series_id)
                continue
            for entry in entries:
                yield series_id, entry
    elif isinstance(raw, (list, tuple)):
        for entry in raw:
            series_id = None
            if isinstance(entry, dict):
                series_id = next((entry[k] for k in SERIES_KEYS if entry.get(k)), None)
            yield series_id, entry


def normalize_events_with_stats(raw: Any) -> Tuple[Tuple[EventRecord, ...], Dict[str, int]]:
    """
    Normalize a raw snapshot and report how many records were kept.

    Args:
        raw: mapping of series id -> list of event objects, or a flat list
             of event objects each carrying series_id (or tool)

    Returns:
        (events, {"accepted": n, "dropped": m})
    """
    events = []
    dropped = 0

    for series_id, entry in _iter_raw(raw):
        record = extract_event(entry, series_id)
        if record is None:
            dropped += 1
            logger.debug("Dropped malformed event in series %r: %r", series_id, entry)
            continue
        events.append(record)

    if dropped:
        logger.info("Normalized %d events, dropped %d malformed records", len(events), dropped)

    return tuple(events), {"accepted": len(events), "dropped": dropped}


def normalize_events(raw: Any) -> Tuple[EventRecord, ...]:
    """
    Normalize a raw snapshot into EventRecords.

    Never raises: malformed records are skipped and an unusable
    snapshot yields an empty tuple.
    """
    events, _ = normalize_events_with_stats(raw)
    return events


def load_snapshot(path: Path) -> Any:
    """
    Read a raw event snapshot from a JSON file.

    The file holds either the series mapping itself or {"series": {...}}.

    Raises:
        FileNotFoundError: if the file does not exist
        ValueError: if the file is not valid JSON
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Event snapshot not found: {path}")

    with open(path, 'r', encoding='utf-8') as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Could not parse event snapshot {path}: {e}") from e

    if isinstance(data, dict) and isinstance(data.get('series'), (dict, list)):
        return data['series']
    return data


__all__ = [
    "normalize_events",
    "normalize_events_with_stats",
    "load_snapshot",
    "extract_event",
]
