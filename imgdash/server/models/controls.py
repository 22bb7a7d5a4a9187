"""Pydantic models for session controls and event snapshots."""

from typing import List, Optional

from pydantic import BaseModel

from imgdash.server.models.common import GranularityName, LookbackName, RangeName


class ControlsResponse(BaseModel):
    lookback: str
    range: str
    granularity: str
    series: List[str]
    disabled: List[str]


class ControlsUpdate(BaseModel):
    """Partial control update; omitted fields keep their value."""
    lookback: Optional[LookbackName] = None
    range: Optional[RangeName] = None
    granularity: Optional[GranularityName] = None
    disabled: Optional[List[str]] = None


class SeriesToggleResponse(BaseModel):
    series_id: str
    enabled: bool


class EventsUploadResponse(BaseModel):
    accepted: int
    dropped: int
    series: List[str]
