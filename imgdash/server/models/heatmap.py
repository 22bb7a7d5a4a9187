"""Pydantic models for heatmap API."""

from datetime import date
from typing import List, Optional

from pydantic import BaseModel


class HeatmapCell(BaseModel):
    date: date
    count: int
    weekday: int  # 0 = configured week start
    week_index: int
    tier: int
    is_placeholder: bool = False


class MonthLabel(BaseModel):
    week_index: int
    label: str


class HeatmapSummary(BaseModel):
    total: int
    active_days: int
    days: int
    max_count: int
    busiest_day: Optional[str] = None
    weeks: int


class HeatmapResponse(BaseModel):
    lookback: str
    week_start: int  # Python weekday, 0=Monday
    cells: List[HeatmapCell]
    months: List[MonthLabel]
    summary: HeatmapSummary


class DayEvent(BaseModel):
    timestamp: str
    series_id: str
    user_id: str
    app_id: str
    user_name: Optional[str] = None
    user_email: Optional[str] = None


class DayDetailResponse(BaseModel):
    date: date
    count: int
    events: List[DayEvent]
