"""Pydantic models for usage chart API."""

from typing import Dict, List, Literal, Optional

from pydantic import BaseModel


class Bucket(BaseModel):
    key: str
    label: str
    series_counts: Dict[str, int]


class SeriesStyle(BaseModel):
    series_id: str
    color: str  # #rrggbb
    enabled: bool
    total: int


class ChartPoint(BaseModel):
    bucket_index: int
    value: int
    x: float
    y: float


class AxisLabel(BaseModel):
    x: float
    label: str


class ViewportInfo(BaseModel):
    width: float
    height: float
    padding: float


class ChartLayout(BaseModel):
    status: Literal["ok", "no_data", "invalid_viewport"]
    bucket_count: int
    max_value: int
    series: Dict[str, List[ChartPoint]]
    x_labels: List[AxisLabel]
    viewport: ViewportInfo


class UsageResponse(BaseModel):
    granularity: str
    range: str
    buckets: List[Bucket]
    series: List[SeriesStyle]
    chart: ChartLayout


class TooltipEntry(BaseModel):
    series_id: str
    value: int


class Tooltip(BaseModel):
    bucket_index: int
    key: str
    label: str
    highlighted_series: Optional[str] = None
    value: int
    x: float
    y: float
    entries: List[TooltipEntry]


class HitTestResponse(BaseModel):
    status: Literal["ok", "no_data", "invalid_viewport"]
    tooltip: Optional[Tooltip] = None
