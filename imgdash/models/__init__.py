"""Models package - analytics entities."""

from .entities import (
    RGB,
    EventRecord,
    HeatmapCell,
    Bucket,
    SeriesStyle,
    Viewport,
    ChartPoint,
    ChartLayout,
    Tooltip,
)

__all__ = [
    "RGB",
    "EventRecord",
    "HeatmapCell",
    "Bucket",
    "SeriesStyle",
    "Viewport",
    "ChartPoint",
    "ChartLayout",
    "Tooltip",
]
