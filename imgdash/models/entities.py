"""
Data structures (entities) for imgdash.

Uses dataclasses for clean, typed data structures.
Named 'entities' instead of 'dataclasses' to avoid stdlib import confusion.
"""

import math
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Dict, List, Optional, Tuple

RGB = Tuple[int, int, int]


@dataclass(frozen=True)
class EventRecord:
    """A single generation event, normalized from the raw API payload."""
    timestamp: datetime  # always timezone-aware
    series_id: str
    user_id: str
    app_id: str
    user_name: Optional[str] = None
    user_email: Optional[str] = None


@dataclass(frozen=True)
class HeatmapCell:
    """One day of the calendar heatmap grid."""
    date: date
    count: int
    weekday: int  # 0 = configured week start
    week_index: int
    is_placeholder: bool = False  # padding after today to complete the last week


@dataclass
class Bucket:
    """
    One time interval of the multi-series chart.

    A series missing from series_counts has a count of 0.
    """
    key: str
    label: str
    series_counts: Dict[str, int] = field(default_factory=dict)

    def count(self, series_id: str) -> int:
        """Count for a series, 0 when absent."""
        return self.series_counts.get(series_id, 0)

    @property
    def total(self) -> int:
        """Events across all series."""
        return sum(self.series_counts.values())


@dataclass(frozen=True)
class SeriesStyle:
    """Rendering style of one series."""
    series_id: str
    color: RGB
    enabled: bool = True

    @property
    def hex(self) -> str:
        """Color as #rrggbb."""
        return "#{:02x}{:02x}{:02x}".format(*self.color)


@dataclass(frozen=True)
class Viewport:
    """Pixel rectangle supplied by the rendering surface."""
    width: float
    height: float
    padding: float = 0.0

    @property
    def is_degenerate(self) -> bool:
        """True when padding leaves no drawing area or a dimension is not finite."""
        if not all(math.isfinite(v) for v in (self.width, self.height, self.padding)):
            return True
        return self.width <= 2 * self.padding or self.height <= 2 * self.padding


@dataclass(frozen=True)
class ChartPoint:
    """A bucket value projected into the viewport."""
    bucket_index: int
    value: int
    x: float
    y: float


@dataclass
class ChartLayout:
    """
    Geometry of the multi-series chart.

    status is one of 'ok', 'no_data', 'invalid_viewport'. Points are only
    populated when status is 'ok'.
    """
    status: str
    bucket_count: int = 0
    max_value: int = 1
    series: Dict[str, List[ChartPoint]] = field(default_factory=dict)
    x_labels: List[Tuple[float, str]] = field(default_factory=list)

    @property
    def renderable(self) -> bool:
        return self.status == "ok"


@dataclass(frozen=True)
class Tooltip:
    """Hit-test result anchoring the chart tooltip."""
    bucket_index: int
    key: str
    label: str
    highlighted_series: Optional[str]
    value: int
    x: float
    y: float
    entries: Tuple[Tuple[str, int], ...] = ()
