"""
Analytics package - the usage-analytics engine behind the statistics view.

Pure functions over a normalized event snapshot: calendar heatmap, multi-series
time buckets, series colors and chart geometry.
"""

from imgdash.analytics.bucketer import bucket_events, bucket_key, bucket_label, series_totals, series_universe
from imgdash.analytics.geometry import (
    InvalidViewportError,
    build_chart,
    compute_max_value,
    hit_test,
    nearest_bucket,
    to_pixel,
)
from imgdash.analytics.heatmap import build_heatmap, events_on_day, heatmap_summary, intensity_tier, month_labels
from imgdash.analytics.pipeline import DashboardControls, DashboardSession, DashboardView, compute_dashboard
from imgdash.analytics.styles import SeriesFilter, resolve_color, resolve_styles

__all__ = [
    "bucket_events",
    "bucket_key",
    "bucket_label",
    "series_totals",
    "series_universe",
    "InvalidViewportError",
    "build_chart",
    "compute_max_value",
    "hit_test",
    "nearest_bucket",
    "to_pixel",
    "build_heatmap",
    "events_on_day",
    "heatmap_summary",
    "intensity_tier",
    "month_labels",
    "DashboardControls",
    "DashboardSession",
    "DashboardView",
    "compute_dashboard",
    "SeriesFilter",
    "resolve_color",
    "resolve_styles",
]
