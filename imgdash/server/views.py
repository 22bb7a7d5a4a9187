"""Glue between the dashboard session and the API response models."""

from dataclasses import replace
from typing import Any, Dict, Optional

from imgdash.analytics.heatmap import intensity_tier, month_labels
from imgdash.analytics.pipeline import DashboardSession, DashboardView, compute_dashboard, default_viewport
from imgdash.analytics.styles import legend_entries
from imgdash.config.loader import get_heatmap_tiers, get_week_start
from imgdash.models.entities import Tooltip, Viewport
from imgdash.server.models import heatmap as heatmap_models
from imgdash.server.models import usage as usage_models


def resolve_viewport(
    config: Dict[str, Any],
    width: Optional[float] = None,
    height: Optional[float] = None,
    padding: Optional[float] = None,
) -> Viewport:
    """Request viewport, with missing dimensions taken from config."""
    base = default_viewport(config)
    return Viewport(
        width=base.width if width is None else width,
        height=base.height if height is None else height,
        padding=base.padding if padding is None else padding,
    )


def compute_view(
    session: DashboardSession,
    viewport: Optional[Viewport] = None,
    store: bool = True,
    **overrides,
) -> DashboardView:
    """
    Recompute the dashboard for the session controls.

    Non-None overrides apply to this computation only; the session controls
    are left as they are. With store=True the result becomes the session's
    latest view, the chart that hit-tests resolve against.
    """
    changes = {k: v for k, v in overrides.items() if v is not None}
    controls = replace(session.controls, **changes) if changes else session.controls

    if not store:
        return compute_dashboard(session.events, controls, session.config, viewport=viewport)

    token = session.begin()
    view = compute_dashboard(session.events, controls, session.config, viewport=viewport)
    session.commit(token, view)
    return view


def heatmap_response(view: DashboardView, config: Dict[str, Any]) -> heatmap_models.HeatmapResponse:
    thresholds = get_heatmap_tiers(config)
    cells = [
        heatmap_models.HeatmapCell(
            date=c.date,
            count=c.count,
            weekday=c.weekday,
            week_index=c.week_index,
            tier=intensity_tier(c.count, thresholds),
            is_placeholder=c.is_placeholder,
        )
        for c in view.cells
    ]
    months = [
        heatmap_models.MonthLabel(week_index=week_index, label=label)
        for week_index, label in month_labels(view.cells)
    ]
    return heatmap_models.HeatmapResponse(
        lookback=view.controls.lookback,
        week_start=get_week_start(config),
        cells=cells,
        months=months,
        summary=heatmap_models.HeatmapSummary(**view.summary),
    )


def usage_response(view: DashboardView) -> usage_models.UsageResponse:
    chart = view.chart
    return usage_models.UsageResponse(
        granularity=view.controls.granularity,
        range=view.controls.range,
        buckets=[
            usage_models.Bucket(key=b.key, label=b.label, series_counts=dict(b.series_counts))
            for b in view.buckets
        ],
        series=[
            usage_models.SeriesStyle(**entry)
            for entry in legend_entries(view.styles, view.totals)
        ],
        chart=usage_models.ChartLayout(
            status=chart.status,
            bucket_count=chart.bucket_count,
            max_value=chart.max_value,
            series={
                series_id: [
                    usage_models.ChartPoint(bucket_index=p.bucket_index, value=p.value, x=p.x, y=p.y)
                    for p in points
                ]
                for series_id, points in chart.series.items()
            },
            x_labels=[usage_models.AxisLabel(x=x, label=label) for x, label in chart.x_labels],
            viewport=usage_models.ViewportInfo(
                width=view.viewport.width,
                height=view.viewport.height,
                padding=view.viewport.padding,
            ),
        ),
    )


def tooltip_model(tooltip: Tooltip) -> usage_models.Tooltip:
    return usage_models.Tooltip(
        bucket_index=tooltip.bucket_index,
        key=tooltip.key,
        label=tooltip.label,
        highlighted_series=tooltip.highlighted_series,
        value=tooltip.value,
        x=tooltip.x,
        y=tooltip.y,
        entries=[usage_models.TooltipEntry(series_id=s, value=v) for s, v in tooltip.entries],
    )
