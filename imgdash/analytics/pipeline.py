"""
Dashboard pipeline: events x controls -> cells/buckets -> geometry.

compute_dashboard() is a pure function and is rerun wholesale whenever a
control changes. DashboardSession holds the per-session control state and
keeps only the newest computed view.
"""

from dataclasses import dataclass, field, replace
from datetime import date, datetime
from typing import Any, Dict, FrozenSet, Iterable, List, Optional, Sequence, Tuple

from imgdash.analytics.bucketer import bucket_events, series_totals, series_universe
from imgdash.analytics.geometry import build_chart
from imgdash.analytics.heatmap import build_heatmap, heatmap_summary
from imgdash.analytics.ranges import parse_granularity, parse_lookback, parse_range
from imgdash.analytics.styles import SeriesFilter, resolve_styles
from imgdash.config.loader import (
    DEFAULT_CONFIG,
    get_palette_config,
    get_timezone,
    get_week_start,
)
from imgdash.models.entities import (
    Bucket,
    ChartLayout,
    EventRecord,
    HeatmapCell,
    SeriesStyle,
    Viewport,
)


@dataclass(frozen=True)
class DashboardControls:
    """Control inputs of the statistics view."""
    lookback: str = "1_year"
    range: str = "1_month"
    granularity: str = "day"
    disabled: FrozenSet[str] = frozenset()

    def __post_init__(self):
        parse_lookback(self.lookback)
        parse_range(self.range)
        parse_granularity(self.granularity)
        object.__setattr__(self, "disabled", frozenset(self.disabled))

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "DashboardControls":
        defaults = {**DEFAULT_CONFIG["defaults"], **(config.get("defaults") or {})}
        return cls(
            lookback=defaults["lookback"],
            range=defaults["range"],
            granularity=defaults["granularity"],
        )


@dataclass
class DashboardView:
    """Everything the statistics view renders for one set of controls."""
    controls: DashboardControls
    cells: Tuple[HeatmapCell, ...]
    summary: Dict[str, Any]
    buckets: Tuple[Bucket, ...]
    styles: List[SeriesStyle]
    totals: Dict[str, int]
    enabled_series: List[str]
    chart: ChartLayout
    viewport: Viewport = field(default_factory=lambda: Viewport(0, 0, 0))


def default_viewport(config: Dict[str, Any]) -> Viewport:
    """Viewport from config, falling back to the built-in default."""
    vp = {**DEFAULT_CONFIG["viewport"], **(config.get("viewport") or {})}
    return Viewport(width=vp["width"], height=vp["height"], padding=vp["padding"])


def compute_dashboard(
    events: Sequence[EventRecord],
    controls: DashboardControls,
    config: Dict[str, Any],
    viewport: Optional[Viewport] = None,
    now: Optional[datetime] = None,
    today: Optional[date] = None,
) -> DashboardView:
    """
    Compute the heatmap, buckets, styles and chart geometry.

    Args:
        events: Normalized event snapshot
        controls: Current control values
        config: Loaded configuration
        viewport: Chart surface (defaults to config viewport)
        now: Reference instant for range cutoffs (defaults to current time)
        today: Last day of the heatmap (defaults to the local date of now)
    """
    tz = get_timezone(config)
    week_start = get_week_start(config)
    if viewport is None:
        viewport = default_viewport(config)
    if today is None and now is not None:
        today = now.astimezone(tz).date() if now.tzinfo else now.date()

    cells = build_heatmap(events, controls.lookback, today=today, tz=tz, week_start=week_start)
    buckets = bucket_events(
        events,
        controls.granularity,
        controls.range,
        now=now,
        tz=tz,
        week_start=week_start,
    )

    universe = series_universe(events)
    enabled = [s for s in universe if s not in controls.disabled]
    styles = resolve_styles(universe, get_palette_config(config), controls.disabled)

    return DashboardView(
        controls=controls,
        cells=cells,
        summary=heatmap_summary(cells),
        buckets=buckets,
        styles=styles,
        totals=series_totals(buckets),
        enabled_series=enabled,
        chart=build_chart(buckets, enabled, viewport),
        viewport=viewport,
    )


class DashboardSession:
    """
    Control state for one dashboard session.

    Nothing is persisted; a new session starts from config defaults with
    every series enabled.
    """

    def __init__(self, config: Dict[str, Any], events: Iterable[EventRecord] = ()):
        self.config = config
        self._events: Tuple[EventRecord, ...] = tuple(events)
        self._controls = DashboardControls.from_config(config)
        self._filter = SeriesFilter(series_universe(self._events))
        self._generation = 0
        self._committed = 0
        self.view: Optional[DashboardView] = None

    @property
    def events(self) -> Tuple[EventRecord, ...]:
        return self._events

    @property
    def controls(self) -> DashboardControls:
        return self._controls

    @property
    def series(self) -> SeriesFilter:
        return self._filter

    def set_events(self, events: Iterable[EventRecord]) -> None:
        """Swap the event snapshot; a changed series universe re-enables all series."""
        self._events = tuple(events)
        if self._filter.reset(series_universe(self._events)):
            self._controls = replace(self._controls, disabled=frozenset())
        self._refresh(disabled=self._controls.disabled)

    def update_controls(self, **changes) -> DashboardControls:
        """Apply control changes. Raises ValueError on unknown values."""
        self._controls = replace(self._controls, **changes)
        if "disabled" in changes:
            self._filter.set_disabled(self._controls.disabled)
        self._refresh(**changes)
        return self._controls

    def toggle_series(self, series_id: str) -> bool:
        """Flip one series and return its new enabled state."""
        enabled = self._filter.toggle(series_id)
        self._controls = replace(self._controls, disabled=self._filter.disabled)
        self._refresh(disabled=self._controls.disabled)
        return enabled

    def _refresh(self, **changes) -> None:
        """
        Rerun the stored view against the current snapshot.

        The view keeps its own viewport and per-request controls; changes
        are applied on top. Nothing happens before the first view exists.
        """
        if self.view is None:
            return
        controls = replace(self.view.controls, **changes)
        token = self.begin()
        self.commit(token, compute_dashboard(
            self._events, controls, self.config, viewport=self.view.viewport,
        ))

    def begin(self) -> int:
        """Start a recompute and return its generation token."""
        self._generation += 1
        return self._generation

    def commit(self, token: int, view: DashboardView) -> bool:
        """
        Store a computed view unless a newer one is already stored.

        Returns True if the view was accepted.
        """
        if token < self._committed:
            return False
        self._committed = token
        self.view = view
        return True

    def recompute(
        self,
        viewport: Optional[Viewport] = None,
        now: Optional[datetime] = None,
        today: Optional[date] = None,
    ) -> DashboardView:
        """Run the full pipeline for the current controls and store the result."""
        token = self.begin()
        view = compute_dashboard(
            self._events, self._controls, self.config,
            viewport=viewport, now=now, today=today,
        )
        self.commit(token, view)
        return self.view
