"""Session controls and event snapshot API endpoints."""

from typing import Any

from fastapi import APIRouter, Body, Depends

from imgdash.analytics.pipeline import DashboardSession
from imgdash.etl import normalize_events_with_stats
from imgdash.server.dependencies import get_session
from imgdash.server.models.controls import (
    ControlsResponse,
    ControlsUpdate,
    EventsUploadResponse,
    SeriesToggleResponse,
)

router = APIRouter(prefix="/api", tags=["controls"])


def _controls_response(session: DashboardSession) -> ControlsResponse:
    controls = session.controls
    return ControlsResponse(
        lookback=controls.lookback,
        range=controls.range,
        granularity=controls.granularity,
        series=list(session.series.universe),
        disabled=sorted(controls.disabled),
    )


@router.get("/controls", response_model=ControlsResponse)
async def get_controls(session: DashboardSession = Depends(get_session)):
    """Get the current session controls."""
    return _controls_response(session)


@router.put("/controls", response_model=ControlsResponse)
async def update_controls(
    update: ControlsUpdate,
    session: DashboardSession = Depends(get_session),
):
    """Change one or more session controls."""
    changes = update.model_dump(exclude_none=True)
    if "disabled" in changes:
        changes["disabled"] = frozenset(changes["disabled"])
    if changes:
        session.update_controls(**changes)
    return _controls_response(session)


@router.post("/controls/series/{series_id}/toggle", response_model=SeriesToggleResponse)
async def toggle_series(
    series_id: str,
    session: DashboardSession = Depends(get_session),
):
    """Enable or disable one chart series."""
    enabled = session.toggle_series(series_id)
    return SeriesToggleResponse(series_id=series_id, enabled=enabled)


@router.put("/events", response_model=EventsUploadResponse)
async def replace_events(
    snapshot: Any = Body(...),
    session: DashboardSession = Depends(get_session),
):
    """Replace the event snapshot (series id -> list of events)."""
    events, stats = normalize_events_with_stats(snapshot)
    session.set_events(events)
    return EventsUploadResponse(
        accepted=stats["accepted"],
        dropped=stats["dropped"],
        series=list(session.series.universe),
    )
