"""Heatmap API endpoints."""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query

from imgdash.analytics.heatmap import events_on_day
from imgdash.analytics.pipeline import DashboardSession
from imgdash.config.loader import get_timezone
from imgdash.server.dependencies import get_config, get_session
from imgdash.server.models.common import LOOKBACK_PATTERN
from imgdash.server.models.heatmap import DayDetailResponse, DayEvent, HeatmapResponse
from imgdash.server.views import compute_view, heatmap_response
from imgdash.utils.timestamps import to_iso_string

router = APIRouter(prefix="/api", tags=["heatmap"])


@router.get("/heatmap", response_model=HeatmapResponse)
async def heatmap(
    lookback: Optional[str] = Query(None, pattern=LOOKBACK_PATTERN),
    session: DashboardSession = Depends(get_session),
    config: dict = Depends(get_config),
):
    """Get the calendar activity heatmap for the lookback window."""
    # The heatmap leaves the stored chart alone
    view = compute_view(session, store=False, lookback=lookback)
    return heatmap_response(view, config)


@router.get("/heatmap/day/{day}", response_model=DayDetailResponse)
async def heatmap_day(
    day: date,
    session: DashboardSession = Depends(get_session),
    config: dict = Depends(get_config),
):
    """Get the events behind one heatmap cell."""
    events = events_on_day(session.events, day, get_timezone(config))
    return DayDetailResponse(
        date=day,
        count=len(events),
        events=[
            DayEvent(
                timestamp=to_iso_string(e.timestamp),
                series_id=e.series_id,
                user_id=e.user_id,
                app_id=e.app_id,
                user_name=e.user_name,
                user_email=e.user_email,
            )
            for e in events
        ],
    )
