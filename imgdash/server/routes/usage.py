"""Usage chart API endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from imgdash.analytics.geometry import hit_test
from imgdash.analytics.pipeline import DashboardSession
from imgdash.server.dependencies import get_config, get_session
from imgdash.server.models.common import GRANULARITY_PATTERN, RANGE_PATTERN
from imgdash.server.models.usage import HitTestResponse, UsageResponse
from imgdash.server.views import compute_view, resolve_viewport, tooltip_model, usage_response

router = APIRouter(prefix="/api", tags=["usage"])


@router.get("/usage", response_model=UsageResponse)
async def usage(
    granularity: Optional[str] = Query(None, pattern=GRANULARITY_PATTERN),
    range_name: Optional[str] = Query(None, alias="range", pattern=RANGE_PATTERN),
    width: Optional[float] = Query(None, ge=0),
    height: Optional[float] = Query(None, ge=0),
    padding: Optional[float] = Query(None, ge=0),
    session: DashboardSession = Depends(get_session),
    config: dict = Depends(get_config),
):
    """Get time buckets, series styles and chart geometry."""
    viewport = resolve_viewport(config, width, height, padding)
    view = compute_view(session, viewport=viewport, granularity=granularity, range=range_name)
    return usage_response(view)


@router.get("/usage/hit-test", response_model=HitTestResponse)
async def usage_hit_test(
    pointer_x: float = Query(...),
    width: Optional[float] = Query(None, ge=0),
    height: Optional[float] = Query(None, ge=0),
    padding: Optional[float] = Query(None, ge=0),
    session: DashboardSession = Depends(get_session),
    config: dict = Depends(get_config),
):
    """Find the bucket under the pointer in the most recently computed chart."""
    view = session.view
    if view is None:
        view = compute_view(session)

    if width is None and height is None and padding is None:
        viewport = view.viewport
    else:
        viewport = resolve_viewport(config, width, height, padding)

    if not view.buckets:
        return HitTestResponse(status="no_data")
    if viewport.is_degenerate:
        return HitTestResponse(status="invalid_viewport")

    tooltip = hit_test(pointer_x, view.buckets, view.enabled_series, viewport)
    return HitTestResponse(status="ok", tooltip=tooltip_model(tooltip))
