"""Health check endpoint."""

import time
from fastapi import APIRouter, Depends

from imgdash.analytics.pipeline import DashboardSession
from imgdash.server.dependencies import get_session

router = APIRouter(prefix="/api", tags=["health"])

_start_time = time.time()


@router.get("/health")
async def health_check(session: DashboardSession = Depends(get_session)):
    """Health check: returns status, uptime and snapshot size."""
    uptime = int(time.time() - _start_time)

    return {
        "status": "ok",
        "uptime_seconds": uptime,
        "events": len(session.events),
        "series": len(session.series.universe),
        "version": "1.0.0",
    }
