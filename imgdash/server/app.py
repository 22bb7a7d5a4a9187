"""
FastAPI application factory for the imgdash statistics API.

Creates the app with all routes, lifespan management and the event snapshot.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from imgdash.analytics.pipeline import DashboardSession
from imgdash.config.loader import load_config, get_events_path
from imgdash.etl import load_snapshot, normalize_events

logger = logging.getLogger("imgdash.server")


def _load_events(config: dict):
    """Read and normalize the configured snapshot; empty if unavailable."""
    path = get_events_path(config)
    try:
        raw = load_snapshot(path)
    except FileNotFoundError:
        logger.warning("No event snapshot at %s, starting with no data", path)
        return ()
    except ValueError as e:
        logger.warning("%s, starting with no data", e)
        return ()
    return normalize_events(raw)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Load config and the event snapshot into a dashboard session."""
    config = app.state.config if hasattr(app.state, "config") else load_config()
    app.state.config = config

    if not hasattr(app.state, "session"):
        app.state.session = DashboardSession(config, _load_events(config))

    yield


def create_app(config: dict = None, events=None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        config: Configuration dict (loaded from disk if omitted)
        events: Normalized events; skips reading the snapshot file when given
    """
    app = FastAPI(
        title="imgdash Statistics API",
        description="Usage analytics for the image-generation admin dashboard",
        version="1.0.0",
        lifespan=lifespan,
    )

    if config:
        app.state.config = config
        if events is not None:
            app.state.session = DashboardSession(config, events)

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=500,
            content={"error": "Internal server error", "detail": str(exc)},
        )

    from imgdash.server.routes.health import router as health_router
    from imgdash.server.routes.heatmap import router as heatmap_router
    from imgdash.server.routes.usage import router as usage_router
    from imgdash.server.routes.controls import router as controls_router

    app.include_router(health_router)
    app.include_router(heatmap_router)
    app.include_router(usage_router)
    app.include_router(controls_router)

    return app
