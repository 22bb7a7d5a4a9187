"""FastAPI dependency injection for the dashboard session and config."""

from fastapi import Request

from imgdash.analytics.pipeline import DashboardSession


def get_session(request: Request) -> DashboardSession:
    """Get the dashboard session from app state."""
    return request.app.state.session


def get_config(request: Request) -> dict:
    """Get the loaded config from app state."""
    return request.app.state.config
