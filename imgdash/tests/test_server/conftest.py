"""Test fixtures for server tests.

Builds a small deterministic event snapshot and an app serving it.
"""

import copy
from datetime import datetime, timedelta, timezone

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from imgdash.config.loader import DEFAULT_CONFIG
from imgdash.etl import normalize_events
from imgdash.server.app import create_app


@pytest.fixture
def test_config(tmp_path):
    """Default config pinned to UTC."""
    config = copy.deepcopy(DEFAULT_CONFIG)
    config["timezone"] = "UTC"
    config["events_path"] = str(tmp_path / "events.json")
    return config


def _raw_snapshot():
    """Raw snapshot in the API's series -> events shape.

    Creates:
    - flux-dev: 2 events an hour ago, 1 event three days ago
    - sdxl: 1 event three days ago
    - upscale: 1 event on 2024-03-01, 1 malformed event
    """
    now = datetime.now(timezone.utc)
    recent = (now - timedelta(hours=1)).isoformat()
    earlier = (now - timedelta(days=3)).isoformat()
    return {
        "flux-dev": [
            {"created_at": recent, "user_id": "u1", "app_id": "celine"},
            {"created_at": recent, "user_id": "u2", "app_id": "celine"},
            {"created_at": earlier, "user_id": "u1", "app_id": "ifm"},
        ],
        "sdxl": [
            {"created_at": earlier, "user": {"id": "u3", "name": "Ada"}, "app": "ifm"},
        ],
        "upscale": [
            {"created_at": "2024-03-01T10:00:00Z", "user_id": "u4", "user_email": "ops@example.com",
             "app_id": "limn"},
            {"created_at": "yesterday-ish"},
        ],
    }


@pytest.fixture
def raw_snapshot():
    return _raw_snapshot()


@pytest_asyncio.fixture
async def client(test_config, raw_snapshot):
    """Create an async test client serving the deterministic snapshot."""
    app = create_app(config=test_config, events=normalize_events(raw_snapshot))

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
