"""Fixtures for API tests."""

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from api.main import app
from config import AppConfig, GameConfig


@pytest.fixture(autouse=True)
def fast_resolution(monkeypatch):
    """Resolve matched sets after 10ms instead of a full second."""
    monkeypatch.setattr(
        "api.routes.game.config",
        AppConfig(game=GameConfig(resolve_delay_ms=10)),
    )


@pytest_asyncio.fixture
async def client():
    """Create test client."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest_asyncio.fixture
async def session(client):
    """Start a game and return headers carrying its session."""
    response = await client.post("/api/game/new")
    return {"X-Session-ID": response.json()["session_id"]}
