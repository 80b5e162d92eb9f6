"""Pytest configuration and fixtures."""

import random
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from labyrinth.api.routes.maze import limiter
from labyrinth.core import MazeConfig
from labyrinth.main import app


@pytest.fixture
def rng() -> random.Random:
    """Seeded random source for reproducible mazes."""
    return random.Random(1234)


@pytest.fixture
def small_config() -> MazeConfig:
    """11x11 recursive configuration used by the pathfinding scenarios."""
    return MazeConfig(width=11, height=11, algorithm="recursive")


@pytest_asyncio.fixture(scope="function")
async def client() -> AsyncGenerator[AsyncClient, None]:
    """Create a test HTTP client with fresh rate-limit counters."""
    limiter.reset()
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def sample_generate_request() -> dict:
    """Sample generation request body."""
    return {
        "width": 11,
        "height": 11,
        "algorithm": "recursive",
        "seed": 42,
    }
