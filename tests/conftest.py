"""
Redline - Shared Test Fixtures
Engine instances and the async API client.
"""

import os
import pytest
from typing import AsyncGenerator
from httpx import AsyncClient, ASGITransport

# Configure test environment BEFORE importing app
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["MAX_DOCUMENT_CHARS"] = "20000"
os.environ["MAX_BATCH_SIZE"] = "3"
os.environ["COMPARISON_TIMEOUT_SECONDS"] = "30"
os.environ["DETECT_MOVES"] = "false"

from redline.main import app
from redline.core.config import get_settings
from redline.services.comparison import RedlineEngine


# =============================================================================
# Core Fixtures
# =============================================================================

@pytest.fixture
def anyio_backend():
    """Use asyncio for async tests."""
    return "asyncio"


@pytest.fixture
def engine() -> RedlineEngine:
    """Engine with default thresholds."""
    return RedlineEngine()


@pytest.fixture
def move_engine() -> RedlineEngine:
    """Engine that reports relocated paragraphs."""
    return RedlineEngine({"detect_moves": True})


@pytest.fixture
def settings():
    return get_settings()


@pytest.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    """Create async test client."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture(autouse=True)
def clear_dependency_overrides():
    """Undo per-test dependency overrides."""
    yield
    app.dependency_overrides.clear()
