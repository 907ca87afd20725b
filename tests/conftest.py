"""Pytest configuration and shared fixtures."""

from __future__ import annotations

from typing import TYPE_CHECKING
from unittest.mock import AsyncMock, MagicMock

import pytest
from aiohttp import ClientSession

from pytoon.models import Credentials
from tests.helpers import FakeClock, ScriptedTransport


if TYPE_CHECKING:
    from collections.abc import AsyncGenerator


@pytest.fixture
def credentials() -> Credentials:
    """Credentials for a test account."""
    return Credentials(
        username="user@example.com",
        password="password123",
        tenant_id="eneco",
        consumer_key="consumer-key",
        consumer_secret="consumer-secret",
    )


@pytest.fixture
def transport() -> ScriptedTransport:
    """Empty scripted transport."""
    return ScriptedTransport()


@pytest.fixture
def clock() -> FakeClock:
    """Clock frozen at 2024-01-01T00:00:00Z."""
    return FakeClock()


@pytest.fixture
async def mock_session() -> AsyncGenerator[ClientSession]:
    """Create a mock aiohttp ClientSession.

    Yields:
        Mock ClientSession for testing.
    """
    session = AsyncMock(spec=ClientSession)
    session.closed = False

    async def mock_close() -> None:
        session.closed = True

    session.close = mock_close

    yield session

    if not session.closed:
        await session.close()


@pytest.fixture
def mock_response() -> MagicMock:
    """Create a mock aiohttp ClientResponse usable as an async context manager.

    Returns:
        Mock ClientResponse for testing.
    """
    response = MagicMock()
    response.status = 200
    response.headers = {}
    response.text = AsyncMock(return_value="")
    response.__aenter__ = AsyncMock(return_value=response)
    response.__aexit__ = AsyncMock(return_value=None)
    return response
