"""Pytest configuration and fixtures for integration tests."""

from __future__ import annotations

import os
from pathlib import Path
from typing import TYPE_CHECKING

import pytest
from dotenv import load_dotenv

from pytoon import Credentials, ToonClient


if TYPE_CHECKING:
    from collections.abc import AsyncGenerator


# Load .env file from project root
env_path = Path(__file__).parents[2] / ".env"
load_dotenv(env_path)


@pytest.fixture
def integration_credentials() -> Credentials:
    """Load integration test credentials from environment.

    Skips the test when the credentials are not configured.
    """
    username = os.getenv("TOONAPI_TEST_USERNAME")
    password = os.getenv("TOONAPI_TEST_PASSWORD")
    consumer_key = os.getenv("TOONAPI_TEST_CONSUMER_KEY")
    consumer_secret = os.getenv("TOONAPI_TEST_CONSUMER_SECRET")

    if not (username and password and consumer_key and consumer_secret):
        pytest.skip(
            "Missing TOONAPI_TEST_USERNAME, TOONAPI_TEST_PASSWORD, "
            "TOONAPI_TEST_CONSUMER_KEY or TOONAPI_TEST_CONSUMER_SECRET"
        )

    return Credentials(
        username=username,
        password=password,
        tenant_id=os.getenv("TOONAPI_TEST_TENANT_ID", "eneco"),
        consumer_key=consumer_key,
        consumer_secret=consumer_secret,
    )


@pytest.fixture
async def integration_client(integration_credentials: Credentials) -> AsyncGenerator[ToonClient]:
    """Create a fresh client per test against the live API."""
    base_url = os.getenv("TOONAPI_TEST_BASE_URL", "https://api.toon.eu")
    async with ToonClient(integration_credentials, base_url=base_url) as client:
        yield client
