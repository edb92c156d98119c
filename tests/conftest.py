"""Pytest fixtures and shared test configuration.

Provides reusable fixtures for unit and integration tests.

Fixtures:
    - config: Client configuration pointing at the in-process test service
    - fake_service: Scriptable generation service
    - asgi_client: HTTPX client wired to the fake service

Implements async fixtures with proper cleanup.
"""

from collections.abc import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient

from src.streaming.config import ClientConfig
from tests.helpers import TEST_BASE_URL, FakeGenerationService


@pytest.fixture
def config() -> ClientConfig:
    """Client configuration for the in-process test service.

    Returns:
        ClientConfig without greeting, pointed at the test base URL.
    """
    return ClientConfig(base_url=TEST_BASE_URL, greeting="", timeout=None)


@pytest.fixture
def fake_service() -> FakeGenerationService:
    """Return a fresh scriptable generation service."""
    return FakeGenerationService()


@pytest.fixture
async def asgi_client(fake_service: FakeGenerationService) -> AsyncGenerator[AsyncClient, None]:
    """Create async HTTP client bound to the fake generation service.

    Yields:
        AsyncClient routing requests to the fake service over ASGI.
    """
    transport = ASGITransport(app=fake_service.app)
    async with AsyncClient(transport=transport, base_url=TEST_BASE_URL) as client:
        yield client
