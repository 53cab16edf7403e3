"""
Unit test configuration for the marketplace service.

Overrides fixtures from the parent conftest so unit tests run without the
database, the Redis doubles or the session-scoped TestClient.
"""

from collections.abc import AsyncGenerator, Generator
from unittest.mock import MagicMock

from fastapi.testclient import TestClient
import pytest


@pytest.fixture(scope='function')
def clean_state() -> Generator[None, None, None]:
    """No-op override for unit tests - no in-memory state to reset"""
    yield


@pytest.fixture(scope='function')
async def clean_database() -> AsyncGenerator[None, None]:
    """No-op override for unit tests - no real database needed"""
    yield


@pytest.fixture(scope='session')
def client() -> Generator[MagicMock, None, None]:
    """Mock client for unit tests - prevents TestClient/lifespan from being created"""
    mock_client = MagicMock(spec=TestClient)
    yield mock_client


@pytest.fixture(autouse=True)
def clear_client_cookies() -> Generator[None, None, None]:
    """No-op override for unit tests - uses mock client"""
    yield
