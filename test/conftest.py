"""
Test Configuration and Fixtures

- Integration tests run the real app against a per-worker sqlite file
- Redis state and the payment gateway are in-memory doubles (test.redis_test_doubles)
- Unit tests (marked `unit`) never touch the database or the HTTP client
"""

# =============================================================================
# CRITICAL: Environment setup MUST happen before any other imports
# Settings are read at import time, so DATABASE_URL has to be in place first
# =============================================================================
import os
from pathlib import Path

from dotenv import load_dotenv


def _early_setup_test_environment() -> None:
    """Set test environment variables before any module imports."""
    test_dir = Path(__file__).parent
    env_file = '.env' if Path('.env').exists() else '.env.example'
    load_dotenv(env_file)

    worker_id = os.environ.get('PYTEST_XDIST_WORKER', 'master')
    db_dir = test_dir / 'test_db'
    db_dir.mkdir(exist_ok=True)
    os.environ['DATABASE_URL'] = f'sqlite+aiosqlite:///{db_dir / f"stalk_test_{worker_id}.db"}'

    test_log_dir = test_dir / 'test_log'
    test_log_dir.mkdir(exist_ok=True)
    os.environ['TEST_LOG_DIR'] = str(test_log_dir)

    os.environ.setdefault('SECRET_KEY', 'test_secret_key_for_pytest_only_0123456789')
    os.environ.setdefault('TIMEZONE', 'Asia/Seoul')


_early_setup_test_environment()

import asyncio  # noqa: E402
from collections.abc import AsyncGenerator, Callable, Generator  # noqa: E402
from typing import Any  # noqa: E402

from fastapi.testclient import TestClient  # noqa: E402
import pytest  # noqa: E402
from sqlalchemy import text  # noqa: E402
from sqlalchemy.ext.asyncio import create_async_engine  # noqa: E402

from src.platform.config.core_setting import settings  # noqa: E402
from src.platform.database.orm_db_setting import Base  # noqa: E402
from test.redis_test_doubles import (  # noqa: E402
    notification_counter_double,
    payment_gateway_double,
    refresh_token_store_double,
)
from test.shared.utils import signup_user  # noqa: E402
from test.util_constant import (  # noqa: E402
    ANOTHER_USER_LOGIN_ID,
    ANOTHER_USER_NAME,
    ANOTHER_USER_NICKNAME,
    TEST_USER_LOGIN_ID,
    TEST_USER_NAME,
    TEST_USER_NICKNAME,
)


# =============================================================================
# Pytest Hooks
# =============================================================================
def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        markers = [m.name for m in item.iter_markers()]
        if 'unit' not in markers:
            # Clean before any data fixture (test_user, ...) runs
            item.fixturenames[0:0] = ['clean_state', 'clean_database']


# =============================================================================
# Database Cleanup
# =============================================================================
async def _clean_all_tables() -> None:
    # Importing the model package registers every table on Base.metadata
    import src.service.marketplace.driven_adapter.model  # noqa: F401

    engine = create_async_engine(settings.DATABASE_URL_ASYNC)
    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all, checkfirst=True)
            for table in reversed(Base.metadata.sorted_tables):
                await conn.execute(table.delete())
    finally:
        await engine.dispose()


# =============================================================================
# Integration Test Fixtures
# =============================================================================
@pytest.fixture(scope='function')
def clean_state() -> Generator[None, None, None]:
    refresh_token_store_double.clear()
    notification_counter_double.clear()
    payment_gateway_double.clear()
    yield
    payment_gateway_double.clear()


@pytest.fixture(scope='function')
async def clean_database() -> AsyncGenerator[None, None]:
    await _clean_all_tables()
    yield


# =============================================================================
# Session-scoped Fixtures
# =============================================================================
@pytest.fixture(scope='session')
def client() -> Generator[TestClient, None, None]:
    from test.test_main import app

    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client


@pytest.fixture(autouse=True)
def clear_client_cookies(request: pytest.FixtureRequest) -> Generator[None, None, None]:
    # Unit tests never build the HTTP client
    if 'unit' in [m.name for m in request.node.iter_markers()]:
        yield
        return
    client = request.getfixturevalue('client')
    client.cookies.clear()
    yield
    client.cookies.clear()


@pytest.fixture
def payment_gateway() -> Any:
    return payment_gateway_double


@pytest.fixture
def notification_counter() -> Any:
    return notification_counter_double


@pytest.fixture
def test_user(client: TestClient) -> dict[str, Any]:
    return signup_user(
        client, login_id=TEST_USER_LOGIN_ID, name=TEST_USER_NAME, nickname=TEST_USER_NICKNAME
    )


@pytest.fixture
def another_user(client: TestClient) -> dict[str, Any]:
    return signup_user(
        client,
        login_id=ANOTHER_USER_LOGIN_ID,
        name=ANOTHER_USER_NAME,
        nickname=ANOTHER_USER_NICKNAME,
    )


@pytest.fixture
def execute_sql_statement() -> Callable[..., list[dict[str, Any]] | None]:
    def _execute(
        statement: str, params: dict[str, Any] | None = None, fetch: bool = False
    ) -> list[dict[str, Any]] | None:
        async def _run() -> list[dict[str, Any]] | None:
            engine = create_async_engine(settings.DATABASE_URL_ASYNC)
            try:
                async with engine.begin() as conn:
                    result = await conn.execute(text(statement), params or {})
                    if fetch:
                        return [dict(row._mapping) for row in result]
                return None
            finally:
                await engine.dispose()

        return asyncio.run(_run())

    return _execute
