"""
SQLAlchemy async engine and session management

This module provides:
1. AsyncEngineManager: event-loop-aware engine + session maker
2. Base: declarative base shared by every ORM model
3. Database: session provider injected into repositories through the DI container

The engine URL comes from settings.DATABASE_URL_ASYNC, so production runs on
asyncpg while tests point DATABASE_URL at an aiosqlite file.
"""

import asyncio
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Optional

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from src.platform.config.core_setting import settings
from src.platform.logging.loguru_io import Logger


class AsyncEngineManager:
    """
    Keeps the engine bound to the running event loop.

    TestClient and pytest-asyncio may each spin their own loop; reusing an
    engine across loops raises "Future attached to a different loop".
    """

    def __init__(self) -> None:
        self._engine: Optional[AsyncEngine] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._session_maker: Optional[async_sessionmaker[AsyncSession]] = None

    def get_engine(self) -> AsyncEngine:
        try:
            current_loop: Optional[asyncio.AbstractEventLoop] = asyncio.get_running_loop()
        except RuntimeError:
            current_loop = None

        if self._engine is None or (current_loop is not None and self._loop is not current_loop):
            if self._engine is not None:
                Logger.base.warning('🔄 [DB] Event loop changed, recreating engine...')
            Logger.base.info(f'🔗 [DB] Creating engine for event loop {id(current_loop)}')
            self._engine = self._create_engine()
            self._session_maker = None
            self._loop = current_loop

        return self._engine

    def get_session_maker(self) -> async_sessionmaker[AsyncSession]:
        engine = self.get_engine()
        if self._session_maker is None:
            self._session_maker = async_sessionmaker(
                engine,
                class_=AsyncSession,
                expire_on_commit=False,
            )
        return self._session_maker

    async def dispose(self) -> None:
        if self._engine is not None:
            await self._engine.dispose()
        self._engine = None
        self._session_maker = None
        self._loop = None

    def _create_engine(self) -> AsyncEngine:
        if settings.IS_SQLITE:
            engine = create_async_engine(settings.DATABASE_URL_ASYNC, echo=False)
            event.listen(engine.sync_engine, 'connect', _enable_sqlite_foreign_keys)
            return engine

        return create_async_engine(
            settings.DATABASE_URL_ASYNC,
            echo=False,
            pool_size=settings.DB_POOL_SIZE_WRITE,
            max_overflow=settings.DB_POOL_MAX_OVERFLOW,
            pool_timeout=settings.DB_POOL_TIMEOUT,
            pool_recycle=settings.DB_POOL_RECYCLE,
            pool_pre_ping=settings.DB_POOL_PRE_PING,
        )


def _enable_sqlite_foreign_keys(dbapi_connection: Any, connection_record: Any) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute('PRAGMA foreign_keys=ON')
    cursor.close()


_engine_manager = AsyncEngineManager()


def get_engine() -> AsyncEngine:
    return _engine_manager.get_engine()


def get_session_maker() -> async_sessionmaker[AsyncSession]:
    return _engine_manager.get_session_maker()


async def dispose_engine() -> None:
    await _engine_manager.dispose()


class Base(DeclarativeBase):
    pass


async def create_db_and_tables() -> None:
    """Create tables if they don't exist (tests and local dev; production runs alembic)"""
    # Importing the model package registers every table on Base.metadata
    import src.service.marketplace.driven_adapter.model  # noqa: F401

    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all, checkfirst=True)


async def drop_db_and_tables() -> None:
    import src.service.marketplace.driven_adapter.model  # noqa: F401

    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


class Database:
    """Session provider for repositories (`session_factory=database.provided.session`)"""

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Rolls back automatically when the block raises"""
        session_maker = get_session_maker()
        async with session_maker() as session:
            yield session
