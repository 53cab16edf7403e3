"""
Production FastAPI Application

Stalk advisory marketplace API with Redis state and in-process domain events.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import anyio
from fastapi import FastAPI
from fastapi.responses import RedirectResponse

from src.platform.app_factory import create_app
from src.platform.config.di import container
from src.platform.config.wire_modules import WIRE_MODULES
from src.platform.database.orm_db_setting import dispose_engine, get_engine
from src.platform.logging.loguru_io import Logger
from src.platform.observability.tracing import TracingConfig
from src.platform.state.redis_client import redis_client
from src.service.marketplace.driving_adapter.event_listener.notification_event_listener import (
    NotificationEventListener,
)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage application lifespan: startup and shutdown."""
    Logger.base.info('🚀 [Stalk API] Starting up...')

    tracing = TracingConfig(service_name='stalk-api')
    tracing.setup()
    tracing.instrument_sqlalchemy(engine=get_engine())
    tracing.instrument_redis()
    tracing.instrument_httpx()
    Logger.base.info('📊 [Stalk API] OpenTelemetry tracing configured')

    container.wire(modules=WIRE_MODULES)
    Logger.base.info('🔌 [Stalk API] Dependency injection wired')

    # Fail-fast: refresh tokens and unread counters live in Redis
    await redis_client.initialize()

    event_bus = container.event_bus()
    NotificationEventListener(
        deliver_notification_use_case=container.notification_delivery_use_case()
    ).register(event_bus)

    async with anyio.create_task_group() as tg:
        event_bus.attach_task_group(tg)
        Logger.base.info('✅ [Stalk API] Ready to serve requests')

        yield

        Logger.base.info('🛑 [Stalk API] Shutting down...')
        event_bus.attach_task_group(None)
        tg.cancel_scope.cancel()

    event_bus.clear()
    await redis_client.disconnect()
    await dispose_engine()
    Logger.base.info('🗄️  [Stalk API] Database engine disposed')

    tracing.shutdown()
    container.unwire()

    Logger.base.info('👋 [Stalk API] Shutdown complete')


app = create_app(
    lifespan=lifespan,
    description='Stalk - book paid 1:1 consultations with certified investment advisors',
)


@app.get('/')
async def root() -> RedirectResponse:
    """Root endpoint - redirect to docs."""
    return RedirectResponse(url='/docs')
