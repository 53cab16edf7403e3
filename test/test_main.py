"""
Test-specific FastAPI Application

No Redis, no payment gateway and no task group: state lives in in-memory
doubles and domain event listeners run inline so notifications are visible
as soon as the request returns.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from dependency_injector import providers
from fastapi import FastAPI
from fastapi.responses import RedirectResponse

from src.platform.app_factory import create_app
from src.platform.config.di import container
from src.platform.config.wire_modules import WIRE_MODULES
from src.platform.database.orm_db_setting import create_db_and_tables, dispose_engine
from src.platform.logging.loguru_io import Logger
from src.service.marketplace.driving_adapter.event_listener.notification_event_listener import (
    NotificationEventListener,
)
from test.redis_test_doubles import (
    notification_counter_double,
    payment_gateway_double,
    refresh_token_store_double,
)


@asynccontextmanager
async def lifespan_for_tests(app: FastAPI) -> AsyncIterator[None]:
    Logger.base.info('🧪 [Test App] Starting up...')

    await create_db_and_tables()
    Logger.base.info('🗄️  [Test App] Database tables created')

    container.refresh_token_store.override(providers.Object(refresh_token_store_double))
    container.notification_counter.override(providers.Object(notification_counter_double))
    container.payment_gateway.override(providers.Object(payment_gateway_double))
    Logger.base.info('🔄 [Test App] Redis state and payment gateway replaced with doubles')

    container.wire(modules=WIRE_MODULES)
    Logger.base.info('🔌 [Test App] Dependency injection wired')

    event_bus = container.event_bus()
    NotificationEventListener(
        deliver_notification_use_case=container.notification_delivery_use_case()
    ).register(event_bus)

    Logger.base.info('✅ [Test App] Startup complete (inline event dispatch)')

    yield

    Logger.base.info('🛑 [Test App] Shutting down...')
    event_bus.clear()
    await dispose_engine()

    container.unwire()
    container.reset_override()
    container.reset_singletons()

    Logger.base.info('👋 [Test App] Shutdown complete')


app = create_app(
    lifespan=lifespan_for_tests,
    title_suffix=' (Test)',
    description='Test Application - sqlite, in-memory Redis doubles, inline events',
    service_name='test-stalk-api',
)


@app.get('/')
async def root() -> RedirectResponse:
    return RedirectResponse(url='/docs')
