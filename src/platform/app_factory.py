"""
Shared FastAPI App Factory

Provides common app setup for production and test environments.
"""

from collections.abc import Callable
from contextlib import AbstractAsyncContextManager
from typing import Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from src.platform.config.core_setting import settings
from src.platform.exception.exception_handlers import register_exception_handlers
from src.platform.observability.tracing import TracingConfig
from src.service.marketplace.driving_adapter.http_controller.admin_controller import (
    router as admin_router,
)
from src.service.marketplace.driving_adapter.http_controller.advisor_controller import (
    router as advisor_router,
)
from src.service.marketplace.driving_adapter.http_controller.auth_controller import (
    router as auth_router,
)
from src.service.marketplace.driving_adapter.http_controller.community_controller import (
    router as community_router,
)
from src.service.marketplace.driving_adapter.http_controller.favorite_controller import (
    router as favorite_router,
)
from src.service.marketplace.driving_adapter.http_controller.notification_controller import (
    router as notification_router,
)
from src.service.marketplace.driving_adapter.http_controller.payment_controller import (
    router as payment_router,
)
from src.service.marketplace.driving_adapter.http_controller.reservation_controller import (
    router as reservation_router,
)
from src.service.marketplace.driving_adapter.http_controller.review_controller import (
    router as review_router,
)
from src.service.marketplace.driving_adapter.http_controller.user_controller import (
    router as user_router,
)


def create_app(
    *,
    lifespan: Callable[[FastAPI], AbstractAsyncContextManager[Any]],
    title_suffix: str = '',
    description: str = 'Stalk Advisory Marketplace',
    service_name: str = 'stalk-api',
) -> FastAPI:
    """
    Create a configured FastAPI application.

    Args:
        lifespan: Async context manager for app lifespan (startup/shutdown)
        title_suffix: Optional suffix for app title (e.g., " (Test)")
        description: App description
        service_name: Service name for tracing

    Returns:
        Configured FastAPI application
    """
    app = FastAPI(
        title=f'{settings.PROJECT_NAME}{title_suffix}',
        description=description,
        version=settings.VERSION,
        lifespan=lifespan,
    )

    # Auto-instrument FastAPI (must be done before mounting routes)
    tracing_config = TracingConfig(service_name=service_name)
    tracing_config.instrument_fastapi(app=app)

    app.add_middleware(
        CORSMiddleware,  # type: ignore
        allow_origins=settings.BACKEND_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=['*'],
        allow_headers=['*'],
    )

    register_exception_handlers(app)

    app.include_router(auth_router, prefix='/api/auth', tags=['auth'])
    app.include_router(user_router, prefix='/api/users', tags=['user'])
    app.include_router(advisor_router, prefix='/api/advisors', tags=['advisor'])
    app.include_router(admin_router, prefix='/api/admin', tags=['admin'])
    app.include_router(reservation_router, prefix='/api/reservations', tags=['reservation'])
    app.include_router(payment_router, prefix='/api/payments', tags=['payment'])
    app.include_router(notification_router, prefix='/api/notifications', tags=['notification'])
    app.include_router(community_router, prefix='/api/community', tags=['community'])
    app.include_router(favorite_router, prefix='/api/favorites', tags=['favorite'])
    app.include_router(review_router, prefix='/api/reviews', tags=['review'])

    _register_common_endpoints(app)

    return app


def _register_common_endpoints(app: FastAPI) -> None:
    """Register health and metrics endpoints."""

    @app.get('/health')
    async def health_check() -> dict[str, str]:
        """Health check endpoint for container orchestration."""
        return {'status': 'healthy', 'service': settings.PROJECT_NAME}

    @app.get('/metrics')
    async def get_metrics() -> PlainTextResponse:
        """Prometheus metrics endpoint."""
        return PlainTextResponse(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
