"""
OpenTelemetry tracing configuration.

Provides:
- Auto-instrumentation for FastAPI, SQLAlchemy, Redis and the httpx payment client
- Context capture/restore so listener spans on the in-process event bus stay in
  the publishing request's trace
- OTLP export when OTEL_EXPORTER_OTLP_ENDPOINT is set
"""

from contextlib import contextmanager
import os
from typing import Any, Iterator

from opentelemetry import context as otel_context, trace
from opentelemetry.context import Context
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.httpx import HTTPXClientInstrumentor
from opentelemetry.instrumentation.redis import RedisInstrumentor
from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor
from opentelemetry.sdk.resources import SERVICE_NAME, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter
from opentelemetry.sdk.trace.sampling import ALWAYS_ON


class TracingConfig:
    """
    Usage:
        # Initialize once at app startup
        tracing = TracingConfig(service_name="stalk-api")
        tracing.setup()
    """

    def __init__(
        self,
        *,
        service_name: str,
        otlp_endpoint: str | None = None,
        enable_console: bool = False,
    ) -> None:
        self.service_name = service_name
        self.otlp_endpoint = otlp_endpoint or os.getenv('OTEL_EXPORTER_OTLP_ENDPOINT')
        self.enable_console = (
            enable_console or os.getenv('OTEL_CONSOLE_EXPORT', 'false').lower() == 'true'
        )

        self._provider: TracerProvider | None = None

    def setup(self) -> None:
        """Install the global tracer provider; call once at application startup."""
        resource = Resource(attributes={SERVICE_NAME: self.service_name})

        # Head sampling cannot see errors yet; volume control belongs in the collector
        self._provider = TracerProvider(resource=resource, sampler=ALWAYS_ON)

        if self.otlp_endpoint:
            otlp_exporter = OTLPSpanExporter(endpoint=self.otlp_endpoint)
            self._provider.add_span_processor(BatchSpanProcessor(otlp_exporter))

        if self.enable_console:
            self._provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))

        trace.set_tracer_provider(self._provider)

    def instrument_fastapi(self, *, app: Any, excluded_urls: str = 'health,metrics') -> None:
        FastAPIInstrumentor.instrument_app(app, excluded_urls=excluded_urls)

    def instrument_sqlalchemy(self, *, engine: Any) -> None:
        if hasattr(engine, 'sync_engine'):  # Handle AsyncEngine by instrumenting its sync_engine
            SQLAlchemyInstrumentor().instrument(engine=engine.sync_engine)
        else:
            SQLAlchemyInstrumentor().instrument(engine=engine)

    def instrument_redis(self) -> None:
        RedisInstrumentor().instrument()

    def instrument_httpx(self) -> None:
        HTTPXClientInstrumentor().instrument()

    def shutdown(self) -> None:
        if self._provider:
            self._provider.shutdown()


def capture_trace_context() -> Context:
    """Snapshot the caller's context before handing work to another task."""
    return otel_context.get_current()


@contextmanager
def attached_trace_context(ctx: Context | None) -> Iterator[None]:
    """
    Re-attach a captured context inside a background task.

    Listener spans started inside the block become children of the span that
    published the domain event.
    """
    if ctx is None:
        yield
        return
    token = otel_context.attach(ctx)
    try:
        yield
    finally:
        otel_context.detach(token)
