"""
In-process domain event bus

Use cases publish domain events after their transaction commits; listeners
(notification fan-out) run on the application's anyio task group so the
request never waits on them. Without a running task group (tests, scripts)
listeners are awaited inline, which keeps ordering deterministic.
"""

from collections import defaultdict
from typing import Any, Awaitable, Callable, Dict, List, Optional

from anyio.abc import TaskGroup
from opentelemetry.context import Context

from src.platform.logging.loguru_io import Logger
from src.platform.metrics.marketplace_metrics import marketplace_metrics
from src.platform.observability.tracing import attached_trace_context, capture_trace_context


EventListener = Callable[[Any], Awaitable[None]]


class InProcessEventBus:
    def __init__(self) -> None:
        self._listeners: Dict[type, List[EventListener]] = defaultdict(list)
        self._task_group: Optional[TaskGroup] = None

    def subscribe(self, event_type: type, listener: EventListener) -> None:
        if listener not in self._listeners[event_type]:
            self._listeners[event_type].append(listener)

    def clear(self) -> None:
        self._listeners.clear()

    def attach_task_group(self, task_group: Optional[TaskGroup]) -> None:
        """Set by the app lifespan; None switches back to inline dispatch."""
        self._task_group = task_group

    async def publish(self, event: Any) -> None:
        listeners = self._listeners.get(type(event), [])
        if not listeners:
            Logger.base.debug(f'📭 [EVENT BUS] No listeners for {type(event).__name__}')
            return

        ctx = capture_trace_context()
        for listener in listeners:
            if self._task_group is not None:
                self._task_group.start_soon(self._dispatch, listener, event, ctx)
            else:
                await self._dispatch(listener, event, ctx)

    async def _dispatch(self, listener: EventListener, event: Any, ctx: Optional[Context]) -> None:
        event_name = type(event).__name__
        with attached_trace_context(ctx):
            try:
                await listener(event)
            except Exception:
                # Listener failures must never roll back or fail the publishing request
                marketplace_metrics.event_listener_failures.labels(event=event_name).inc()
                Logger.base.exception(
                    f'❌ [EVENT BUS] Listener {getattr(listener, "__qualname__", listener)} '
                    f'failed for {event_name}'
                )
