"""
Domain Event Publisher Interface

Use cases depend on this protocol; the in-process bus implements it.
"""

from typing import Any, Protocol


class IDomainEventPublisher(Protocol):
    async def publish(self, event: Any) -> None:
        """
        Hand an event to every listener subscribed to its type

        Note:
            - Never raises because of a listener failure
            - Callers publish only after their transaction has committed
        """
        ...
