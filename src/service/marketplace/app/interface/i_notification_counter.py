from abc import ABC, abstractmethod
from typing import Optional


class INotificationCounter(ABC):
    """Cached unread-notification count and last-check timestamp per user"""

    @abstractmethod
    async def get_unread_count(self, *, user_id: int) -> Optional[int]:
        pass

    @abstractmethod
    async def set_unread_count(self, *, user_id: int, count: int) -> None:
        pass

    @abstractmethod
    async def increment(self, *, user_id: int) -> int:
        pass

    @abstractmethod
    async def decrement(self, *, user_id: int) -> int:
        """Never goes below 0"""
        pass

    @abstractmethod
    async def get_last_check(self, *, user_id: int) -> Optional[int]:
        """Epoch milliseconds"""
        pass

    @abstractmethod
    async def set_last_check(self, *, user_id: int, epoch_millis: int) -> None:
        pass
