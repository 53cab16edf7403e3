from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional

from src.service.marketplace.domain.entity.notification_entity import Notification


class INotificationRepo(ABC):
    @abstractmethod
    async def create(self, notification: Notification) -> Notification:
        pass

    @abstractmethod
    async def get_by_id(self, notification_id: int) -> Optional[Notification]:
        pass

    @abstractmethod
    async def list_by_user(self, *, user_id: int, offset: int, limit: int) -> List[Notification]:
        pass

    @abstractmethod
    async def list_created_after(self, *, user_id: int, after: datetime) -> List[Notification]:
        pass

    @abstractmethod
    async def list_latest(self, *, user_id: int, limit: int) -> List[Notification]:
        pass

    @abstractmethod
    async def count_unread(self, *, user_id: int) -> int:
        pass

    @abstractmethod
    async def mark_read(self, *, notification_id: int, user_id: int) -> bool:
        """Returns True when the row was unread and got updated"""
        pass

    @abstractmethod
    async def mark_all_read(self, *, user_id: int) -> int:
        pass
