from abc import ABC, abstractmethod
from datetime import datetime

from src.service.marketplace.domain.entity.user_entity import UserEntity


class IUserCommandRepo(ABC):
    """User Command Repository Abstract Interface - Handles write operations"""

    @abstractmethod
    async def create(self, user_entity: UserEntity) -> UserEntity:
        pass

    @abstractmethod
    async def update(self, user_entity: UserEntity) -> UserEntity:
        pass

    @abstractmethod
    async def update_password(self, *, user_id: int, hashed_password: str) -> None:
        pass

    @abstractmethod
    async def update_last_login(self, *, user_id: int, logged_in_at: datetime) -> None:
        pass
