from abc import ABC, abstractmethod
from typing import Optional

from src.service.marketplace.domain.entity.user_entity import UserEntity


class IUserQueryRepo(ABC):
    """User Query Repository Abstract Interface - Handles read operations"""

    @abstractmethod
    async def get_by_id(self, user_id: int) -> Optional[UserEntity]:
        pass

    @abstractmethod
    async def get_by_login_id(self, login_id: str) -> Optional[UserEntity]:
        pass

    @abstractmethod
    async def exists_by_login_id(self, login_id: str) -> bool:
        pass

    @abstractmethod
    async def exists_by_nickname(self, nickname: str) -> bool:
        pass
