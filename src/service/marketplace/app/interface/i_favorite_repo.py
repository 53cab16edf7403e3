from abc import ABC, abstractmethod
from typing import List

from src.service.marketplace.app.dto.favorite_dto import FavoriteAdvisorItem


class IFavoriteRepo(ABC):
    @abstractmethod
    async def add(self, *, user_id: int, advisor_id: int) -> bool:
        """Returns False when the favorite already existed"""
        pass

    @abstractmethod
    async def remove(self, *, user_id: int, advisor_id: int) -> bool:
        """Returns False when there was nothing to remove"""
        pass

    @abstractmethod
    async def list_by_user(
        self, *, user_id: int, offset: int, limit: int
    ) -> List[FavoriteAdvisorItem]:
        pass
