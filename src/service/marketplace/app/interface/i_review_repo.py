from abc import ABC, abstractmethod
from typing import List, Optional

from src.service.marketplace.app.dto.review_dto import ReviewItem
from src.service.marketplace.domain.entity.review_entity import Review


class IReviewRepo(ABC):
    @abstractmethod
    async def create(self, review: Review) -> Review:
        pass

    @abstractmethod
    async def get_by_id(self, review_id: int) -> Optional[Review]:
        """Soft-deleted reviews are treated as missing"""
        pass

    @abstractmethod
    async def exists_by_reservation(self, reservation_id: int) -> bool:
        pass

    @abstractmethod
    async def update(self, review: Review) -> Review:
        pass

    @abstractmethod
    async def soft_delete(self, review_id: int) -> None:
        pass

    @abstractmethod
    async def list_by_user(self, *, user_id: int, offset: int, limit: int) -> List[ReviewItem]:
        pass

    @abstractmethod
    async def list_by_advisor(
        self, *, advisor_id: int, offset: int, limit: int
    ) -> List[ReviewItem]:
        pass
