from abc import ABC, abstractmethod
from typing import Optional


class IRefreshTokenStore(ABC):
    """Server-side copy of each user's current refresh token"""

    @abstractmethod
    async def save(self, *, user_id: int, token: str, ttl_seconds: int) -> None:
        pass

    @abstractmethod
    async def get(self, *, user_id: int) -> Optional[str]:
        pass

    @abstractmethod
    async def delete(self, *, user_id: int) -> None:
        pass
