from abc import ABC, abstractmethod
from datetime import datetime

import attrs

from src.service.marketplace.domain.entity.user_entity import UserEntity


@attrs.define(frozen=True)
class RefreshClaims:
    user_id: int
    expires_at: datetime


class ITokenProvider(ABC):
    """Issues and verifies access/refresh tokens"""

    @abstractmethod
    def create_access_token(self, user_entity: UserEntity) -> str:
        pass

    @abstractmethod
    def create_refresh_token(self, user_entity: UserEntity) -> str:
        pass

    @abstractmethod
    def decode_refresh_token(self, token: str) -> RefreshClaims:
        """
        Raises:
            AuthenticationError: expired, tampered or not a refresh token
        """
        pass

    @property
    @abstractmethod
    def refresh_ttl_seconds(self) -> int:
        pass
