from typing import Optional

from src.platform.logging.loguru_io import Logger
from src.platform.state.redis_client import redis_client
from src.service.marketplace.app.interface.i_refresh_token_store import IRefreshTokenStore


class RefreshTokenStoreImpl(IRefreshTokenStore):
    """
    Key format: refresh_token:{user_id}
    Value: the only refresh token currently valid for the user
    """

    @staticmethod
    def _key(user_id: int) -> str:
        return f'refresh_token:{user_id}'

    @Logger.io
    async def save(self, *, user_id: int, token: str, ttl_seconds: int) -> None:
        await redis_client.get_client().set(self._key(user_id), token, ex=ttl_seconds)

    async def get(self, *, user_id: int) -> Optional[str]:
        return await redis_client.get_client().get(self._key(user_id))

    @Logger.io
    async def delete(self, *, user_id: int) -> None:
        await redis_client.get_client().delete(self._key(user_id))
