"""
Unread notification counter backed by Redis

Key format:
    notification:unread_count:{user_id}  TTL 30 days
    notification:last_check:{user_id}    TTL 7 days (epoch millis)

The database stays the source of truth; a missing key means "unknown"
and callers re-seed it from a COUNT query.
"""

from typing import Optional

from src.platform.logging.loguru_io import Logger
from src.platform.state.redis_client import redis_client
from src.service.marketplace.app.interface.i_notification_counter import INotificationCounter


# Clamp at zero and refresh the TTL in one round trip; ARGV[1] is the TTL in seconds
_DECREMENT_FLOOR_ZERO = """
local value = redis.call('DECR', KEYS[1])
if value < 0 then
    redis.call('SET', KEYS[1], 0, 'EX', ARGV[1])
    return 0
end
redis.call('EXPIRE', KEYS[1], ARGV[1])
return value
"""


class NotificationCounterImpl(INotificationCounter):
    UNREAD_TTL_SECONDS = 30 * 24 * 3600
    LAST_CHECK_TTL_SECONDS = 7 * 24 * 3600

    @staticmethod
    def _unread_key(user_id: int) -> str:
        return f'notification:unread_count:{user_id}'

    @staticmethod
    def _last_check_key(user_id: int) -> str:
        return f'notification:last_check:{user_id}'

    async def get_unread_count(self, *, user_id: int) -> Optional[int]:
        value = await redis_client.get_client().get(self._unread_key(user_id))
        return int(value) if value is not None else None

    async def set_unread_count(self, *, user_id: int, count: int) -> None:
        await redis_client.get_client().set(
            self._unread_key(user_id), max(count, 0), ex=self.UNREAD_TTL_SECONDS
        )

    @Logger.io
    async def increment(self, *, user_id: int) -> int:
        client = redis_client.get_client()
        key = self._unread_key(user_id)
        value = await client.incr(key)
        await client.expire(key, self.UNREAD_TTL_SECONDS)
        return int(value)

    @Logger.io
    async def decrement(self, *, user_id: int) -> int:
        value = await redis_client.get_client().eval(  # type: ignore[misc]
            _DECREMENT_FLOOR_ZERO, 1, self._unread_key(user_id), self.UNREAD_TTL_SECONDS
        )
        return int(value)

    async def get_last_check(self, *, user_id: int) -> Optional[int]:
        value = await redis_client.get_client().get(self._last_check_key(user_id))
        return int(value) if value is not None else None

    async def set_last_check(self, *, user_id: int, epoch_millis: int) -> None:
        await redis_client.get_client().set(
            self._last_check_key(user_id), epoch_millis, ex=self.LAST_CHECK_TTL_SECONDS
        )
