from datetime import datetime, timezone
from typing import List, Optional, Self

import attrs
from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.logging.loguru_io import Logger
from src.service.marketplace.app.dto.page import CursorPage, offset_of
from src.service.marketplace.app.interface.i_notification_counter import INotificationCounter
from src.service.marketplace.app.interface.i_notification_repo import INotificationRepo
from src.service.marketplace.domain.entity.notification_entity import Notification


RECENT_FALLBACK_LIMIT = 5


@attrs.define(frozen=True)
class UnreadCount:
    unread_count: int
    last_check_time: int


@attrs.define(frozen=True)
class RecentNotifications:
    new_notifications: List[Notification]
    total_unread_count: int

    @property
    def new_count(self) -> int:
        return len(self.new_notifications)

    @property
    def has_new_notifications(self) -> bool:
        return self.new_count > 0


def _now_millis() -> int:
    return int(datetime.now(timezone.utc).timestamp() * 1000)


class NotificationQueryUseCase:
    def __init__(
        self, *, notification_repo: INotificationRepo, notification_counter: INotificationCounter
    ) -> None:
        self.notification_repo = notification_repo
        self.notification_counter = notification_counter

    @classmethod
    @inject
    def depends(
        cls,
        notification_repo: INotificationRepo = Depends(Provide[Container.notification_repo]),
        notification_counter: INotificationCounter = Depends(
            Provide[Container.notification_counter]
        ),
    ) -> Self:
        return cls(notification_repo=notification_repo, notification_counter=notification_counter)

    @Logger.io
    async def list_notifications(
        self, *, user_id: int, page_no: int, page_size: int
    ) -> CursorPage[Notification]:
        rows = await self.notification_repo.list_by_user(
            user_id=user_id,
            offset=offset_of(page_no=page_no, page_size=page_size),
            limit=page_size + 1,
        )
        return CursorPage.from_offset(rows=rows, page_no=page_no, page_size=page_size)

    async def _resolve_unread_count(self, user_id: int) -> int:
        """A missing or zero cache entry is re-seeded from the database"""
        cached: Optional[int] = await self.notification_counter.get_unread_count(user_id=user_id)
        if cached:
            return cached

        count = await self.notification_repo.count_unread(user_id=user_id)
        await self.notification_counter.set_unread_count(user_id=user_id, count=count)
        return count

    @Logger.io
    async def get_unread_count(self, *, user_id: int) -> UnreadCount:
        count = await self._resolve_unread_count(user_id)
        now = _now_millis()
        await self.notification_counter.set_last_check(user_id=user_id, epoch_millis=now)
        return UnreadCount(unread_count=count, last_check_time=now)

    @Logger.io
    async def get_recent(self, *, user_id: int) -> RecentNotifications:
        last_check = await self.notification_counter.get_last_check(user_id=user_id)
        if last_check is None:
            notifications = await self.notification_repo.list_latest(
                user_id=user_id, limit=RECENT_FALLBACK_LIMIT
            )
        else:
            notifications = await self.notification_repo.list_created_after(
                user_id=user_id,
                after=datetime.fromtimestamp(last_check / 1000, tz=timezone.utc),
            )

        total_unread = await self._resolve_unread_count(user_id)
        await self.notification_counter.set_last_check(user_id=user_id, epoch_millis=_now_millis())
        return RecentNotifications(
            new_notifications=notifications, total_unread_count=total_unread
        )
