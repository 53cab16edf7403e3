from typing import Self

import attrs
from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.marketplace.app.interface.i_notification_counter import INotificationCounter
from src.service.marketplace.app.interface.i_notification_repo import INotificationRepo


@attrs.define(frozen=True)
class MarkReadResult:
    notification_id: int
    changed: bool

    @property
    def message(self) -> str:
        return 'marked as read' if self.changed else 'already read'


class NotificationCommandUseCase:
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
    async def mark_read(self, *, notification_id: int, user_id: int) -> MarkReadResult:
        notification = await self.notification_repo.get_by_id(notification_id)
        if not notification or notification.user_id != user_id:
            raise NotFoundError('Notification not found')

        changed = await self.notification_repo.mark_read(
            notification_id=notification_id, user_id=user_id
        )
        if changed:
            await self.notification_counter.decrement(user_id=user_id)
        return MarkReadResult(notification_id=notification_id, changed=changed)

    @Logger.io
    async def mark_all_read(self, *, user_id: int) -> int:
        updated = await self.notification_repo.mark_all_read(user_id=user_id)
        if updated > 0:
            await self.notification_counter.set_unread_count(user_id=user_id, count=0)
        Logger.base.info(f'📭 [NOTIFICATION] User {user_id} marked {updated} as read')
        return updated

    @Logger.io
    async def sync_count(self, *, user_id: int) -> int:
        count = await self.notification_repo.count_unread(user_id=user_id)
        await self.notification_counter.set_unread_count(user_id=user_id, count=count)
        Logger.base.info(f'🔁 [NOTIFICATION] Unread counter for user {user_id} synced to {count}')
        return count
