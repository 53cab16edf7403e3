from src.platform.logging.loguru_io import Logger
from src.platform.metrics.marketplace_metrics import marketplace_metrics
from src.service.marketplace.app.interface.i_notification_counter import INotificationCounter
from src.service.marketplace.app.interface.i_notification_repo import INotificationRepo
from src.service.marketplace.domain.entity.notification_entity import Notification


class DeliverNotificationUseCase:
    """
    Store a notification and bump the recipient's unread counter

    Invoked from domain event listeners, never from HTTP, so it is built by
    the DI container instead of FastAPI's Depends.
    """

    def __init__(
        self, *, notification_repo: INotificationRepo, notification_counter: INotificationCounter
    ) -> None:
        self.notification_repo = notification_repo
        self.notification_counter = notification_counter

    @Logger.io
    async def deliver(self, notification: Notification) -> Notification:
        created = await self.notification_repo.create(notification)
        unread = await self.notification_counter.increment(user_id=notification.user_id)
        marketplace_metrics.notifications_delivered.labels(type=notification.type.value).inc()
        Logger.base.info(
            f'🔔 [NOTIFICATION] {notification.type} -> user {notification.user_id} '
            f'(unread={unread})'
        )
        return created
