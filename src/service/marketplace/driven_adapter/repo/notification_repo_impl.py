from datetime import datetime, timezone
from typing import AsyncContextManager, Callable, List, Optional

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.logging.loguru_io import Logger
from src.service.marketplace.app.interface.i_notification_repo import INotificationRepo
from src.service.marketplace.domain.entity.notification_entity import Notification
from src.service.marketplace.domain.enum.notification_type import NotificationType
from src.service.marketplace.driven_adapter.model.notification_model import NotificationModel


class NotificationRepoImpl(INotificationRepo):
    def __init__(self, session_factory: Callable[..., AsyncContextManager[AsyncSession]]):
        self.session_factory = session_factory

    @staticmethod
    def _model_to_entity(notification_model: NotificationModel) -> Notification:
        return Notification(
            id=notification_model.id,
            user_id=notification_model.user_id,
            type=NotificationType(notification_model.type),
            title=notification_model.title,
            message=notification_model.message,
            related_id=notification_model.related_id,
            is_read=notification_model.is_read,
            read_at=notification_model.read_at,
            created_at=notification_model.created_at,
        )

    @Logger.io
    async def create(self, notification: Notification) -> Notification:
        async with self.session_factory() as session:
            notification_model = NotificationModel(
                user_id=notification.user_id,
                type=notification.type.value,
                title=notification.title,
                message=notification.message,
                related_id=notification.related_id,
                is_read=False,
                created_at=notification.created_at or datetime.now(timezone.utc),
            )
            session.add(notification_model)
            await session.commit()
            await session.refresh(notification_model)
            return self._model_to_entity(notification_model)

    @Logger.io
    async def get_by_id(self, notification_id: int) -> Optional[Notification]:
        async with self.session_factory() as session:
            notification_model = await session.get(NotificationModel, notification_id)
            return self._model_to_entity(notification_model) if notification_model else None

    @Logger.io
    async def list_by_user(self, *, user_id: int, offset: int, limit: int) -> List[Notification]:
        async with self.session_factory() as session:
            result = await session.execute(
                select(NotificationModel)
                .where(NotificationModel.user_id == user_id)
                .order_by(NotificationModel.created_at.desc(), NotificationModel.id.desc())
                .offset(offset)
                .limit(limit)
            )
            return [self._model_to_entity(row) for row in result.scalars().all()]

    @Logger.io
    async def list_created_after(self, *, user_id: int, after: datetime) -> List[Notification]:
        async with self.session_factory() as session:
            result = await session.execute(
                select(NotificationModel)
                .where(NotificationModel.user_id == user_id, NotificationModel.created_at > after)
                .order_by(NotificationModel.created_at.desc(), NotificationModel.id.desc())
            )
            return [self._model_to_entity(row) for row in result.scalars().all()]

    @Logger.io
    async def list_latest(self, *, user_id: int, limit: int) -> List[Notification]:
        return await self.list_by_user(user_id=user_id, offset=0, limit=limit)

    @Logger.io
    async def count_unread(self, *, user_id: int) -> int:
        async with self.session_factory() as session:
            result = await session.execute(
                select(func.count(NotificationModel.id)).where(
                    NotificationModel.user_id == user_id, NotificationModel.is_read.is_(False)
                )
            )
            return int(result.scalar() or 0)

    @Logger.io
    async def mark_read(self, *, notification_id: int, user_id: int) -> bool:
        async with self.session_factory() as session:
            result = await session.execute(
                update(NotificationModel)
                .where(
                    NotificationModel.id == notification_id,
                    NotificationModel.user_id == user_id,
                    NotificationModel.is_read.is_(False),
                )
                .values(is_read=True, read_at=datetime.now(timezone.utc))
            )
            await session.commit()
            return result.rowcount > 0  # type: ignore[attr-defined]

    @Logger.io
    async def mark_all_read(self, *, user_id: int) -> int:
        async with self.session_factory() as session:
            result = await session.execute(
                update(NotificationModel)
                .where(NotificationModel.user_id == user_id, NotificationModel.is_read.is_(False))
                .values(is_read=True, read_at=datetime.now(timezone.utc))
            )
            await session.commit()
            return int(result.rowcount or 0)  # type: ignore[attr-defined]
