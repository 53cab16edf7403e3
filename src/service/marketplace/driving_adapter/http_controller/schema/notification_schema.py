from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel

from src.service.marketplace.app.command.notification_command_use_case import MarkReadResult
from src.service.marketplace.app.query.notification_query_use_case import RecentNotifications
from src.service.marketplace.domain.entity.notification_entity import Notification
from src.service.marketplace.domain.enum.notification_type import NotificationType


class NotificationResponse(BaseModel):
    id: int
    type: NotificationType
    title: str
    message: str
    related_id: Optional[int] = None
    is_read: bool
    read_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, notification: Notification) -> 'NotificationResponse':
        return cls(
            id=notification.id or 0,
            type=notification.type,
            title=notification.title,
            message=notification.message,
            related_id=notification.related_id,
            is_read=notification.is_read,
            read_at=notification.read_at,
            created_at=notification.created_at,
        )


class UnreadCountResponse(BaseModel):
    unread_count: int
    last_check_time: int


class RecentNotificationsResponse(BaseModel):
    new_notifications: List[NotificationResponse]
    new_count: int
    total_unread_count: int
    has_new_notifications: bool

    @classmethod
    def from_dto(cls, recent: RecentNotifications) -> 'RecentNotificationsResponse':
        return cls(
            new_notifications=[NotificationResponse.from_entity(n) for n in recent.new_notifications],
            new_count=recent.new_count,
            total_unread_count=recent.total_unread_count,
            has_new_notifications=recent.has_new_notifications,
        )


class MarkReadResponse(BaseModel):
    notification_id: int
    message: str

    @classmethod
    def from_result(cls, result: MarkReadResult) -> 'MarkReadResponse':
        return cls(notification_id=result.notification_id, message=result.message)


class MarkAllReadResponse(BaseModel):
    updated_count: int


class SyncCountResponse(BaseModel):
    unread_count: int
