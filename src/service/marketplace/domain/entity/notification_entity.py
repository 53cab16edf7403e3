from datetime import datetime
from typing import Optional

import attrs

from src.service.marketplace.domain.enum.notification_type import NotificationType


@attrs.define
class Notification:
    user_id: int
    type: NotificationType
    title: str
    message: str
    related_id: Optional[int] = None
    id: Optional[int] = None
    is_read: bool = False
    read_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
