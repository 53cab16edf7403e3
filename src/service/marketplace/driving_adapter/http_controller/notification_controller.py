from fastapi import APIRouter, Depends, Query

from src.platform.logging.loguru_io import Logger
from src.service.marketplace.app.command.notification_command_use_case import (
    NotificationCommandUseCase,
)
from src.service.marketplace.app.query.notification_query_use_case import (
    NotificationQueryUseCase,
)
from src.service.marketplace.domain.entity.user_entity import UserEntity
from src.service.marketplace.driving_adapter.http_controller.auth.role_auth import (
    get_current_user,
)
from src.service.marketplace.driving_adapter.http_controller.schema.notification_schema import (
    MarkAllReadResponse,
    MarkReadResponse,
    NotificationResponse,
    RecentNotificationsResponse,
    SyncCountResponse,
    UnreadCountResponse,
)
from src.service.marketplace.driving_adapter.http_controller.schema.page_schema import (
    PageResponse,
)


router = APIRouter()


@router.get('', response_model=PageResponse[NotificationResponse])
@Logger.io
async def list_notifications(
    page_no: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=50),
    current_user: UserEntity = Depends(get_current_user),
    use_case: NotificationQueryUseCase = Depends(NotificationQueryUseCase.depends),
) -> PageResponse[NotificationResponse]:
    page = await use_case.list_notifications(
        user_id=current_user.id or 0, page_no=page_no, page_size=page_size
    )
    return PageResponse[NotificationResponse].from_page(page, NotificationResponse.from_entity)


@router.get('/unread-count', response_model=UnreadCountResponse)
@Logger.io
async def get_unread_count(
    current_user: UserEntity = Depends(get_current_user),
    use_case: NotificationQueryUseCase = Depends(NotificationQueryUseCase.depends),
) -> UnreadCountResponse:
    result = await use_case.get_unread_count(user_id=current_user.id or 0)
    return UnreadCountResponse(
        unread_count=result.unread_count, last_check_time=result.last_check_time
    )


@router.get('/recent', response_model=RecentNotificationsResponse)
@Logger.io
async def get_recent_notifications(
    current_user: UserEntity = Depends(get_current_user),
    use_case: NotificationQueryUseCase = Depends(NotificationQueryUseCase.depends),
) -> RecentNotificationsResponse:
    recent = await use_case.get_recent(user_id=current_user.id or 0)
    return RecentNotificationsResponse.from_dto(recent)


@router.patch('/read-all', response_model=MarkAllReadResponse)
@Logger.io
async def mark_all_read(
    current_user: UserEntity = Depends(get_current_user),
    use_case: NotificationCommandUseCase = Depends(NotificationCommandUseCase.depends),
) -> MarkAllReadResponse:
    updated = await use_case.mark_all_read(user_id=current_user.id or 0)
    return MarkAllReadResponse(updated_count=updated)


@router.patch('/{notification_id}/read', response_model=MarkReadResponse)
@Logger.io
async def mark_read(
    notification_id: int,
    current_user: UserEntity = Depends(get_current_user),
    use_case: NotificationCommandUseCase = Depends(NotificationCommandUseCase.depends),
) -> MarkReadResponse:
    result = await use_case.mark_read(
        notification_id=notification_id, user_id=current_user.id or 0
    )
    return MarkReadResponse.from_result(result)


@router.post('/sync-count', response_model=SyncCountResponse)
@Logger.io
async def sync_unread_count(
    current_user: UserEntity = Depends(get_current_user),
    use_case: NotificationCommandUseCase = Depends(NotificationCommandUseCase.depends),
) -> SyncCountResponse:
    count = await use_case.sync_count(user_id=current_user.id or 0)
    return SyncCountResponse(unread_count=count)
