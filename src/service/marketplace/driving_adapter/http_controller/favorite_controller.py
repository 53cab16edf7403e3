from fastapi import APIRouter, Depends, Query

from src.platform.logging.loguru_io import Logger
from src.service.marketplace.app.command.favorite_command_use_case import FavoriteCommandUseCase
from src.service.marketplace.app.query.favorite_query_use_case import FavoriteQueryUseCase
from src.service.marketplace.domain.entity.user_entity import UserEntity
from src.service.marketplace.driving_adapter.http_controller.auth.role_auth import (
    get_current_user,
    require_user,
)
from src.service.marketplace.driving_adapter.http_controller.schema.favorite_schema import (
    FavoriteAdvisorResponse,
    FavoriteResultResponse,
)
from src.service.marketplace.driving_adapter.http_controller.schema.page_schema import (
    PageResponse,
)


router = APIRouter()


@router.get('', response_model=PageResponse[FavoriteAdvisorResponse])
@Logger.io
async def list_favorites(
    page_no: int = Query(1, ge=1),
    page_size: int = Query(12, ge=1, le=50),
    current_user: UserEntity = Depends(get_current_user),
    use_case: FavoriteQueryUseCase = Depends(FavoriteQueryUseCase.depends),
) -> PageResponse[FavoriteAdvisorResponse]:
    page = await use_case.list_favorites(
        user_id=current_user.id or 0, page_no=page_no, page_size=page_size
    )
    return PageResponse[FavoriteAdvisorResponse].from_page(page, FavoriteAdvisorResponse.from_item)


@router.post('/{advisor_id}', response_model=FavoriteResultResponse)
@Logger.io
async def add_favorite(
    advisor_id: int,
    current_user: UserEntity = Depends(require_user),
    use_case: FavoriteCommandUseCase = Depends(FavoriteCommandUseCase.depends),
) -> FavoriteResultResponse:
    result = await use_case.add(user_id=current_user.id or 0, advisor_id=advisor_id)
    return FavoriteResultResponse.from_result(result)


@router.delete('/{advisor_id}', response_model=FavoriteResultResponse)
@Logger.io
async def remove_favorite(
    advisor_id: int,
    current_user: UserEntity = Depends(get_current_user),
    use_case: FavoriteCommandUseCase = Depends(FavoriteCommandUseCase.depends),
) -> FavoriteResultResponse:
    result = await use_case.remove(user_id=current_user.id or 0, advisor_id=advisor_id)
    return FavoriteResultResponse.from_result(result)
