from fastapi import APIRouter, Depends, Query, status

from src.platform.logging.loguru_io import Logger
from src.service.marketplace.app.command.review_command_use_case import ReviewCommandUseCase
from src.service.marketplace.app.query.review_query_use_case import ReviewQueryUseCase
from src.service.marketplace.domain.entity.user_entity import UserEntity
from src.service.marketplace.driving_adapter.http_controller.auth.role_auth import (
    get_current_user,
    require_user,
)
from src.service.marketplace.driving_adapter.http_controller.schema.page_schema import (
    MessageResponse,
    PageResponse,
)
from src.service.marketplace.driving_adapter.http_controller.schema.review_schema import (
    CreateReviewRequest,
    ReviewResponse,
    UpdateReviewRequest,
)


router = APIRouter()


@router.post('', response_model=ReviewResponse, status_code=status.HTTP_201_CREATED)
@Logger.io
async def create_review(
    request: CreateReviewRequest,
    current_user: UserEntity = Depends(require_user),
    use_case: ReviewCommandUseCase = Depends(ReviewCommandUseCase.depends),
) -> ReviewResponse:
    review = await use_case.create_review(
        reviewer=current_user,
        reservation_id=request.reservation_id,
        rating=request.rating,
        content=request.content,
    )
    return ReviewResponse.from_entity(review)


@router.get('/me', response_model=PageResponse[ReviewResponse])
@Logger.io
async def list_my_reviews(
    page_no: int = Query(1, ge=1),
    page_size: int = Query(10, ge=1, le=50),
    current_user: UserEntity = Depends(get_current_user),
    use_case: ReviewQueryUseCase = Depends(ReviewQueryUseCase.depends),
) -> PageResponse[ReviewResponse]:
    page = await use_case.list_my_reviews(
        user_id=current_user.id or 0, page_no=page_no, page_size=page_size
    )
    return PageResponse[ReviewResponse].from_page(page, ReviewResponse.from_item)


@router.put('/{review_id}', response_model=ReviewResponse)
@Logger.io
async def update_review(
    review_id: int,
    request: UpdateReviewRequest,
    current_user: UserEntity = Depends(get_current_user),
    use_case: ReviewCommandUseCase = Depends(ReviewCommandUseCase.depends),
) -> ReviewResponse:
    review = await use_case.update_review(
        review_id=review_id,
        user_id=current_user.id or 0,
        rating=request.rating,
        content=request.content,
    )
    return ReviewResponse.from_entity(review)


@router.delete('/{review_id}', response_model=MessageResponse)
@Logger.io
async def delete_review(
    review_id: int,
    current_user: UserEntity = Depends(get_current_user),
    use_case: ReviewCommandUseCase = Depends(ReviewCommandUseCase.depends),
) -> MessageResponse:
    await use_case.delete_review(review_id=review_id, user_id=current_user.id or 0)
    return MessageResponse(message='Review deleted')
