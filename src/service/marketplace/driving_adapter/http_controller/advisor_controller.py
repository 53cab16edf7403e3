"""
Advisor discovery, advisor self-service (profile, blocked times,
certificate approval) and per-advisor reviews.

Static paths (/blocked-times, /profile, /certificate-approval) are declared
before /{advisor_id} so they are not captured by the path parameter.
"""

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from src.platform.logging.loguru_io import Logger
from src.service.marketplace.app.command.advisor_profile_use_case import AdvisorProfileUseCase
from src.service.marketplace.app.command.request_certificate_approval_use_case import (
    RequestCertificateApprovalUseCase,
)
from src.service.marketplace.app.command.update_blocked_times_use_case import (
    UpdateBlockedTimesUseCase,
)
from src.service.marketplace.app.dto.advisor_dto import AdvisorSortBy
from src.service.marketplace.app.query.advisor_query_use_case import AdvisorQueryUseCase
from src.service.marketplace.app.query.approval_query_use_case import ApprovalQueryUseCase
from src.service.marketplace.app.query.review_query_use_case import ReviewQueryUseCase
from src.service.marketplace.domain.entity.user_entity import UserEntity
from src.service.marketplace.domain.enum.trade_style import TradeStyle
from src.service.marketplace.driving_adapter.http_controller.auth.role_auth import (
    require_advisor,
    require_user,
)
from src.service.marketplace.driving_adapter.http_controller.schema.advisor_schema import (
    AdvisorDetailResponse,
    AdvisorProfileResponse,
    AdvisorSummaryResponse,
    ApprovalRequestResponse,
    AvailableTimesResponse,
    BlockedTimesRequest,
    BlockedTimesResponse,
    CertificateApprovalRequest,
    CreateProfileRequest,
    UpdateProfileRequest,
)
from src.service.marketplace.driving_adapter.http_controller.schema.page_schema import (
    PageResponse,
)
from src.service.marketplace.driving_adapter.http_controller.schema.review_schema import (
    ReviewResponse,
)


router = APIRouter()


@router.get('', response_model=PageResponse[AdvisorSummaryResponse])
@Logger.io
async def list_advisors(
    preferred_trade_style: List[TradeStyle] = Query(default=[]),
    sort_by: AdvisorSortBy = AdvisorSortBy.REVIEW_COUNT,
    cursor: Optional[int] = Query(None, ge=1),
    page_size: int = Query(12, ge=1, le=50),
    use_case: AdvisorQueryUseCase = Depends(AdvisorQueryUseCase.depends),
) -> PageResponse[AdvisorSummaryResponse]:
    page = await use_case.list_advisors(
        trade_styles=preferred_trade_style, sort_by=sort_by, cursor=cursor, page_size=page_size
    )
    return PageResponse[AdvisorSummaryResponse].from_page(page, AdvisorSummaryResponse.from_dto)


# === Advisor self-service ===


@router.get('/blocked-times', response_model=BlockedTimesResponse)
@Logger.io
async def get_blocked_times(
    day: date = Query(..., alias='date'),
    current_user: UserEntity = Depends(require_advisor),
    use_case: AdvisorQueryUseCase = Depends(AdvisorQueryUseCase.depends),
) -> BlockedTimesResponse:
    blocked = await use_case.get_blocked_times(advisor_id=current_user.id or 0, day=day)
    return BlockedTimesResponse(date=day.isoformat(), blocked_times=blocked)


@router.put('/blocked-times', response_model=BlockedTimesResponse)
@Logger.io
async def update_blocked_times(
    request: BlockedTimesRequest,
    day: date = Query(..., alias='date'),
    current_user: UserEntity = Depends(require_advisor),
    use_case: UpdateBlockedTimesUseCase = Depends(UpdateBlockedTimesUseCase.depends),
) -> BlockedTimesResponse:
    blocked = await use_case.update_blocked_times(
        advisor_id=current_user.id or 0, day=day, blocked_times=request.blocked_times
    )
    return BlockedTimesResponse(date=day.isoformat(), blocked_times=blocked)


@router.post('/profile', response_model=AdvisorProfileResponse, status_code=status.HTTP_201_CREATED)
@Logger.io
async def create_profile(
    request: CreateProfileRequest,
    current_user: UserEntity = Depends(require_advisor),
    use_case: AdvisorProfileUseCase = Depends(AdvisorProfileUseCase.depends),
) -> AdvisorProfileResponse:
    advisor = await use_case.create_profile(
        advisor_id=current_user.id or 0,
        short_intro=request.short_intro,
        preferred_trade_style=request.preferred_trade_style,
        career_entries=[entry.to_change() for entry in request.career_entries],
        long_intro=request.long_intro,
        public_contact=request.public_contact,
        profile_image_url=request.profile_image_url,
        consultation_fee=request.consultation_fee,
    )
    return AdvisorProfileResponse.from_entity(advisor)


@router.put('/profile', response_model=AdvisorProfileResponse)
@Logger.io
async def update_profile(
    request: UpdateProfileRequest,
    current_user: UserEntity = Depends(require_advisor),
    use_case: AdvisorProfileUseCase = Depends(AdvisorProfileUseCase.depends),
) -> AdvisorProfileResponse:
    advisor = await use_case.update_profile(
        advisor_id=current_user.id or 0,
        short_intro=request.short_intro,
        long_intro=request.long_intro,
        preferred_trade_style=request.preferred_trade_style,
        public_contact=request.public_contact,
        profile_image_url=request.profile_image_url,
        consultation_fee=request.consultation_fee,
        career_entries=[entry.to_change() for entry in request.career_entries]
        if request.career_entries
        else None,
    )
    return AdvisorProfileResponse.from_entity(advisor)


@router.post(
    '/certificate-approval',
    response_model=ApprovalRequestResponse,
    status_code=status.HTTP_201_CREATED,
)
@Logger.io
async def request_certificate_approval(
    request: CertificateApprovalRequest,
    current_user: UserEntity = Depends(require_advisor),
    use_case: RequestCertificateApprovalUseCase = Depends(
        RequestCertificateApprovalUseCase.depends
    ),
) -> ApprovalRequestResponse:
    created = await use_case.request_approval(
        advisor_id=current_user.id or 0,
        certificate_name=request.certificate_name,
        certificate_file_sn=request.certificate_file_sn,
        birth=request.birth,
        certificate_file_number=request.certificate_file_number,
        previous_request_id=request.previous_request_id,
    )
    return ApprovalRequestResponse.from_entity(created)


@router.get('/certificate-approval', response_model=PageResponse[ApprovalRequestResponse])
@Logger.io
async def list_certificate_approvals(
    page_no: int = Query(1, ge=1),
    page_size: int = Query(10, ge=1, le=50),
    current_user: UserEntity = Depends(require_advisor),
    use_case: ApprovalQueryUseCase = Depends(ApprovalQueryUseCase.depends),
) -> PageResponse[ApprovalRequestResponse]:
    page = await use_case.list_advisor_history(
        advisor_id=current_user.id or 0, page_no=page_no, page_size=page_size
    )
    return PageResponse[ApprovalRequestResponse].from_page(
        page, ApprovalRequestResponse.from_entity
    )


# === Public advisor pages ===


@router.get('/{advisor_id}', response_model=AdvisorDetailResponse)
@Logger.io
async def get_advisor_detail(
    advisor_id: int,
    use_case: AdvisorQueryUseCase = Depends(AdvisorQueryUseCase.depends),
) -> AdvisorDetailResponse:
    detail = await use_case.get_advisor_detail(advisor_id=advisor_id)
    return AdvisorDetailResponse.from_detail(detail)


@router.get('/{advisor_id}/available-times', response_model=AvailableTimesResponse)
@Logger.io
async def get_available_times(
    advisor_id: int,
    day: date = Query(..., alias='date'),
    current_user: UserEntity = Depends(require_user),
    use_case: AdvisorQueryUseCase = Depends(AdvisorQueryUseCase.depends),
) -> AvailableTimesResponse:
    available = await use_case.get_available_times(advisor_id=advisor_id, day=day)
    return AvailableTimesResponse.from_dto(available)


@router.get('/{advisor_id}/reviews', response_model=PageResponse[ReviewResponse])
@Logger.io
async def list_advisor_reviews(
    advisor_id: int,
    page_no: int = Query(1, ge=1),
    page_size: int = Query(10, ge=1, le=50),
    use_case: ReviewQueryUseCase = Depends(ReviewQueryUseCase.depends),
) -> PageResponse[ReviewResponse]:
    page = await use_case.list_advisor_reviews(
        advisor_id=advisor_id, page_no=page_no, page_size=page_size
    )
    return PageResponse[ReviewResponse].from_page(page, ReviewResponse.from_item)
