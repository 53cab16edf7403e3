from fastapi import APIRouter, Depends, Query

from src.platform.logging.loguru_io import Logger
from src.service.marketplace.app.command.process_advisor_approval_use_case import (
    ProcessAdvisorApprovalUseCase,
)
from src.service.marketplace.app.query.approval_query_use_case import ApprovalQueryUseCase
from src.service.marketplace.domain.entity.user_entity import UserEntity
from src.service.marketplace.driving_adapter.http_controller.auth.role_auth import require_admin
from src.service.marketplace.driving_adapter.http_controller.schema.admin_schema import (
    AdminApprovalItemResponse,
    ApprovalDecisionResponse,
    ApprovalStatusFilter,
    RejectRequest,
)
from src.service.marketplace.driving_adapter.http_controller.schema.page_schema import (
    PageResponse,
)


router = APIRouter()


@router.get('/advisor-requests', response_model=PageResponse[AdminApprovalItemResponse])
@Logger.io
async def list_advisor_requests(
    status: ApprovalStatusFilter = ApprovalStatusFilter.ALL,
    page_no: int = Query(1, ge=1),
    page_size: int = Query(10, ge=1, le=50),
    current_user: UserEntity = Depends(require_admin),
    use_case: ApprovalQueryUseCase = Depends(ApprovalQueryUseCase.depends),
) -> PageResponse[AdminApprovalItemResponse]:
    page = await use_case.list_for_admin(
        status=status.to_status(), page_no=page_no, page_size=page_size
    )
    return PageResponse[AdminApprovalItemResponse].from_page(
        page, AdminApprovalItemResponse.from_item
    )


@router.post('/advisor-requests/{request_id}/approve', response_model=ApprovalDecisionResponse)
@Logger.io
async def approve_advisor_request(
    request_id: int,
    current_user: UserEntity = Depends(require_admin),
    use_case: ProcessAdvisorApprovalUseCase = Depends(ProcessAdvisorApprovalUseCase.depends),
) -> ApprovalDecisionResponse:
    processed = await use_case.approve(request_id=request_id, admin_id=current_user.id or 0)
    return ApprovalDecisionResponse.from_entity(processed)


@router.post('/advisor-requests/{request_id}/reject', response_model=ApprovalDecisionResponse)
@Logger.io
async def reject_advisor_request(
    request_id: int,
    request: RejectRequest,
    current_user: UserEntity = Depends(require_admin),
    use_case: ProcessAdvisorApprovalUseCase = Depends(ProcessAdvisorApprovalUseCase.depends),
) -> ApprovalDecisionResponse:
    processed = await use_case.reject(
        request_id=request_id,
        admin_id=current_user.id or 0,
        rejection_reason=request.rejection_reason,
        custom_reason=request.custom_reason,
    )
    return ApprovalDecisionResponse.from_entity(processed)
