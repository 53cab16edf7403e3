from typing import Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.event.i_domain_event_publisher import IDomainEventPublisher
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.marketplace.app.interface.i_advisor_repo import IAdvisorRepo
from src.service.marketplace.app.interface.i_approval_request_repo import IApprovalRequestRepo
from src.service.marketplace.domain.domain_event.marketplace_events import (
    AdvisorApprovalProcessedEvent,
)
from src.service.marketplace.domain.entity.approval_request_entity import (
    ApprovalRequest,
    RejectionReason,
)


class ProcessAdvisorApprovalUseCase:
    """Admin decision on a PENDING certificate approval request"""

    def __init__(
        self,
        *,
        approval_request_repo: IApprovalRequestRepo,
        advisor_repo: IAdvisorRepo,
        event_publisher: IDomainEventPublisher,
    ) -> None:
        self.approval_request_repo = approval_request_repo
        self.advisor_repo = advisor_repo
        self.event_publisher = event_publisher

    @classmethod
    @inject
    def depends(
        cls,
        approval_request_repo: IApprovalRequestRepo = Depends(
            Provide[Container.approval_request_repo]
        ),
        advisor_repo: IAdvisorRepo = Depends(Provide[Container.advisor_repo]),
        event_publisher: IDomainEventPublisher = Depends(Provide[Container.event_bus]),
    ) -> Self:
        return cls(
            approval_request_repo=approval_request_repo,
            advisor_repo=advisor_repo,
            event_publisher=event_publisher,
        )

    async def _get_request(self, request_id: int) -> ApprovalRequest:
        request = await self.approval_request_repo.get_by_id(request_id)
        if not request:
            raise NotFoundError('Approval request not found')
        return request

    @Logger.io
    async def approve(self, *, request_id: int, admin_id: int) -> ApprovalRequest:
        request = await self._get_request(request_id)
        advisor = await self.advisor_repo.get_by_id(request.advisor_id)
        if not advisor:
            raise NotFoundError('Advisor not found')

        approved = request.approve(admin_id=admin_id)
        approved_advisor = advisor.approve_certificate(
            certificate_name=approved.certificate_name,
            certificate_file_sn=approved.certificate_file_sn,
            birth=approved.birth,
            certificate_file_number=approved.certificate_file_number,
        )
        saved = await self.approval_request_repo.save_decision(
            request=approved, approved_advisor=approved_advisor
        )
        Logger.base.info(
            f'✅ [APPROVAL] Request {request_id} approved by admin {admin_id}, '
            f'advisor {saved.advisor_id} is now active'
        )

        await self.event_publisher.publish(AdvisorApprovalProcessedEvent.from_request(saved))
        return saved

    @Logger.io
    async def reject(
        self,
        *,
        request_id: int,
        admin_id: int,
        rejection_reason: RejectionReason,
        custom_reason: Optional[str],
    ) -> ApprovalRequest:
        request = await self._get_request(request_id)
        rejected = request.reject(
            admin_id=admin_id, reason=rejection_reason, custom_reason=custom_reason
        )
        saved = await self.approval_request_repo.save_decision(
            request=rejected, approved_advisor=None
        )
        Logger.base.info(
            f'❎ [APPROVAL] Request {request_id} rejected by admin {admin_id}: {rejection_reason}'
        )

        await self.event_publisher.publish(AdvisorApprovalProcessedEvent.from_request(saved))
        return saved
