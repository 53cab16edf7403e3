from typing import Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.exception.exceptions import ConflictError, DomainError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.marketplace.app.interface.i_advisor_repo import IAdvisorRepo
from src.service.marketplace.app.interface.i_approval_request_repo import IApprovalRequestRepo
from src.service.marketplace.domain.entity.approval_request_entity import (
    ApprovalRequest,
    ApprovalStatus,
)


class RequestCertificateApprovalUseCase:
    def __init__(
        self, *, advisor_repo: IAdvisorRepo, approval_request_repo: IApprovalRequestRepo
    ) -> None:
        self.advisor_repo = advisor_repo
        self.approval_request_repo = approval_request_repo

    @classmethod
    @inject
    def depends(
        cls,
        advisor_repo: IAdvisorRepo = Depends(Provide[Container.advisor_repo]),
        approval_request_repo: IApprovalRequestRepo = Depends(
            Provide[Container.approval_request_repo]
        ),
    ) -> Self:
        return cls(advisor_repo=advisor_repo, approval_request_repo=approval_request_repo)

    @Logger.io
    async def request_approval(
        self,
        *,
        advisor_id: int,
        certificate_name: str,
        certificate_file_sn: str,
        birth: str,
        certificate_file_number: str,
        previous_request_id: Optional[int] = None,
    ) -> ApprovalRequest:
        if not await self.advisor_repo.get_by_id(advisor_id):
            raise NotFoundError('Advisor not found')

        if await self.approval_request_repo.exists_pending(advisor_id=advisor_id):
            raise ConflictError('PENDING_REQUEST_EXISTS')

        if previous_request_id is not None:
            previous = await self.approval_request_repo.get_by_id(previous_request_id)
            if (
                previous is None
                or previous.advisor_id != advisor_id
                or previous.status != ApprovalStatus.REJECTED
            ):
                raise DomainError('previous_request_id must reference your own rejected request')

        created = await self.approval_request_repo.create(
            ApprovalRequest(
                advisor_id=advisor_id,
                certificate_name=certificate_name,
                certificate_file_sn=certificate_file_sn,
                birth=birth,
                certificate_file_number=certificate_file_number,
                previous_request_id=previous_request_id,
            )
        )
        Logger.base.info(
            f'📨 [APPROVAL] Advisor {advisor_id} requested certificate approval #{created.id}'
        )
        return created
