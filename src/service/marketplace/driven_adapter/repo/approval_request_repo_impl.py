from typing import AsyncContextManager, Callable, List, Optional

from sqlalchemy import exists, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.marketplace.app.dto.approval_dto import AdminApprovalItem
from src.service.marketplace.app.interface.i_approval_request_repo import IApprovalRequestRepo
from src.service.marketplace.domain.entity.advisor_entity import Advisor
from src.service.marketplace.domain.entity.approval_request_entity import (
    ApprovalRequest,
    ApprovalStatus,
    RejectionReason,
)
from src.service.marketplace.driven_adapter.model.advisor_model import (
    AdvisorCertificateModel,
    AdvisorModel,
)
from src.service.marketplace.driven_adapter.model.approval_request_model import (
    ApprovalRequestModel,
)
from src.service.marketplace.driven_adapter.model.user_model import UserModel


def approval_model_to_entity(request_model: ApprovalRequestModel) -> ApprovalRequest:
    return ApprovalRequest(
        id=request_model.id,
        advisor_id=request_model.advisor_id,
        certificate_name=request_model.certificate_name,
        certificate_file_sn=request_model.certificate_file_sn,
        birth=request_model.birth,
        certificate_file_number=request_model.certificate_file_number,
        status=ApprovalStatus(request_model.status),
        previous_request_id=request_model.previous_request_id,
        rejection_reason=RejectionReason(request_model.rejection_reason)
        if request_model.rejection_reason
        else None,
        custom_reason=request_model.custom_reason,
        requested_at=request_model.requested_at,
        processed_at=request_model.processed_at,
        processed_by=request_model.processed_by,
    )


class ApprovalRequestRepoImpl(IApprovalRequestRepo):
    def __init__(self, session_factory: Callable[..., AsyncContextManager[AsyncSession]]):
        self.session_factory = session_factory

    @Logger.io
    async def create(self, request: ApprovalRequest) -> ApprovalRequest:
        async with self.session_factory() as session:
            request_model = ApprovalRequestModel(
                advisor_id=request.advisor_id,
                certificate_name=request.certificate_name,
                certificate_file_sn=request.certificate_file_sn,
                birth=request.birth,
                certificate_file_number=request.certificate_file_number,
                status=request.status.value,
                previous_request_id=request.previous_request_id,
            )
            session.add(request_model)
            await session.commit()
            await session.refresh(request_model)
            return approval_model_to_entity(request_model)

    @Logger.io
    async def get_by_id(self, request_id: int) -> Optional[ApprovalRequest]:
        async with self.session_factory() as session:
            request_model = await session.get(ApprovalRequestModel, request_id)
            return approval_model_to_entity(request_model) if request_model else None

    @Logger.io
    async def exists_pending(self, *, advisor_id: int) -> bool:
        async with self.session_factory() as session:
            result = await session.execute(
                select(
                    exists().where(
                        ApprovalRequestModel.advisor_id == advisor_id,
                        ApprovalRequestModel.status == ApprovalStatus.PENDING.value,
                    )
                )
            )
            return bool(result.scalar())

    @Logger.io
    async def list_by_advisor(
        self, *, advisor_id: int, offset: int, limit: int
    ) -> List[ApprovalRequest]:
        async with self.session_factory() as session:
            result = await session.execute(
                select(ApprovalRequestModel)
                .where(ApprovalRequestModel.advisor_id == advisor_id)
                .order_by(ApprovalRequestModel.requested_at.desc(), ApprovalRequestModel.id.desc())
                .offset(offset)
                .limit(limit)
            )
            return [approval_model_to_entity(row) for row in result.scalars().all()]

    @Logger.io
    async def list_for_admin(
        self, *, status: Optional[ApprovalStatus], offset: int, limit: int
    ) -> List[AdminApprovalItem]:
        stmt = select(ApprovalRequestModel, UserModel).join(
            UserModel, UserModel.id == ApprovalRequestModel.advisor_id
        )
        if status is not None:
            stmt = stmt.where(ApprovalRequestModel.status == status.value)

        async with self.session_factory() as session:
            result = await session.execute(
                stmt.order_by(ApprovalRequestModel.requested_at.desc(), ApprovalRequestModel.id.desc())
                .offset(offset)
                .limit(limit)
            )
            items = []
            for request_model, user_model in result.all():
                request = approval_model_to_entity(request_model)
                items.append(
                    AdminApprovalItem(
                        request_id=request.id or 0,
                        advisor_id=request.advisor_id,
                        advisor_name=user_model.name,
                        advisor_email=user_model.email,
                        certificate_name=request.certificate_name,
                        certificate_file_sn=request.certificate_file_sn,
                        birth=request.birth,
                        certificate_file_number=request.certificate_file_number,
                        status=request.status,
                        requested_at=request.requested_at,
                        processed_at=request.processed_at,
                        rejection_reason=request.rejection_reason,
                        custom_reason=request.custom_reason,
                    )
                )
            return items

    @Logger.io
    async def save_decision(
        self, *, request: ApprovalRequest, approved_advisor: Optional[Advisor]
    ) -> ApprovalRequest:
        async with self.session_factory() as session:
            request_model = await session.get(ApprovalRequestModel, request.id)
            if not request_model:
                raise NotFoundError('Approval request not found')

            request_model.status = request.status.value
            request_model.rejection_reason = (
                request.rejection_reason.value if request.rejection_reason else None
            )
            request_model.custom_reason = request.custom_reason
            request_model.processed_at = request.processed_at
            request_model.processed_by = request.processed_by

            if approved_advisor is not None:
                await session.execute(
                    update(AdvisorModel)
                    .where(AdvisorModel.user_id == approved_advisor.user_id)
                    .values(
                        certificate_name=approved_advisor.certificate_name,
                        certificate_file_sn=approved_advisor.certificate_file_sn,
                        birth=approved_advisor.birth,
                        certificate_file_number=approved_advisor.certificate_file_number,
                        is_approved=True,
                        approved_at=approved_advisor.approved_at,
                    )
                )
                await session.execute(
                    update(UserModel)
                    .where(UserModel.id == approved_advisor.user_id)
                    .values(is_verified=True)
                )
                session.add(
                    AdvisorCertificateModel(
                        advisor_id=approved_advisor.user_id,
                        certificate_name=request.certificate_name,
                        certificate_file_sn=request.certificate_file_sn,
                        birth=request.birth,
                        certificate_file_number=request.certificate_file_number,
                    )
                )

            await session.commit()
            await session.refresh(request_model)
            return approval_model_to_entity(request_model)
