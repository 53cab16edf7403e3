from typing import Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.logging.loguru_io import Logger
from src.service.marketplace.app.dto.approval_dto import AdminApprovalItem
from src.service.marketplace.app.dto.page import CursorPage, offset_of
from src.service.marketplace.app.interface.i_approval_request_repo import IApprovalRequestRepo
from src.service.marketplace.domain.entity.approval_request_entity import (
    ApprovalRequest,
    ApprovalStatus,
)


class ApprovalQueryUseCase:
    def __init__(self, *, approval_request_repo: IApprovalRequestRepo) -> None:
        self.approval_request_repo = approval_request_repo

    @classmethod
    @inject
    def depends(
        cls,
        approval_request_repo: IApprovalRequestRepo = Depends(
            Provide[Container.approval_request_repo]
        ),
    ) -> Self:
        return cls(approval_request_repo=approval_request_repo)

    @Logger.io
    async def list_advisor_history(
        self, *, advisor_id: int, page_no: int, page_size: int
    ) -> CursorPage[ApprovalRequest]:
        rows = await self.approval_request_repo.list_by_advisor(
            advisor_id=advisor_id,
            offset=offset_of(page_no=page_no, page_size=page_size),
            limit=page_size + 1,
        )
        return CursorPage.from_offset(rows=rows, page_no=page_no, page_size=page_size)

    @Logger.io
    async def list_for_admin(
        self, *, status: Optional[ApprovalStatus], page_no: int, page_size: int
    ) -> CursorPage[AdminApprovalItem]:
        """status None means ALL"""
        rows = await self.approval_request_repo.list_for_admin(
            status=status,
            offset=offset_of(page_no=page_no, page_size=page_size),
            limit=page_size + 1,
        )
        return CursorPage.from_offset(rows=rows, page_no=page_no, page_size=page_size)
