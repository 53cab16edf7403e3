from abc import ABC, abstractmethod
from typing import List, Optional

from src.service.marketplace.app.dto.approval_dto import AdminApprovalItem
from src.service.marketplace.domain.entity.advisor_entity import Advisor
from src.service.marketplace.domain.entity.approval_request_entity import (
    ApprovalRequest,
    ApprovalStatus,
)


class IApprovalRequestRepo(ABC):
    @abstractmethod
    async def create(self, request: ApprovalRequest) -> ApprovalRequest:
        pass

    @abstractmethod
    async def get_by_id(self, request_id: int) -> Optional[ApprovalRequest]:
        pass

    @abstractmethod
    async def exists_pending(self, *, advisor_id: int) -> bool:
        pass

    @abstractmethod
    async def list_by_advisor(
        self, *, advisor_id: int, offset: int, limit: int
    ) -> List[ApprovalRequest]:
        pass

    @abstractmethod
    async def list_for_admin(
        self, *, status: Optional[ApprovalStatus], offset: int, limit: int
    ) -> List[AdminApprovalItem]:
        pass

    @abstractmethod
    async def save_decision(
        self, *, request: ApprovalRequest, approved_advisor: Optional[Advisor]
    ) -> ApprovalRequest:
        """
        Persist a processed request.

        With approved_advisor set, the same transaction also stores the
        advisor's certificate, approval flags and the user's is_verified.
        """
        pass
