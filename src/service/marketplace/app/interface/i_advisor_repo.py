from abc import ABC, abstractmethod
from datetime import date, time
from typing import Dict, List, Optional

from src.service.marketplace.app.dto.advisor_dto import AdvisorSortBy, AdvisorSummary
from src.service.marketplace.domain.entity.advisor_entity import (
    Advisor,
    AdvisorCareer,
    AdvisorCertificate,
    CareerChange,
)
from src.service.marketplace.domain.entity.approval_request_entity import ApprovalRequest
from src.service.marketplace.domain.entity.user_entity import UserEntity
from src.service.marketplace.domain.enum.trade_style import TradeStyle


class IAdvisorRepo(ABC):
    @abstractmethod
    async def create_account(
        self, *, user: UserEntity, advisor: Advisor, approval_request: ApprovalRequest
    ) -> tuple[UserEntity, Advisor, ApprovalRequest]:
        """Insert the user, advisor and first approval request in one transaction"""
        pass

    @abstractmethod
    async def get_by_id(self, advisor_id: int) -> Optional[Advisor]:
        pass

    @abstractmethod
    async def get_summary(self, advisor_id: int) -> Optional[AdvisorSummary]:
        pass

    @abstractmethod
    async def list_approved(
        self,
        *,
        trade_styles: List[TradeStyle],
        sort_by: AdvisorSortBy,
        cursor: Optional[int],
        limit: int,
    ) -> List[AdvisorSummary]:
        pass

    @abstractmethod
    async def list_careers(self, advisor_id: int) -> List[AdvisorCareer]:
        pass

    @abstractmethod
    async def list_certificates(self, advisor_ids: List[int]) -> Dict[int, List[AdvisorCertificate]]:
        pass

    @abstractmethod
    async def save_profile(
        self,
        *,
        advisor: Advisor,
        creates: List[CareerChange],
        updates: List[CareerChange],
        delete_ids: List[int],
    ) -> Advisor:
        pass

    @abstractmethod
    async def get_blocked_times(self, *, advisor_id: int, day: date) -> List[time]:
        pass

    @abstractmethod
    async def replace_blocked_times(self, *, advisor_id: int, day: date, times: List[time]) -> None:
        pass
