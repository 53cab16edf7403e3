from datetime import date
from typing import List, Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.marketplace.app.dto.advisor_dto import (
    AdvisorDetail,
    AdvisorSortBy,
    AdvisorSummary,
    AvailableTimes,
    TimeSlot,
)
from src.service.marketplace.app.dto.page import CursorPage
from src.service.marketplace.app.interface.i_advisor_repo import IAdvisorRepo
from src.service.marketplace.app.interface.i_reservation_repo import IReservationRepo
from src.service.marketplace.app.interface.i_review_repo import IReviewRepo
from src.service.marketplace.domain import consultation_schedule
from src.service.marketplace.domain.enum.trade_style import TradeStyle


DETAIL_REVIEW_LIMIT = 10


class AdvisorQueryUseCase:
    """Advisor discovery: list, detail and bookable slots"""

    def __init__(
        self,
        *,
        advisor_repo: IAdvisorRepo,
        reservation_repo: IReservationRepo,
        review_repo: IReviewRepo,
    ) -> None:
        self.advisor_repo = advisor_repo
        self.reservation_repo = reservation_repo
        self.review_repo = review_repo

    @classmethod
    @inject
    def depends(
        cls,
        advisor_repo: IAdvisorRepo = Depends(Provide[Container.advisor_repo]),
        reservation_repo: IReservationRepo = Depends(Provide[Container.reservation_repo]),
        review_repo: IReviewRepo = Depends(Provide[Container.review_repo]),
    ) -> Self:
        return cls(
            advisor_repo=advisor_repo, reservation_repo=reservation_repo, review_repo=review_repo
        )

    @Logger.io
    async def list_advisors(
        self,
        *,
        trade_styles: List[TradeStyle],
        sort_by: AdvisorSortBy,
        cursor: Optional[int],
        page_size: int,
    ) -> CursorPage[AdvisorSummary]:
        rows = await self.advisor_repo.list_approved(
            trade_styles=trade_styles, sort_by=sort_by, cursor=cursor, limit=page_size + 1
        )
        has_next = len(rows) > page_size
        content = rows[:page_size]

        # Certificates are loaded in one query for the whole page
        certificates = await self.advisor_repo.list_certificates(
            [row.advisor_id for row in content]
        )
        for row in content:
            row.certificates = certificates.get(row.advisor_id, [])

        return CursorPage(
            content=content,
            next_cursor=content[-1].advisor_id if has_next and content else None,
            has_next=has_next,
            page_size=page_size,
        )

    @Logger.io
    async def get_advisor_detail(self, *, advisor_id: int) -> AdvisorDetail:
        summary = await self.advisor_repo.get_summary(advisor_id)
        advisor = await self.advisor_repo.get_by_id(advisor_id)
        if not summary or not advisor or not advisor.is_approved:
            raise NotFoundError('Advisor not found')

        certificates = await self.advisor_repo.list_certificates([advisor_id])
        summary.certificates = certificates.get(advisor_id, [])
        reviews = await self.review_repo.list_by_advisor(
            advisor_id=advisor_id, offset=0, limit=DETAIL_REVIEW_LIMIT
        )

        return AdvisorDetail(
            summary=summary,
            long_intro=advisor.long_intro,
            public_contact=advisor.public_contact,
            careers=await self.advisor_repo.list_careers(advisor_id),
            recent_reviews=reviews,
            has_more_reviews=len(reviews) == DETAIL_REVIEW_LIMIT,
        )

    @Logger.io
    async def get_available_times(self, *, advisor_id: int, day: date) -> AvailableTimes:
        consultation_schedule.validate_not_past(day)

        advisor = await self.advisor_repo.get_by_id(advisor_id)
        if not advisor or not advisor.is_approved:
            raise NotFoundError('Advisor not found')

        if consultation_schedule.is_weekend(day):
            return AvailableTimes(date=day.isoformat(), slots=[])

        reserved = set(
            await self.reservation_repo.list_reserved_times(advisor_id=advisor_id, day=day)
        )
        blocked = set(await self.advisor_repo.get_blocked_times(advisor_id=advisor_id, day=day))
        slots = [
            TimeSlot(
                time=consultation_schedule.format_slot(slot),
                is_reserved=slot in reserved,
                is_blocked=slot in blocked,
            )
            for slot in consultation_schedule.SLOT_TIMES
        ]
        return AvailableTimes(date=day.isoformat(), slots=slots)

    @Logger.io
    async def get_blocked_times(self, *, advisor_id: int, day: date) -> List[str]:
        blocked = await self.advisor_repo.get_blocked_times(advisor_id=advisor_id, day=day)
        return [consultation_schedule.format_slot(slot) for slot in sorted(blocked)]
