from typing import List, Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.exception.exceptions import DomainError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.marketplace.app.interface.i_advisor_repo import IAdvisorRepo
from src.service.marketplace.domain.entity.advisor_entity import (
    Advisor,
    CareerChange,
    plan_career_changes,
    validate_initial_career_entries,
)
from src.service.marketplace.domain.enum.trade_style import TradeStyle


class AdvisorProfileUseCase:
    """Public profile of an approved advisor (intro, trade style, fee, careers)"""

    def __init__(self, *, advisor_repo: IAdvisorRepo) -> None:
        self.advisor_repo = advisor_repo

    @classmethod
    @inject
    def depends(
        cls,
        advisor_repo: IAdvisorRepo = Depends(Provide[Container.advisor_repo]),
    ) -> Self:
        return cls(advisor_repo=advisor_repo)

    async def _get_advisor(self, advisor_id: int) -> Advisor:
        advisor = await self.advisor_repo.get_by_id(advisor_id)
        if not advisor:
            raise NotFoundError('Advisor not found')
        return advisor

    @Logger.io
    async def create_profile(
        self,
        *,
        advisor_id: int,
        short_intro: str,
        preferred_trade_style: TradeStyle,
        career_entries: List[CareerChange],
        long_intro: Optional[str] = None,
        public_contact: Optional[str] = None,
        profile_image_url: Optional[str] = None,
        consultation_fee: Optional[int] = None,
    ) -> Advisor:
        advisor = await self._get_advisor(advisor_id)
        completed = advisor.complete_profile(
            short_intro=short_intro,
            preferred_trade_style=preferred_trade_style,
            long_intro=long_intro,
            public_contact=public_contact,
            profile_image_url=profile_image_url,
            consultation_fee=consultation_fee,
        )
        validate_initial_career_entries(career_entries)

        saved = await self.advisor_repo.save_profile(
            advisor=completed, creates=career_entries, updates=[], delete_ids=[]
        )
        Logger.base.info(
            f'📇 [ADVISOR] Profile created for advisor {advisor_id} '
            f'with {len(career_entries)} careers'
        )
        return saved

    @Logger.io
    async def update_profile(
        self,
        *,
        advisor_id: int,
        short_intro: Optional[str] = None,
        long_intro: Optional[str] = None,
        preferred_trade_style: Optional[TradeStyle] = None,
        public_contact: Optional[str] = None,
        profile_image_url: Optional[str] = None,
        consultation_fee: Optional[int] = None,
        career_entries: Optional[List[CareerChange]] = None,
    ) -> Advisor:
        advisor = await self._get_advisor(advisor_id)
        if not advisor.is_profile_completed:
            raise NotFoundError('PROFILE_NOT_FOUND')

        provided = [
            short_intro,
            long_intro,
            preferred_trade_style,
            public_contact,
            profile_image_url,
            consultation_fee,
        ]
        if all(value is None for value in provided) and not career_entries:
            raise DomainError('NO_UPDATE_FIELDS')

        creates: List[CareerChange] = []
        updates: List[CareerChange] = []
        delete_ids: List[int] = []
        if career_entries:
            existing = await self.advisor_repo.list_careers(advisor_id)
            creates, updates, delete_ids = plan_career_changes(
                existing=existing, changes=career_entries
            )

        updated = advisor.apply_profile_update(
            short_intro=short_intro,
            long_intro=long_intro,
            preferred_trade_style=preferred_trade_style,
            public_contact=public_contact,
            profile_image_url=profile_image_url,
            consultation_fee=consultation_fee,
        )
        saved = await self.advisor_repo.save_profile(
            advisor=updated, creates=creates, updates=updates, delete_ids=delete_ids
        )
        Logger.base.info(
            f'📝 [ADVISOR] Profile updated for advisor {advisor_id} '
            f'(careers +{len(creates)} ~{len(updates)} -{len(delete_ids)})'
        )
        return saved
