from datetime import date
from typing import List, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.exception.exceptions import ConflictError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.marketplace.app.interface.i_advisor_repo import IAdvisorRepo
from src.service.marketplace.app.interface.i_reservation_repo import IReservationRepo
from src.service.marketplace.domain import consultation_schedule


class UpdateBlockedTimesUseCase:
    def __init__(self, *, advisor_repo: IAdvisorRepo, reservation_repo: IReservationRepo) -> None:
        self.advisor_repo = advisor_repo
        self.reservation_repo = reservation_repo

    @classmethod
    @inject
    def depends(
        cls,
        advisor_repo: IAdvisorRepo = Depends(Provide[Container.advisor_repo]),
        reservation_repo: IReservationRepo = Depends(Provide[Container.reservation_repo]),
    ) -> Self:
        return cls(advisor_repo=advisor_repo, reservation_repo=reservation_repo)

    @Logger.io
    async def update_blocked_times(
        self, *, advisor_id: int, day: date, blocked_times: List[str]
    ) -> List[str]:
        """
        Replace the advisor's blocked slots for one day.

        Raises:
            NotFoundError: advisor row missing
            DomainError: past date or a value outside the twelve slots
            ConflictError: RESERVED_TIME_CANNOT_BE_BLOCKED
        """
        if not await self.advisor_repo.get_by_id(advisor_id):
            raise NotFoundError('Advisor not found')

        consultation_schedule.validate_not_past(day)
        slots = sorted({consultation_schedule.parse_slot(value) for value in blocked_times})

        reserved = set(
            await self.reservation_repo.list_reserved_times(advisor_id=advisor_id, day=day)
        )
        conflicting = [slot for slot in slots if slot in reserved]
        if conflicting:
            raise ConflictError(
                'RESERVED_TIME_CANNOT_BE_BLOCKED: '
                + ', '.join(consultation_schedule.format_slot(slot) for slot in conflicting)
            )

        await self.advisor_repo.replace_blocked_times(advisor_id=advisor_id, day=day, times=slots)
        Logger.base.info(f'⛔ [ADVISOR] Advisor {advisor_id} blocked {len(slots)} slots on {day}')
        return [consultation_schedule.format_slot(slot) for slot in slots]
