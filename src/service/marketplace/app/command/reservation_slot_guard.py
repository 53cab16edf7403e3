"""
Slot validation shared by direct booking and payment preparation.

A slot is taken by any non-canceled reservation, including ones whose
payment was prepared but not yet confirmed.
"""

from datetime import date, time

import attrs

from src.platform.exception.exceptions import ConflictError, DomainError, NotFoundError
from src.platform.metrics.marketplace_metrics import marketplace_metrics
from src.service.marketplace.app.interface.i_advisor_repo import IAdvisorRepo
from src.service.marketplace.app.interface.i_reservation_repo import IReservationRepo
from src.service.marketplace.domain import consultation_schedule
from src.service.marketplace.domain.entity.advisor_entity import Advisor


@attrs.define(frozen=True)
class CheckedSlot:
    advisor: Advisor
    day: date
    start_time: time


class ReservationSlotGuard:
    def __init__(self, *, advisor_repo: IAdvisorRepo, reservation_repo: IReservationRepo) -> None:
        self.advisor_repo = advisor_repo
        self.reservation_repo = reservation_repo

    async def check(
        self, *, client_id: int, advisor_id: int, day: date, time_text: str
    ) -> CheckedSlot:
        """
        Raises:
            DomainError: past/today/weekend date, invalid start time, self booking
            NotFoundError: advisor missing or not approved
            ConflictError: BLOCKED_TIME_SLOT or TIME_SLOT_ALREADY_RESERVED
        """
        consultation_schedule.validate_reservation_date(day)
        start_time = consultation_schedule.parse_slot(time_text)
        consultation_schedule.validate_reservation_start(start_time)

        advisor = await self.advisor_repo.get_by_id(advisor_id)
        if not advisor or not advisor.is_approved:
            raise NotFoundError('Advisor not found')
        if client_id == advisor_id:
            raise DomainError('SELF_RESERVATION_NOT_ALLOWED')

        blocked = await self.advisor_repo.get_blocked_times(advisor_id=advisor_id, day=day)
        if start_time in blocked:
            marketplace_metrics.slot_conflicts.labels(reason='blocked').inc()
            raise ConflictError('BLOCKED_TIME_SLOT')

        if await self.reservation_repo.exists_active_slot(
            advisor_id=advisor_id, day=day, start_time=start_time
        ):
            marketplace_metrics.slot_conflicts.labels(reason='reserved').inc()
            raise ConflictError('TIME_SLOT_ALREADY_RESERVED')

        return CheckedSlot(advisor=advisor, day=day, start_time=start_time)
