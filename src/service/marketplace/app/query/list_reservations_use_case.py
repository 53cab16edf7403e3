from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.logging.loguru_io import Logger
from src.service.marketplace.app.dto.page import CursorPage, offset_of
from src.service.marketplace.app.dto.reservation_dto import ReservationItem
from src.service.marketplace.app.interface.i_reservation_repo import IReservationRepo
from src.service.marketplace.domain import consultation_schedule
from src.service.marketplace.domain.entity.user_entity import UserEntity, UserRole


class ListReservationsUseCase:
    def __init__(self, *, reservation_repo: IReservationRepo) -> None:
        self.reservation_repo = reservation_repo

    @classmethod
    @inject
    def depends(
        cls,
        reservation_repo: IReservationRepo = Depends(Provide[Container.reservation_repo]),
    ) -> Self:
        return cls(reservation_repo=reservation_repo)

    @Logger.io
    async def list_reservations(
        self, *, current_user: UserEntity, page_no: int, page_size: int
    ) -> CursorPage[ReservationItem]:
        """Advisors see the consultations they give; everyone else the ones they booked"""
        offset = offset_of(page_no=page_no, page_size=page_size)
        if current_user.role == UserRole.ADVISOR:
            rows = await self.reservation_repo.list_for_advisor(
                advisor_id=current_user.id or 0, offset=offset, limit=page_size + 1
            )
        else:
            rows = await self.reservation_repo.list_for_client(
                client_id=current_user.id or 0, offset=offset, limit=page_size + 1
            )

        today = consultation_schedule.today()
        items = [
            ReservationItem(
                reservation_id=row.reservation.id or 0,
                date=row.reservation.date,
                time=consultation_schedule.format_slot(row.reservation.start_time),
                counterpart_name=row.counterpart_name,
                request_message=row.reservation.request_message,
                status=row.reservation.status,
                payment_status=row.reservation.payment_status,
                can_cancel=row.reservation.can_cancel(today),
            )
            for row in rows
        ]
        return CursorPage.from_offset(rows=items, page_no=page_no, page_size=page_size)
