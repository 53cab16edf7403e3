from typing import Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.event.i_domain_event_publisher import IDomainEventPublisher
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.marketplace_metrics import marketplace_metrics
from src.service.marketplace.app.interface.i_reservation_repo import IReservationRepo
from src.service.marketplace.domain import consultation_schedule
from src.service.marketplace.domain.domain_event.marketplace_events import (
    ReservationCanceledEvent,
)
from src.service.marketplace.domain.entity.reservation_entity import CancelReason, Reservation
from src.service.marketplace.domain.entity.user_entity import UserEntity


class CancelReservationUseCase:
    def __init__(
        self,
        *,
        reservation_repo: IReservationRepo,
        event_publisher: IDomainEventPublisher,
    ) -> None:
        self.reservation_repo = reservation_repo
        self.event_publisher = event_publisher

    @classmethod
    @inject
    def depends(
        cls,
        reservation_repo: IReservationRepo = Depends(Provide[Container.reservation_repo]),
        event_publisher: IDomainEventPublisher = Depends(Provide[Container.event_bus]),
    ) -> Self:
        return cls(
            reservation_repo=reservation_repo,
            event_publisher=event_publisher,
        )

    async def _get_reservation(self, reservation_id: int) -> Reservation:
        reservation = await self.reservation_repo.get_by_id(reservation_id)
        if not reservation:
            raise NotFoundError('Reservation not found')
        return reservation

    @Logger.io
    async def cancel(
        self,
        *,
        reservation_id: int,
        current_user: UserEntity,
        cancel_reason: CancelReason,
        cancel_memo: Optional[str],
    ) -> Reservation:
        reservation = await self._get_reservation(reservation_id)
        canceled = reservation.cancel(
            user_id=current_user.id or 0,
            reason=cancel_reason,
            memo=cancel_memo,
            today=consultation_schedule.today(),
        )
        saved = await self.reservation_repo.update(canceled)
        marketplace_metrics.reservations_canceled.labels(
            canceled_by_role=current_user.role.value
        ).inc()
        Logger.base.info(
            f'🗑️ [RESERVATION] #{reservation_id} canceled by user {current_user.id} ({cancel_reason})'
        )

        await self.event_publisher.publish(
            ReservationCanceledEvent.from_reservation(
                reservation=saved, canceled_by_name=current_user.name
            )
        )
        return saved

    @Logger.io
    async def complete(self, *, reservation_id: int, advisor_id: int) -> Reservation:
        reservation = await self._get_reservation(reservation_id)
        completed = await self.reservation_repo.update(reservation.complete(advisor_id=advisor_id))
        Logger.base.info(f'🏁 [RESERVATION] #{reservation_id} completed by advisor {advisor_id}')
        return completed
