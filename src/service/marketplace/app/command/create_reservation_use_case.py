from datetime import date
from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace

from src.platform.config.di import Container
from src.platform.event.i_domain_event_publisher import IDomainEventPublisher
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.marketplace_metrics import marketplace_metrics
from src.service.marketplace.app.command.reservation_slot_guard import ReservationSlotGuard
from src.service.marketplace.app.interface.i_advisor_repo import IAdvisorRepo
from src.service.marketplace.app.interface.i_reservation_repo import IReservationRepo
from src.service.marketplace.app.interface.i_user_query_repo import IUserQueryRepo
from src.service.marketplace.domain.domain_event.marketplace_events import (
    ReservationCreatedEvent,
)
from src.service.marketplace.domain.entity.reservation_entity import Reservation


class CreateReservationUseCase:
    """
    Book a consultation slot without going through the payment gateway

    Flow:
    1. Slot checks (date, start time, advisor, blocked, taken)
    2. Insert PENDING reservation (the partial unique index is the final arbiter)
    3. Publish ReservationCreatedEvent for the advisor's notification
    """

    def __init__(
        self,
        *,
        advisor_repo: IAdvisorRepo,
        reservation_repo: IReservationRepo,
        user_query_repo: IUserQueryRepo,
        event_publisher: IDomainEventPublisher,
    ) -> None:
        self.reservation_repo = reservation_repo
        self.user_query_repo = user_query_repo
        self.event_publisher = event_publisher
        self.slot_guard = ReservationSlotGuard(
            advisor_repo=advisor_repo, reservation_repo=reservation_repo
        )
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(
        cls,
        advisor_repo: IAdvisorRepo = Depends(Provide[Container.advisor_repo]),
        reservation_repo: IReservationRepo = Depends(Provide[Container.reservation_repo]),
        user_query_repo: IUserQueryRepo = Depends(Provide[Container.user_query_repo]),
        event_publisher: IDomainEventPublisher = Depends(Provide[Container.event_bus]),
    ) -> Self:
        return cls(
            advisor_repo=advisor_repo,
            reservation_repo=reservation_repo,
            user_query_repo=user_query_repo,
            event_publisher=event_publisher,
        )

    @Logger.io
    async def create_reservation(
        self,
        *,
        client_id: int,
        advisor_id: int,
        day: date,
        time_text: str,
        request_message: str,
    ) -> Reservation:
        with self.tracer.start_as_current_span(
            'use_case.create_reservation',
            attributes={'reservation.advisor_id': advisor_id, 'reservation.date': str(day)},
        ):
            client = await self.user_query_repo.get_by_id(client_id)
            if not client:
                raise NotFoundError('User not found')

            slot = await self.slot_guard.check(
                client_id=client_id, advisor_id=advisor_id, day=day, time_text=time_text
            )
            reservation = await self.reservation_repo.create(
                Reservation.create(
                    client_id=client_id,
                    advisor_id=advisor_id,
                    date=slot.day,
                    start_time=slot.start_time,
                    request_message=request_message,
                )
            )
            marketplace_metrics.reservations_created.labels(channel='direct').inc()
            Logger.base.info(
                f'📅 [RESERVATION] #{reservation.id} created: user {client_id} -> '
                f'advisor {advisor_id} at {day} {time_text}'
            )

            try:
                await self.event_publisher.publish(
                    ReservationCreatedEvent.from_reservation(
                        reservation=reservation, client_name=client.name
                    )
                )
            except Exception as e:
                # The booking is committed; a lost notification must not undo it
                Logger.base.warning(
                    f'⚠️ [RESERVATION] Failed to publish ReservationCreatedEvent '
                    f'for #{reservation.id}: {e}'
                )

            return reservation
