from datetime import date, datetime
import time
from typing import Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace
import uuid_utils

from src.platform.config.core_setting import settings
from src.platform.config.di import Container
from src.platform.event.i_domain_event_publisher import IDomainEventPublisher
from src.platform.exception.exceptions import ExternalServiceError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.marketplace_metrics import marketplace_metrics
from src.service.marketplace.app.command.reservation_slot_guard import ReservationSlotGuard
from src.service.marketplace.app.dto.reservation_dto import PaymentConfirmation, PreparedPayment
from src.service.marketplace.app.interface.i_advisor_repo import IAdvisorRepo
from src.service.marketplace.app.interface.i_payment_gateway import IPaymentGateway
from src.service.marketplace.app.interface.i_reservation_repo import IReservationRepo
from src.service.marketplace.app.interface.i_user_query_repo import IUserQueryRepo
from src.service.marketplace.domain import consultation_schedule
from src.service.marketplace.domain.domain_event.marketplace_events import (
    ReservationCanceledEvent,
    ReservationCreatedEvent,
)
from src.service.marketplace.domain.entity.reservation_entity import (
    Reservation,
    build_order_id,
)
from src.service.marketplace.domain.entity.user_entity import UserEntity


class PaymentUseCase:
    """
    Paid consultation booking through the card payment gateway

    Flow:
    1. prepare: slot checks, then a PENDING reservation holding the slot with an order id
    2. confirm: gateway approval; on failure the payment is marked FAILED and the reservation
       deleted to free the slot
    3. cancel: gateway refund when paid, then the reservation is canceled
    """

    def __init__(
        self,
        *,
        advisor_repo: IAdvisorRepo,
        reservation_repo: IReservationRepo,
        user_query_repo: IUserQueryRepo,
        payment_gateway: IPaymentGateway,
        event_publisher: IDomainEventPublisher,
    ) -> None:
        self.reservation_repo = reservation_repo
        self.user_query_repo = user_query_repo
        self.payment_gateway = payment_gateway
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
        payment_gateway: IPaymentGateway = Depends(Provide[Container.payment_gateway]),
        event_publisher: IDomainEventPublisher = Depends(Provide[Container.event_bus]),
    ) -> Self:
        return cls(
            advisor_repo=advisor_repo,
            reservation_repo=reservation_repo,
            user_query_repo=user_query_repo,
            payment_gateway=payment_gateway,
            event_publisher=event_publisher,
        )

    async def _get_user(self, user_id: int) -> UserEntity:
        user = await self.user_query_repo.get_by_id(user_id)
        if not user:
            raise NotFoundError('User not found')
        return user

    async def _get_by_order_id(self, order_id: str) -> Reservation:
        reservation = await self.reservation_repo.get_by_order_id(order_id)
        if not reservation:
            raise NotFoundError('Order not found')
        return reservation

    @Logger.io
    async def prepare(
        self,
        *,
        client_id: int,
        advisor_id: int,
        day: date,
        time_text: str,
        request_message: str,
    ) -> PreparedPayment:
        client = await self._get_user(client_id)
        slot = await self.slot_guard.check(
            client_id=client_id, advisor_id=advisor_id, day=day, time_text=time_text
        )
        advisor = slot.advisor

        order_id = build_order_id(
            prefix=settings.PAYMENT_ORDER_PREFIX,
            now=datetime.now(consultation_schedule.business_zone()),
            nonce=uuid_utils.uuid7().hex[-8:],
            client_id=client_id,
            advisor_id=advisor_id,
        )
        reservation = await self.reservation_repo.create(
            Reservation.create(
                client_id=client_id,
                advisor_id=advisor_id,
                date=slot.day,
                start_time=slot.start_time,
                request_message=request_message,
                amount=advisor.consultation_fee,
                order_id=order_id,
            )
        )
        marketplace_metrics.reservations_created.labels(channel='payment').inc()
        Logger.base.info(
            f'💳 [PAYMENT] Prepared order {order_id} ({advisor.consultation_fee} KRW) '
            f'for reservation #{reservation.id}'
        )

        return PreparedPayment(
            reservation_id=reservation.id or 0,
            order_id=order_id,
            order_name=f'{advisor.name} consultation ({day.isoformat()} {time_text})',
            amount=advisor.consultation_fee,
            customer_name=client.name,
            customer_email=client.email,
            success_url=settings.PAYMENT_SUCCESS_URL,
            fail_url=settings.PAYMENT_FAIL_URL,
            client_key=settings.TOSS_CLIENT_KEY,
        )

    async def _call_gateway_confirm(
        self, *, payment_key: str, order_id: str, amount: int
    ) -> Optional[PaymentConfirmation]:
        started = time.perf_counter()
        try:
            confirmation = await self.payment_gateway.confirm(
                payment_key=payment_key, order_id=order_id, amount=amount
            )
        except ExternalServiceError as e:
            Logger.base.error(f'❌ [PAYMENT] Gateway confirm failed for {order_id}: {e.message}')
            return None
        finally:
            marketplace_metrics.payment_gateway_duration.labels(operation='confirm').observe(
                time.perf_counter() - started
            )

        if not confirmation.is_done:
            Logger.base.error(
                f'❌ [PAYMENT] Gateway answered status {confirmation.status} for {order_id}'
            )
            return None
        return confirmation

    @Logger.io
    async def confirm(
        self, *, client: UserEntity, payment_key: str, order_id: str, amount: int
    ) -> Reservation:
        with self.tracer.start_as_current_span(
            'use_case.confirm_payment', attributes={'payment.order_id': order_id}
        ):
            reservation = await self._get_by_order_id(order_id)
            reservation.validate_payable_by(user_id=client.id or 0, amount=amount)

            confirmation = await self._call_gateway_confirm(
                payment_key=payment_key, order_id=order_id, amount=amount
            )
            if confirmation is None:
                marketplace_metrics.payment_operations.labels(
                    operation='confirm', result='failed'
                ).inc()
                # Record the failure, then delete the row to free the slot for other clients
                await self.reservation_repo.update(reservation.mark_payment_failed())
                await self.reservation_repo.delete(reservation.id or 0)
                Logger.base.warning(
                    f'🧹 [PAYMENT] Reservation #{reservation.id} removed after failed confirm'
                )
                raise ExternalServiceError('PAYMENT_CONFIRM_FAILED')

            paid = await self.reservation_repo.update(
                reservation.mark_paid(
                    payment_key=confirmation.payment_key or payment_key,
                    method=confirmation.method,
                    card_company=confirmation.card_company,
                    receipt_url=confirmation.receipt_url,
                    approved_at=datetime.fromisoformat(confirmation.approved_at)
                    if confirmation.approved_at
                    else None,
                )
            )
            marketplace_metrics.payment_operations.labels(operation='confirm', result='success').inc()
            Logger.base.info(f'✅ [PAYMENT] Order {order_id} paid ({confirmation.method})')

            await self.event_publisher.publish(
                ReservationCreatedEvent.from_reservation(reservation=paid, client_name=client.name)
            )
            return paid

    @Logger.io
    async def cancel(
        self,
        *,
        client: UserEntity,
        order_id: str,
        cancel_reason: str,
        cancel_amount: Optional[int] = None,
    ) -> Reservation:
        with self.tracer.start_as_current_span(
            'use_case.cancel_payment', attributes={'payment.order_id': order_id}
        ):
            reservation = await self._get_by_order_id(order_id)
            refund_needed = reservation.requires_gateway_refund
            canceled = reservation.cancel_order(user_id=client.id or 0, memo=cancel_reason)

            if refund_needed:
                started = time.perf_counter()
                try:
                    await self.payment_gateway.cancel(
                        payment_key=reservation.payment_key or '',
                        cancel_reason=cancel_reason,
                        cancel_amount=cancel_amount,
                    )
                except ExternalServiceError:
                    marketplace_metrics.payment_operations.labels(
                        operation='cancel', result='failed'
                    ).inc()
                    raise
                finally:
                    marketplace_metrics.payment_gateway_duration.labels(
                        operation='cancel'
                    ).observe(time.perf_counter() - started)
                marketplace_metrics.payment_operations.labels(
                    operation='cancel', result='success'
                ).inc()

            saved = await self.reservation_repo.update(canceled)
            marketplace_metrics.reservations_canceled.labels(
                canceled_by_role=client.role.value
            ).inc()
            Logger.base.info(
                f'↩️ [PAYMENT] Order {order_id} canceled '
                f'({"refunded" if refund_needed else "db only"})'
            )

            await self.event_publisher.publish(
                ReservationCanceledEvent.from_reservation(
                    reservation=saved, canceled_by_name=client.name
                )
            )
            return saved
