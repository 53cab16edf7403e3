"""
Unit tests for PaymentUseCase

Gateway, repositories and the event publisher are mocked:
1. confirm marks the reservation paid and publishes ReservationCreatedEvent
2. a failed gateway confirm marks the payment FAILED, then deletes the reservation
3. cancel refunds through the gateway only when the order was paid
"""

from datetime import time, timedelta
from unittest.mock import AsyncMock, Mock

import attrs
import pytest

from src.platform.exception.exceptions import ConflictError, ExternalServiceError, ForbiddenError
from src.service.marketplace.app.command.payment_use_case import PaymentUseCase
from src.service.marketplace.app.dto.reservation_dto import PaymentConfirmation
from src.service.marketplace.domain import consultation_schedule
from src.service.marketplace.domain.domain_event.marketplace_events import (
    ReservationCanceledEvent,
    ReservationCreatedEvent,
)
from src.service.marketplace.domain.entity.reservation_entity import (
    PaymentStatus,
    Reservation,
    ReservationStatus,
)
from src.service.marketplace.domain.entity.user_entity import UserEntity


ORDER_ID = 'CONSULT_20261019_101500_0a1b2c3d_10_20'


def _next_weekday():
    day = consultation_schedule.today() + timedelta(days=2)
    while consultation_schedule.is_weekend(day):
        day += timedelta(days=1)
    return day


@pytest.fixture
def client_user() -> UserEntity:
    return UserEntity(id=10, login_id='investor01', name='Kim Minsu', nickname='minsu')


@pytest.fixture
def prepared_reservation() -> Reservation:
    reservation = Reservation.create(
        client_id=10,
        advisor_id=20,
        date=_next_weekday(),
        start_time=time(15),
        amount=50000,
        order_id=ORDER_ID,
    )
    return attrs.evolve(reservation, id=1)


@pytest.fixture
def mock_reservation_repo(prepared_reservation: Reservation) -> Mock:
    repo = AsyncMock()
    repo.get_by_order_id.return_value = prepared_reservation
    repo.update.side_effect = lambda reservation: reservation
    return repo


@pytest.fixture
def mock_payment_gateway() -> Mock:
    gateway = AsyncMock()
    gateway.confirm.return_value = PaymentConfirmation(
        payment_key='pay_key',
        order_id=ORDER_ID,
        status='DONE',
        method='CARD',
        card_company='TEST_CARD',
        approved_at='2026-10-19T10:00:00+09:00',
    )
    return gateway


@pytest.fixture
def mock_event_publisher() -> Mock:
    return AsyncMock()


@pytest.fixture
def payment_use_case(
    mock_reservation_repo: Mock, mock_payment_gateway: Mock, mock_event_publisher: Mock
) -> PaymentUseCase:
    return PaymentUseCase(
        advisor_repo=AsyncMock(),
        reservation_repo=mock_reservation_repo,
        user_query_repo=AsyncMock(),
        payment_gateway=mock_payment_gateway,
        event_publisher=mock_event_publisher,
    )


@pytest.mark.unit
class TestConfirmPayment:
    @pytest.mark.asyncio
    async def test_confirm_marks_paid_and_publishes(
        self,
        payment_use_case: PaymentUseCase,
        client_user: UserEntity,
        mock_reservation_repo: Mock,
        mock_event_publisher: Mock,
    ):
        # When
        paid = await payment_use_case.confirm(
            client=client_user, payment_key='pay_key', order_id=ORDER_ID, amount=50000
        )

        # Then
        assert paid.payment_status == PaymentStatus.PAID
        assert paid.payment_key == 'pay_key'
        assert paid.card_company == 'TEST_CARD'
        mock_reservation_repo.delete.assert_not_awaited()
        event = mock_event_publisher.publish.await_args.args[0]
        assert isinstance(event, ReservationCreatedEvent)
        assert event.advisor_id == 20
        assert event.client_name == 'Kim Minsu'

    @pytest.mark.asyncio
    async def test_gateway_failure_releases_slot(
        self,
        payment_use_case: PaymentUseCase,
        client_user: UserEntity,
        mock_reservation_repo: Mock,
        mock_payment_gateway: Mock,
        mock_event_publisher: Mock,
    ):
        # Given
        mock_payment_gateway.confirm.side_effect = ExternalServiceError('Card declined')

        # When
        with pytest.raises(ExternalServiceError) as exc_info:
            await payment_use_case.confirm(
                client=client_user, payment_key='pay_key', order_id=ORDER_ID, amount=50000
            )

        # Then
        assert exc_info.value.message == 'PAYMENT_CONFIRM_FAILED'
        failed = mock_reservation_repo.update.await_args.args[0]
        assert failed.payment_status == PaymentStatus.FAILED
        mock_reservation_repo.delete.assert_awaited_once_with(1)
        # FAILED is written before the row is removed
        assert [c[0] for c in mock_reservation_repo.mock_calls] == [
            'get_by_order_id',
            'update',
            'delete',
        ]
        mock_event_publisher.publish.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_gateway_not_done_is_failure(
        self,
        payment_use_case: PaymentUseCase,
        client_user: UserEntity,
        mock_reservation_repo: Mock,
        mock_payment_gateway: Mock,
    ):
        # Given
        mock_payment_gateway.confirm.return_value = PaymentConfirmation(
            payment_key='pay_key', order_id=ORDER_ID, status='ABORTED'
        )

        # When
        with pytest.raises(ExternalServiceError):
            await payment_use_case.confirm(
                client=client_user, payment_key='pay_key', order_id=ORDER_ID, amount=50000
            )

        # Then
        mock_reservation_repo.delete.assert_awaited_once_with(1)

    @pytest.mark.asyncio
    async def test_already_paid(
        self,
        payment_use_case: PaymentUseCase,
        client_user: UserEntity,
        mock_reservation_repo: Mock,
        mock_payment_gateway: Mock,
        prepared_reservation: Reservation,
    ):
        # Given
        mock_reservation_repo.get_by_order_id.return_value = attrs.evolve(
            prepared_reservation, payment_status=PaymentStatus.PAID
        )

        # When / Then
        with pytest.raises(ConflictError):
            await payment_use_case.confirm(
                client=client_user, payment_key='pay_key', order_id=ORDER_ID, amount=50000
            )
        mock_payment_gateway.confirm.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_canceled_order_never_reaches_gateway(
        self,
        payment_use_case: PaymentUseCase,
        client_user: UserEntity,
        mock_reservation_repo: Mock,
        mock_payment_gateway: Mock,
        mock_event_publisher: Mock,
        prepared_reservation: Reservation,
    ):
        # Given
        mock_reservation_repo.get_by_order_id.return_value = prepared_reservation.cancel_order(
            user_id=10, memo='Changed my mind'
        )

        # When
        with pytest.raises(ConflictError) as exc_info:
            await payment_use_case.confirm(
                client=client_user, payment_key='pay_key', order_id=ORDER_ID, amount=50000
            )

        # Then
        assert exc_info.value.message == 'ALREADY_PROCESSED'
        mock_payment_gateway.confirm.assert_not_awaited()
        mock_reservation_repo.update.assert_not_awaited()
        mock_event_publisher.publish.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_other_users_order(
        self, payment_use_case: PaymentUseCase, mock_payment_gateway: Mock
    ):
        stranger = UserEntity(id=99, login_id='stranger', name='Stranger')

        with pytest.raises(ForbiddenError):
            await payment_use_case.confirm(
                client=stranger, payment_key='pay_key', order_id=ORDER_ID, amount=50000
            )
        mock_payment_gateway.confirm.assert_not_awaited()


@pytest.mark.unit
class TestCancelPayment:
    @pytest.mark.asyncio
    async def test_paid_order_is_refunded(
        self,
        payment_use_case: PaymentUseCase,
        client_user: UserEntity,
        mock_reservation_repo: Mock,
        mock_payment_gateway: Mock,
        mock_event_publisher: Mock,
        prepared_reservation: Reservation,
    ):
        # Given
        mock_reservation_repo.get_by_order_id.return_value = attrs.evolve(
            prepared_reservation, payment_status=PaymentStatus.PAID, payment_key='pay_key'
        )

        # When
        canceled = await payment_use_case.cancel(
            client=client_user, order_id=ORDER_ID, cancel_reason='Change of plans'
        )

        # Then
        assert canceled.status == ReservationStatus.CANCELED
        assert canceled.payment_status == PaymentStatus.CANCELED
        mock_payment_gateway.cancel.assert_awaited_once_with(
            payment_key='pay_key', cancel_reason='Change of plans', cancel_amount=None
        )
        event = mock_event_publisher.publish.await_args.args[0]
        assert isinstance(event, ReservationCanceledEvent)
        assert event.recipient_id == 20

    @pytest.mark.asyncio
    async def test_unpaid_order_skips_gateway(
        self,
        payment_use_case: PaymentUseCase,
        client_user: UserEntity,
        mock_payment_gateway: Mock,
    ):
        canceled = await payment_use_case.cancel(
            client=client_user, order_id=ORDER_ID, cancel_reason='Changed my mind'
        )

        assert canceled.status == ReservationStatus.CANCELED
        assert canceled.payment_status == PaymentStatus.PENDING
        mock_payment_gateway.cancel.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_refund_failure_keeps_reservation(
        self,
        payment_use_case: PaymentUseCase,
        client_user: UserEntity,
        mock_reservation_repo: Mock,
        mock_payment_gateway: Mock,
        prepared_reservation: Reservation,
    ):
        # Given
        mock_reservation_repo.get_by_order_id.return_value = attrs.evolve(
            prepared_reservation, payment_status=PaymentStatus.PAID, payment_key='pay_key'
        )
        mock_payment_gateway.cancel.side_effect = ExternalServiceError('PAYMENT_CANCEL_FAILED')

        # When / Then
        with pytest.raises(ExternalServiceError):
            await payment_use_case.cancel(
                client=client_user, order_id=ORDER_ID, cancel_reason='Change of plans'
            )
        mock_reservation_repo.update.assert_not_awaited()
