from datetime import date, datetime, time, timezone
from enum import StrEnum
from typing import Optional

import attrs

from src.platform.exception.exceptions import ConflictError, DomainError, ForbiddenError
from src.service.marketplace.domain import consultation_schedule


class ReservationStatus(StrEnum):
    PENDING = 'PENDING'
    CANCELED = 'CANCELED'
    COMPLETED = 'COMPLETED'


class PaymentStatus(StrEnum):
    NONE = 'NONE'
    PENDING = 'PENDING'
    PAID = 'PAID'
    FAILED = 'FAILED'
    CANCELED = 'CANCELED'


class CancelReason(StrEnum):
    PERSONAL_REASON = 'PERSONAL_REASON'
    SCHEDULE_CHANGE = 'SCHEDULE_CHANGE'
    HEALTH_ISSUE = 'HEALTH_ISSUE'
    NO_LONGER_NEEDED = 'NO_LONGER_NEEDED'
    OTHER = 'OTHER'


@attrs.define
class Reservation:
    client_id: int
    advisor_id: int
    date: date
    start_time: time
    end_time: time
    request_message: str = ''
    id: Optional[int] = None
    status: ReservationStatus = ReservationStatus.PENDING
    payment_status: PaymentStatus = PaymentStatus.NONE
    amount: Optional[int] = None
    order_id: Optional[str] = None
    payment_key: Optional[str] = None
    payment_method: Optional[str] = None
    card_company: Optional[str] = None
    receipt_url: Optional[str] = None
    paid_at: Optional[datetime] = None
    cancel_reason: Optional[CancelReason] = None
    cancel_memo: Optional[str] = None
    canceled_at: Optional[datetime] = None
    canceled_by: Optional[int] = None
    created_at: Optional[datetime] = None

    @classmethod
    def create(
        cls,
        *,
        client_id: int,
        advisor_id: int,
        date: date,
        start_time: time,
        request_message: str = '',
        amount: Optional[int] = None,
        order_id: Optional[str] = None,
    ) -> 'Reservation':
        if client_id == advisor_id:
            raise DomainError('SELF_RESERVATION_NOT_ALLOWED')
        consultation_schedule.validate_reservation_date(date)
        consultation_schedule.validate_reservation_start(start_time)

        return cls(
            client_id=client_id,
            advisor_id=advisor_id,
            date=date,
            start_time=start_time,
            end_time=consultation_schedule.end_of(start_time),
            request_message=request_message,
            amount=amount,
            order_id=order_id,
            payment_status=PaymentStatus.PENDING if order_id else PaymentStatus.NONE,
        )

    @property
    def scheduled_at(self) -> datetime:
        return consultation_schedule.scheduled_at(self.date, self.start_time)

    def is_participant(self, user_id: int) -> bool:
        return user_id in (self.client_id, self.advisor_id)

    def counterpart_of(self, user_id: int) -> int:
        return self.advisor_id if user_id == self.client_id else self.client_id

    def can_cancel(self, today: date) -> bool:
        return self.status == ReservationStatus.PENDING and self.date > today

    def cancel(
        self, *, user_id: int, reason: CancelReason, memo: Optional[str], today: date
    ) -> 'Reservation':
        """
        Raises:
            ForbiddenError: caller is neither the client nor the advisor
            DomainError: ALREADY_CANCELED, NOT_CANCELABLE or CANCEL_DEADLINE_PASSED
        """
        if not self.is_participant(user_id):
            raise ForbiddenError('NOT_RESERVATION_PARTICIPANT')
        if self.status == ReservationStatus.CANCELED:
            raise DomainError('ALREADY_CANCELED')
        if self.status != ReservationStatus.PENDING:
            raise DomainError('NOT_CANCELABLE')
        if self.date <= today:
            raise DomainError('CANCEL_DEADLINE_PASSED')

        return attrs.evolve(
            self,
            status=ReservationStatus.CANCELED,
            cancel_reason=reason,
            cancel_memo=memo,
            canceled_at=datetime.now(timezone.utc),
            canceled_by=user_id,
        )

    def complete(self, *, advisor_id: int) -> 'Reservation':
        if advisor_id != self.advisor_id:
            raise ForbiddenError('Only the reservation advisor can complete the consultation')
        if self.status != ReservationStatus.PENDING:
            raise DomainError('NOT_COMPLETABLE')

        return attrs.evolve(self, status=ReservationStatus.COMPLETED)

    def validate_payable_by(self, *, user_id: int, amount: int) -> None:
        if self.client_id != user_id:
            raise ForbiddenError('NOT_ORDER_OWNER')
        # Only a live, unpaid order may reach the gateway
        if (
            self.status != ReservationStatus.PENDING
            or self.payment_status != PaymentStatus.PENDING
        ):
            raise ConflictError('ALREADY_PROCESSED')
        if self.amount != amount:
            raise DomainError('PAYMENT_AMOUNT_MISMATCH')

    def mark_paid(
        self,
        *,
        payment_key: str,
        method: Optional[str],
        card_company: Optional[str],
        receipt_url: Optional[str],
        approved_at: Optional[datetime],
    ) -> 'Reservation':
        return attrs.evolve(
            self,
            payment_status=PaymentStatus.PAID,
            payment_key=payment_key,
            payment_method=method,
            card_company=card_company,
            receipt_url=receipt_url,
            paid_at=approved_at or datetime.now(timezone.utc),
        )

    def mark_payment_failed(self) -> 'Reservation':
        return attrs.evolve(self, payment_status=PaymentStatus.FAILED)

    @property
    def requires_gateway_refund(self) -> bool:
        return self.payment_status == PaymentStatus.PAID and bool(self.payment_key)

    def cancel_order(self, *, user_id: int, memo: Optional[str]) -> 'Reservation':
        """Cancel a paid (or prepared) consultation from the payment side"""
        if self.client_id != user_id:
            raise ForbiddenError('NOT_ORDER_OWNER')
        if self.status == ReservationStatus.CANCELED:
            raise ConflictError('ALREADY_PROCESSED')

        return attrs.evolve(
            self,
            status=ReservationStatus.CANCELED,
            payment_status=PaymentStatus.CANCELED
            if self.requires_gateway_refund
            else self.payment_status,
            cancel_reason=CancelReason.OTHER,
            cancel_memo=memo,
            canceled_at=datetime.now(timezone.utc),
            canceled_by=user_id,
        )


def build_order_id(
    *, prefix: str, now: datetime, nonce: str, client_id: int, advisor_id: int
) -> str:
    return f'{prefix}_{now.strftime("%Y%m%d_%H%M%S")}_{nonce}_{client_id}_{advisor_id}'
