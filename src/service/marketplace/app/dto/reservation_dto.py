from datetime import date
from typing import Optional

import attrs

from src.service.marketplace.domain.entity.reservation_entity import (
    PaymentStatus,
    Reservation,
    ReservationStatus,
)


@attrs.define
class ReservationWithCounterpart:
    reservation: Reservation
    counterpart_name: str


@attrs.define
class ReservationItem:
    reservation_id: int
    date: date
    time: str
    counterpart_name: str
    request_message: str
    status: ReservationStatus
    payment_status: PaymentStatus
    can_cancel: bool


@attrs.define
class PreparedPayment:
    reservation_id: int
    order_id: str
    order_name: str
    amount: int
    customer_name: str
    customer_email: str
    success_url: str
    fail_url: str
    client_key: str


@attrs.define
class PaymentConfirmation:
    """What the gateway reports for an approved payment"""

    payment_key: str
    order_id: str
    status: str
    method: Optional[str] = None
    card_company: Optional[str] = None
    receipt_url: Optional[str] = None
    approved_at: Optional[str] = None

    @property
    def is_done(self) -> bool:
        return self.status == 'DONE'
