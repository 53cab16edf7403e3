from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, Field

from src.service.marketplace.app.dto.reservation_dto import PreparedPayment
from src.service.marketplace.domain.entity.reservation_entity import (
    PaymentStatus,
    Reservation,
    ReservationStatus,
)


class PreparePaymentRequest(BaseModel):
    advisor_user_id: int
    date: date
    time: str = Field(..., pattern=r'^\d{2}:\d{2}$')
    request_message: str = Field('', max_length=1000)


class PreparePaymentResponse(BaseModel):
    reservation_id: int
    order_id: str
    order_name: str
    amount: int
    customer_name: str
    customer_email: str
    success_url: str
    fail_url: str
    client_key: str

    @classmethod
    def from_dto(cls, prepared: PreparedPayment) -> 'PreparePaymentResponse':
        return cls(
            reservation_id=prepared.reservation_id,
            order_id=prepared.order_id,
            order_name=prepared.order_name,
            amount=prepared.amount,
            customer_name=prepared.customer_name,
            customer_email=prepared.customer_email,
            success_url=prepared.success_url,
            fail_url=prepared.fail_url,
            client_key=prepared.client_key,
        )


class ConfirmPaymentRequest(BaseModel):
    payment_key: str = Field(..., min_length=1, max_length=200)
    order_id: str = Field(..., min_length=1, max_length=100)
    amount: int = Field(..., gt=0)

    class Config:
        json_schema_extra = {
            'example': {
                'payment_key': 'tgen_20261019123456abcde',
                'order_id': 'CONSULT_20261019_123456_1_2',
                'amount': 30000,
            }
        }


class CancelPaymentRequest(BaseModel):
    cancel_reason: str = Field(..., min_length=1, max_length=200)
    cancel_amount: Optional[int] = Field(None, gt=0)


class PaymentResultResponse(BaseModel):
    reservation_id: int
    order_id: Optional[str] = None
    status: ReservationStatus
    payment_status: PaymentStatus
    amount: Optional[int] = None
    payment_method: Optional[str] = None
    card_company: Optional[str] = None
    receipt_url: Optional[str] = None
    paid_at: Optional[datetime] = None
    canceled_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, reservation: Reservation) -> 'PaymentResultResponse':
        return cls(
            reservation_id=reservation.id or 0,
            order_id=reservation.order_id,
            status=reservation.status,
            payment_status=reservation.payment_status,
            amount=reservation.amount,
            payment_method=reservation.payment_method,
            card_company=reservation.card_company,
            receipt_url=reservation.receipt_url,
            paid_at=reservation.paid_at,
            canceled_at=reservation.canceled_at,
        )
