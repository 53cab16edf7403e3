from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, Field

from src.service.marketplace.app.dto.reservation_dto import ReservationItem
from src.service.marketplace.domain.entity.reservation_entity import (
    CancelReason,
    PaymentStatus,
    ReservationStatus,
)


class CreateReservationRequest(BaseModel):
    advisor_user_id: int
    date: date
    time: str = Field(..., pattern=r'^\d{2}:\d{2}$')
    request_message: str = Field('', max_length=1000)

    class Config:
        json_schema_extra = {
            'example': {
                'advisor_user_id': 2,
                'date': '2026-10-21',
                'time': '14:00',
                'request_message': 'Portfolio rebalancing for a 5-year horizon',
            }
        }


class CreateReservationResponse(BaseModel):
    reservation_id: int
    scheduled_time: str


class ReservationItemResponse(BaseModel):
    reservation_id: int
    date: str
    time: str
    counterpart_name: str
    request_message: str
    status: ReservationStatus
    payment_status: PaymentStatus
    can_cancel: bool

    @classmethod
    def from_item(cls, item: ReservationItem) -> 'ReservationItemResponse':
        return cls(
            reservation_id=item.reservation_id,
            date=item.date.isoformat(),
            time=item.time,
            counterpart_name=item.counterpart_name,
            request_message=item.request_message,
            status=item.status,
            payment_status=item.payment_status,
            can_cancel=item.can_cancel,
        )


class CancelReservationRequest(BaseModel):
    cancel_reason: CancelReason
    cancel_memo: Optional[str] = Field(None, max_length=500)

    class Config:
        json_schema_extra = {
            'example': {'cancel_reason': 'SCHEDULE_CHANGE', 'cancel_memo': 'Business trip'}
        }


class CancelReservationResponse(BaseModel):
    reservation_id: int
    canceled_at: Optional[datetime] = None
    message: str = 'reservation canceled'


class CompleteReservationResponse(BaseModel):
    reservation_id: int
    status: ReservationStatus
