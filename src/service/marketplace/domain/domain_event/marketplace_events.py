"""
Marketplace Domain Events

Published on the in-process event bus after the owning transaction commits.
Notification listeners turn each one into a notification row.
"""

from datetime import date, time
from typing import Optional

import attrs

from src.service.marketplace.domain.entity.approval_request_entity import (
    ApprovalRequest,
    ApprovalStatus,
    RejectionReason,
)
from src.service.marketplace.domain.entity.reservation_entity import CancelReason, Reservation


@attrs.define
class ReservationCreatedEvent:
    reservation_id: int
    client_id: int
    client_name: str
    advisor_id: int
    date: date
    start_time: time

    @classmethod
    def from_reservation(
        cls, *, reservation: Reservation, client_name: str
    ) -> 'ReservationCreatedEvent':
        return cls(
            reservation_id=reservation.id or 0,
            client_id=reservation.client_id,
            client_name=client_name,
            advisor_id=reservation.advisor_id,
            date=reservation.date,
            start_time=reservation.start_time,
        )


@attrs.define
class ReservationCanceledEvent:
    reservation_id: int
    canceled_by: int
    canceled_by_name: str
    recipient_id: int
    date: date
    start_time: time
    cancel_reason: Optional[CancelReason]

    @classmethod
    def from_reservation(
        cls, *, reservation: Reservation, canceled_by_name: str
    ) -> 'ReservationCanceledEvent':
        canceled_by = reservation.canceled_by or 0
        return cls(
            reservation_id=reservation.id or 0,
            canceled_by=canceled_by,
            canceled_by_name=canceled_by_name,
            recipient_id=reservation.counterpart_of(canceled_by),
            date=reservation.date,
            start_time=reservation.start_time,
            cancel_reason=reservation.cancel_reason,
        )


@attrs.define
class CommentCreatedEvent:
    comment_id: int
    post_id: int
    post_title: str
    post_author_id: int
    commenter_id: int
    commenter_nickname: str


@attrs.define
class ReviewCreatedEvent:
    review_id: int
    advisor_id: int
    reviewer_id: int
    reviewer_nickname: str
    rating: int


@attrs.define
class AdvisorApprovalProcessedEvent:
    request_id: int
    advisor_id: int
    status: ApprovalStatus
    rejection_reason: Optional[RejectionReason] = None
    custom_reason: Optional[str] = None

    @property
    def approved(self) -> bool:
        return self.status == ApprovalStatus.APPROVED

    @classmethod
    def from_request(cls, request: ApprovalRequest) -> 'AdvisorApprovalProcessedEvent':
        return cls(
            request_id=request.id or 0,
            advisor_id=request.advisor_id,
            status=request.status,
            rejection_reason=request.rejection_reason,
            custom_reason=request.custom_reason,
        )
