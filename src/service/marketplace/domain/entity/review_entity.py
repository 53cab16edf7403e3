from datetime import datetime
from typing import Optional

import attrs

from src.platform.exception.exceptions import DomainError, ForbiddenError
from src.service.marketplace.domain.entity.reservation_entity import (
    Reservation,
    ReservationStatus,
)


MIN_RATING = 1
MAX_RATING = 5
MIN_CONTENT_LENGTH = 10
MAX_CONTENT_LENGTH = 500


def validate_rating(rating: int) -> None:
    if rating < MIN_RATING or rating > MAX_RATING:
        raise DomainError(f'Rating must be between {MIN_RATING} and {MAX_RATING}')


def validate_review_content(content: str) -> str:
    stripped = (content or '').strip()
    if len(stripped) < MIN_CONTENT_LENGTH or len(stripped) > MAX_CONTENT_LENGTH:
        raise DomainError(
            f'Review content must be {MIN_CONTENT_LENGTH}-{MAX_CONTENT_LENGTH} characters'
        )
    return stripped


@attrs.define
class Review:
    reservation_id: int
    user_id: int
    advisor_id: int
    rating: int
    content: str
    id: Optional[int] = None
    is_deleted: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def write_for(
        cls, *, reservation: Reservation, user_id: int, rating: int, content: str
    ) -> 'Review':
        if reservation.client_id != user_id:
            raise ForbiddenError('NOT_RESERVATION_OWNER')
        if reservation.status != ReservationStatus.COMPLETED:
            raise DomainError('CONSULTATION_NOT_COMPLETED')
        validate_rating(rating)

        return cls(
            reservation_id=reservation.id or 0,
            user_id=user_id,
            advisor_id=reservation.advisor_id,
            rating=rating,
            content=validate_review_content(content),
        )

    def validate_owner(self, user_id: int) -> None:
        if self.user_id != user_id:
            raise ForbiddenError('NOT_REVIEW_OWNER')

    def edit(self, *, user_id: int, rating: int, content: str) -> 'Review':
        self.validate_owner(user_id)
        validate_rating(rating)
        return attrs.evolve(self, rating=rating, content=validate_review_content(content))
