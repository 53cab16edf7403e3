from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from src.service.marketplace.app.dto.review_dto import ReviewItem
from src.service.marketplace.domain.entity.review_entity import Review


class CreateReviewRequest(BaseModel):
    reservation_id: int
    rating: int = Field(..., ge=1, le=5)
    content: str = Field(..., min_length=10, max_length=500)

    class Config:
        json_schema_extra = {
            'example': {
                'reservation_id': 1,
                'rating': 5,
                'content': 'Clear explanations and a concrete plan.',
            }
        }


class UpdateReviewRequest(BaseModel):
    rating: int = Field(..., ge=1, le=5)
    content: str = Field(..., min_length=10, max_length=500)


class ReviewResponse(BaseModel):
    review_id: int
    reservation_id: int
    advisor_id: int
    advisor_nickname: Optional[str] = None
    reviewer_nickname: Optional[str] = None
    rating: int
    content: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_item(cls, item: ReviewItem) -> 'ReviewResponse':
        return cls(
            review_id=item.review_id,
            reservation_id=item.reservation_id,
            advisor_id=item.advisor_id,
            advisor_nickname=item.advisor_nickname,
            reviewer_nickname=item.reviewer_nickname,
            rating=item.rating,
            content=item.content,
            created_at=item.created_at,
            updated_at=item.updated_at,
        )

    @classmethod
    def from_entity(cls, review: Review) -> 'ReviewResponse':
        return cls(
            review_id=review.id or 0,
            reservation_id=review.reservation_id,
            advisor_id=review.advisor_id,
            rating=review.rating,
            content=review.content,
            created_at=review.created_at,
            updated_at=review.updated_at,
        )
