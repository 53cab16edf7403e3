from datetime import datetime
from enum import StrEnum
from typing import List, Optional

import attrs

from src.service.marketplace.app.dto.review_dto import ReviewItem
from src.service.marketplace.domain.entity.advisor_entity import AdvisorCareer, AdvisorCertificate
from src.service.marketplace.domain.enum.trade_style import TradeStyle


class AdvisorSortBy(StrEnum):
    REVIEW_COUNT = 'REVIEW_COUNT'
    RATING = 'RATING'


@attrs.define
class AdvisorSummary:
    advisor_id: int
    nickname: str
    profile_image_url: Optional[str]
    short_intro: Optional[str]
    preferred_trade_style: Optional[TradeStyle]
    consultation_fee: int
    average_rating: float = 0.0
    review_count: int = 0
    certificates: List[AdvisorCertificate] = attrs.field(factory=list)


@attrs.define
class AdvisorDetail:
    summary: AdvisorSummary
    long_intro: Optional[str]
    public_contact: Optional[str]
    careers: List[AdvisorCareer]
    recent_reviews: List[ReviewItem]
    has_more_reviews: bool


@attrs.define(frozen=True)
class TimeSlot:
    time: str
    is_reserved: bool
    is_blocked: bool

    @property
    def is_available(self) -> bool:
        return not (self.is_reserved or self.is_blocked)


@attrs.define
class AvailableTimes:
    date: str
    slots: List[TimeSlot]


@attrs.define
class AdvisorAccount:
    """Result of an advisor signup"""

    user_id: int
    login_id: str
    name: str
    nickname: str
    email: str
    certificate_name: str
    approval_request_id: int
    requested_at: Optional[datetime]
