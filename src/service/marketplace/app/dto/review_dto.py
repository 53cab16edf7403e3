from datetime import datetime
from typing import Optional

import attrs


@attrs.define
class ReviewItem:
    review_id: int
    reservation_id: int
    advisor_id: int
    advisor_nickname: str
    reviewer_nickname: str
    rating: int
    content: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
