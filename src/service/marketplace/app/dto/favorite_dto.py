from datetime import datetime
from typing import Optional

import attrs

from src.service.marketplace.domain.enum.trade_style import TradeStyle


@attrs.define
class FavoriteAdvisorItem:
    advisor_id: int
    nickname: str
    profile_image_url: Optional[str]
    short_intro: Optional[str]
    preferred_trade_style: Optional[TradeStyle]
    consultation_fee: int
    favorited_at: Optional[datetime] = None
