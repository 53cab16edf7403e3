from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from src.service.marketplace.app.command.favorite_command_use_case import FavoriteResult
from src.service.marketplace.app.dto.favorite_dto import FavoriteAdvisorItem
from src.service.marketplace.domain.enum.trade_style import TradeStyle


class FavoriteAdvisorResponse(BaseModel):
    advisor_id: int
    nickname: str
    profile_image_url: Optional[str] = None
    short_intro: Optional[str] = None
    preferred_trade_style: Optional[TradeStyle] = None
    consultation_fee: int
    favorited_at: Optional[datetime] = None

    @classmethod
    def from_item(cls, item: FavoriteAdvisorItem) -> 'FavoriteAdvisorResponse':
        return cls(
            advisor_id=item.advisor_id,
            nickname=item.nickname,
            profile_image_url=item.profile_image_url,
            short_intro=item.short_intro,
            preferred_trade_style=item.preferred_trade_style,
            consultation_fee=item.consultation_fee,
            favorited_at=item.favorited_at,
        )


class FavoriteResultResponse(BaseModel):
    advisor_id: int
    favorited: bool
    message: str

    @classmethod
    def from_result(cls, result: FavoriteResult) -> 'FavoriteResultResponse':
        return cls(
            advisor_id=result.advisor_id, favorited=result.favorited, message=result.message
        )
