from typing import AsyncContextManager, Callable, List

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.logging.loguru_io import Logger
from src.service.marketplace.app.dto.favorite_dto import FavoriteAdvisorItem
from src.service.marketplace.app.interface.i_favorite_repo import IFavoriteRepo
from src.service.marketplace.domain.enum.trade_style import TradeStyle
from src.service.marketplace.driven_adapter.model.advisor_model import AdvisorModel
from src.service.marketplace.driven_adapter.model.favorite_model import FavoriteModel
from src.service.marketplace.driven_adapter.model.user_model import UserModel


class FavoriteRepoImpl(IFavoriteRepo):
    def __init__(self, session_factory: Callable[..., AsyncContextManager[AsyncSession]]):
        self.session_factory = session_factory

    @Logger.io
    async def add(self, *, user_id: int, advisor_id: int) -> bool:
        async with self.session_factory() as session:
            session.add(FavoriteModel(user_id=user_id, advisor_id=advisor_id))
            try:
                await session.commit()
            except IntegrityError:
                # Unique (user_id, advisor_id): already favorited
                await session.rollback()
                return False
            return True

    @Logger.io
    async def remove(self, *, user_id: int, advisor_id: int) -> bool:
        async with self.session_factory() as session:
            result = await session.execute(
                delete(FavoriteModel).where(
                    FavoriteModel.user_id == user_id, FavoriteModel.advisor_id == advisor_id
                )
            )
            await session.commit()
            return result.rowcount > 0  # type: ignore[attr-defined]

    @Logger.io
    async def list_by_user(
        self, *, user_id: int, offset: int, limit: int
    ) -> List[FavoriteAdvisorItem]:
        async with self.session_factory() as session:
            result = await session.execute(
                select(FavoriteModel, AdvisorModel, UserModel.nickname)
                .join(AdvisorModel, AdvisorModel.user_id == FavoriteModel.advisor_id)
                .join(UserModel, UserModel.id == AdvisorModel.user_id)
                .where(FavoriteModel.user_id == user_id)
                .order_by(FavoriteModel.created_at.desc(), FavoriteModel.id.desc())
                .offset(offset)
                .limit(limit)
            )
            return [
                FavoriteAdvisorItem(
                    advisor_id=advisor_model.user_id,
                    nickname=nickname,
                    profile_image_url=advisor_model.profile_image_url,
                    short_intro=advisor_model.short_intro,
                    preferred_trade_style=TradeStyle(advisor_model.preferred_trade_style)
                    if advisor_model.preferred_trade_style
                    else None,
                    consultation_fee=advisor_model.consultation_fee,
                    favorited_at=favorite_model.created_at,
                )
                for favorite_model, advisor_model, nickname in result.all()
            ]
