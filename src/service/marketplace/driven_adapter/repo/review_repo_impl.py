from typing import AsyncContextManager, Callable, List, Optional

from sqlalchemy import exists, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.marketplace.app.dto.review_dto import ReviewItem
from src.service.marketplace.app.interface.i_review_repo import IReviewRepo
from src.service.marketplace.domain.entity.review_entity import Review
from src.service.marketplace.driven_adapter.model.review_model import ReviewModel
from src.service.marketplace.driven_adapter.model.user_model import UserModel


class ReviewRepoImpl(IReviewRepo):
    def __init__(self, session_factory: Callable[..., AsyncContextManager[AsyncSession]]):
        self.session_factory = session_factory

    @staticmethod
    def _model_to_entity(review_model: ReviewModel) -> Review:
        return Review(
            id=review_model.id,
            reservation_id=review_model.reservation_id,
            user_id=review_model.user_id,
            advisor_id=review_model.advisor_id,
            rating=review_model.rating,
            content=review_model.content,
            is_deleted=review_model.is_deleted,
            created_at=review_model.created_at,
            updated_at=review_model.updated_at,
        )

    async def _list_items(self, *, condition, offset: int, limit: int) -> List[ReviewItem]:
        reviewer = aliased(UserModel)
        advisor_user = aliased(UserModel)
        async with self.session_factory() as session:
            result = await session.execute(
                select(ReviewModel, reviewer.nickname, advisor_user.nickname)
                .join(reviewer, reviewer.id == ReviewModel.user_id)
                .join(advisor_user, advisor_user.id == ReviewModel.advisor_id)
                .where(condition, ReviewModel.is_deleted.is_(False))
                .order_by(ReviewModel.created_at.desc(), ReviewModel.id.desc())
                .offset(offset)
                .limit(limit)
            )
            return [
                ReviewItem(
                    review_id=review_model.id,
                    reservation_id=review_model.reservation_id,
                    advisor_id=review_model.advisor_id,
                    advisor_nickname=advisor_nickname,
                    reviewer_nickname=reviewer_nickname,
                    rating=review_model.rating,
                    content=review_model.content,
                    created_at=review_model.created_at,
                    updated_at=review_model.updated_at,
                )
                for review_model, reviewer_nickname, advisor_nickname in result.all()
            ]

    @Logger.io
    async def create(self, review: Review) -> Review:
        async with self.session_factory() as session:
            review_model = ReviewModel(
                reservation_id=review.reservation_id,
                user_id=review.user_id,
                advisor_id=review.advisor_id,
                rating=review.rating,
                content=review.content,
                is_deleted=False,
            )
            session.add(review_model)
            await session.commit()
            await session.refresh(review_model)
            return self._model_to_entity(review_model)

    @Logger.io
    async def get_by_id(self, review_id: int) -> Optional[Review]:
        async with self.session_factory() as session:
            result = await session.execute(
                select(ReviewModel).where(
                    ReviewModel.id == review_id, ReviewModel.is_deleted.is_(False)
                )
            )
            review_model = result.scalar_one_or_none()
            return self._model_to_entity(review_model) if review_model else None

    @Logger.io
    async def exists_by_reservation(self, reservation_id: int) -> bool:
        async with self.session_factory() as session:
            result = await session.execute(
                select(exists().where(ReviewModel.reservation_id == reservation_id))
            )
            return bool(result.scalar())

    @Logger.io
    async def update(self, review: Review) -> Review:
        async with self.session_factory() as session:
            review_model = await session.get(ReviewModel, review.id)
            if not review_model or review_model.is_deleted:
                raise NotFoundError('Review not found')

            review_model.rating = review.rating
            review_model.content = review.content
            await session.commit()
            await session.refresh(review_model)
            return self._model_to_entity(review_model)

    @Logger.io
    async def soft_delete(self, review_id: int) -> None:
        async with self.session_factory() as session:
            await session.execute(
                update(ReviewModel).where(ReviewModel.id == review_id).values(is_deleted=True)
            )
            await session.commit()

    @Logger.io
    async def list_by_user(self, *, user_id: int, offset: int, limit: int) -> List[ReviewItem]:
        return await self._list_items(
            condition=ReviewModel.user_id == user_id, offset=offset, limit=limit
        )

    @Logger.io
    async def list_by_advisor(
        self, *, advisor_id: int, offset: int, limit: int
    ) -> List[ReviewItem]:
        return await self._list_items(
            condition=ReviewModel.advisor_id == advisor_id, offset=offset, limit=limit
        )
