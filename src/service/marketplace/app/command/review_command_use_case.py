from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.event.i_domain_event_publisher import IDomainEventPublisher
from src.platform.exception.exceptions import ConflictError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.marketplace.app.interface.i_reservation_repo import IReservationRepo
from src.service.marketplace.app.interface.i_review_repo import IReviewRepo
from src.service.marketplace.domain.domain_event.marketplace_events import ReviewCreatedEvent
from src.service.marketplace.domain.entity.review_entity import Review
from src.service.marketplace.domain.entity.user_entity import UserEntity


class ReviewCommandUseCase:
    def __init__(
        self,
        *,
        review_repo: IReviewRepo,
        reservation_repo: IReservationRepo,
        event_publisher: IDomainEventPublisher,
    ) -> None:
        self.review_repo = review_repo
        self.reservation_repo = reservation_repo
        self.event_publisher = event_publisher

    @classmethod
    @inject
    def depends(
        cls,
        review_repo: IReviewRepo = Depends(Provide[Container.review_repo]),
        reservation_repo: IReservationRepo = Depends(Provide[Container.reservation_repo]),
        event_publisher: IDomainEventPublisher = Depends(Provide[Container.event_bus]),
    ) -> Self:
        return cls(
            review_repo=review_repo,
            reservation_repo=reservation_repo,
            event_publisher=event_publisher,
        )

    async def _get_review(self, review_id: int) -> Review:
        review = await self.review_repo.get_by_id(review_id)
        if not review:
            raise NotFoundError('Review not found')
        return review

    @Logger.io
    async def create_review(
        self, *, reviewer: UserEntity, reservation_id: int, rating: int, content: str
    ) -> Review:
        reservation = await self.reservation_repo.get_by_id(reservation_id)
        if not reservation:
            raise NotFoundError('Reservation not found')

        review = Review.write_for(
            reservation=reservation, user_id=reviewer.id or 0, rating=rating, content=content
        )
        if await self.review_repo.exists_by_reservation(reservation_id):
            raise ConflictError('REVIEW_ALREADY_EXISTS')

        created = await self.review_repo.create(review)
        Logger.base.info(
            f'⭐ [REVIEW] #{created.id} ({rating}/5) for advisor {created.advisor_id} '
            f'by user {reviewer.id}'
        )

        await self.event_publisher.publish(
            ReviewCreatedEvent(
                review_id=created.id or 0,
                advisor_id=created.advisor_id,
                reviewer_id=reviewer.id or 0,
                reviewer_nickname=reviewer.nickname,
                rating=rating,
            )
        )
        return created

    @Logger.io
    async def update_review(
        self, *, review_id: int, user_id: int, rating: int, content: str
    ) -> Review:
        review = await self._get_review(review_id)
        return await self.review_repo.update(
            review.edit(user_id=user_id, rating=rating, content=content)
        )

    @Logger.io
    async def delete_review(self, *, review_id: int, user_id: int) -> None:
        review = await self._get_review(review_id)
        review.validate_owner(user_id)
        await self.review_repo.soft_delete(review_id)
        Logger.base.info(f'🗑️ [REVIEW] #{review_id} deleted by user {user_id}')
