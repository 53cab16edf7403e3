from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.marketplace.app.dto.page import CursorPage, offset_of
from src.service.marketplace.app.dto.review_dto import ReviewItem
from src.service.marketplace.app.interface.i_advisor_repo import IAdvisorRepo
from src.service.marketplace.app.interface.i_review_repo import IReviewRepo


class ReviewQueryUseCase:
    def __init__(self, *, review_repo: IReviewRepo, advisor_repo: IAdvisorRepo) -> None:
        self.review_repo = review_repo
        self.advisor_repo = advisor_repo

    @classmethod
    @inject
    def depends(
        cls,
        review_repo: IReviewRepo = Depends(Provide[Container.review_repo]),
        advisor_repo: IAdvisorRepo = Depends(Provide[Container.advisor_repo]),
    ) -> Self:
        return cls(review_repo=review_repo, advisor_repo=advisor_repo)

    @Logger.io
    async def list_my_reviews(
        self, *, user_id: int, page_no: int, page_size: int
    ) -> CursorPage[ReviewItem]:
        rows = await self.review_repo.list_by_user(
            user_id=user_id,
            offset=offset_of(page_no=page_no, page_size=page_size),
            limit=page_size + 1,
        )
        return CursorPage.from_offset(rows=rows, page_no=page_no, page_size=page_size)

    @Logger.io
    async def list_advisor_reviews(
        self, *, advisor_id: int, page_no: int, page_size: int
    ) -> CursorPage[ReviewItem]:
        advisor = await self.advisor_repo.get_by_id(advisor_id)
        if not advisor or not advisor.is_approved:
            raise NotFoundError('Advisor not found')

        rows = await self.review_repo.list_by_advisor(
            advisor_id=advisor_id,
            offset=offset_of(page_no=page_no, page_size=page_size),
            limit=page_size + 1,
        )
        return CursorPage.from_offset(rows=rows, page_no=page_no, page_size=page_size)
