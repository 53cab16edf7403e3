from typing import Self

import attrs
from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.marketplace.app.interface.i_advisor_repo import IAdvisorRepo
from src.service.marketplace.app.interface.i_favorite_repo import IFavoriteRepo


@attrs.define(frozen=True)
class FavoriteResult:
    advisor_id: int
    favorited: bool
    message: str


class FavoriteCommandUseCase:
    def __init__(self, *, favorite_repo: IFavoriteRepo, advisor_repo: IAdvisorRepo) -> None:
        self.favorite_repo = favorite_repo
        self.advisor_repo = advisor_repo

    @classmethod
    @inject
    def depends(
        cls,
        favorite_repo: IFavoriteRepo = Depends(Provide[Container.favorite_repo]),
        advisor_repo: IAdvisorRepo = Depends(Provide[Container.advisor_repo]),
    ) -> Self:
        return cls(favorite_repo=favorite_repo, advisor_repo=advisor_repo)

    @Logger.io
    async def add(self, *, user_id: int, advisor_id: int) -> FavoriteResult:
        advisor = await self.advisor_repo.get_by_id(advisor_id)
        if not advisor or not advisor.is_approved:
            raise NotFoundError('Advisor not found')

        created = await self.favorite_repo.add(user_id=user_id, advisor_id=advisor_id)
        return FavoriteResult(
            advisor_id=advisor_id,
            favorited=True,
            message='favorited' if created else 'already favorited',
        )

    @Logger.io
    async def remove(self, *, user_id: int, advisor_id: int) -> FavoriteResult:
        removed = await self.favorite_repo.remove(user_id=user_id, advisor_id=advisor_id)
        return FavoriteResult(
            advisor_id=advisor_id,
            favorited=False,
            message='unfavorited' if removed else 'not favorited',
        )
