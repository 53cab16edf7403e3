from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.logging.loguru_io import Logger
from src.service.marketplace.app.dto.favorite_dto import FavoriteAdvisorItem
from src.service.marketplace.app.dto.page import CursorPage, offset_of
from src.service.marketplace.app.interface.i_favorite_repo import IFavoriteRepo


class FavoriteQueryUseCase:
    def __init__(self, *, favorite_repo: IFavoriteRepo) -> None:
        self.favorite_repo = favorite_repo

    @classmethod
    @inject
    def depends(
        cls,
        favorite_repo: IFavoriteRepo = Depends(Provide[Container.favorite_repo]),
    ) -> Self:
        return cls(favorite_repo=favorite_repo)

    @Logger.io
    async def list_favorites(
        self, *, user_id: int, page_no: int, page_size: int
    ) -> CursorPage[FavoriteAdvisorItem]:
        rows = await self.favorite_repo.list_by_user(
            user_id=user_id,
            offset=offset_of(page_no=page_no, page_size=page_size),
            limit=page_size + 1,
        )
        return CursorPage.from_offset(rows=rows, page_no=page_no, page_size=page_size)
