from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.exception.exceptions import DomainError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.marketplace.app.interface.i_user_query_repo import IUserQueryRepo
from src.service.marketplace.domain.entity.user_entity import UserEntity


DUPLICATE_CHECK_TYPES = ('id', 'nickname')


class UserQueryUseCase:
    def __init__(self, *, user_query_repo: IUserQueryRepo) -> None:
        self.user_query_repo = user_query_repo

    @classmethod
    @inject
    def depends(
        cls,
        user_query_repo: IUserQueryRepo = Depends(Provide[Container.user_query_repo]),
    ) -> Self:
        return cls(user_query_repo=user_query_repo)

    @Logger.io
    async def get_me(self, *, user_id: int) -> UserEntity:
        user = await self.user_query_repo.get_by_id(user_id)
        if not user:
            raise NotFoundError('User not found')
        return user

    @Logger.io
    async def is_duplicated(self, *, check_type: str, value: str) -> bool:
        if check_type not in DUPLICATE_CHECK_TYPES:
            raise DomainError(f'Unsupported duplicate check type: {check_type}')
        if check_type == 'id':
            return await self.user_query_repo.exists_by_login_id(value)
        return await self.user_query_repo.exists_by_nickname(value)
