from typing import Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from pydantic import SecretStr

from src.platform.config.di import Container
from src.platform.exception.exceptions import DomainError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.marketplace.app.interface.i_password_hasher import IPasswordHasher
from src.service.marketplace.app.interface.i_refresh_token_store import IRefreshTokenStore
from src.service.marketplace.app.interface.i_user_command_repo import IUserCommandRepo
from src.service.marketplace.app.interface.i_user_query_repo import IUserQueryRepo
from src.service.marketplace.domain.entity.user_entity import UserEntity


class UserAccountUseCase:
    def __init__(
        self,
        *,
        user_query_repo: IUserQueryRepo,
        user_command_repo: IUserCommandRepo,
        password_hasher: IPasswordHasher,
        refresh_token_store: IRefreshTokenStore,
    ) -> None:
        self.user_query_repo = user_query_repo
        self.user_command_repo = user_command_repo
        self.password_hasher = password_hasher
        self.refresh_token_store = refresh_token_store

    @classmethod
    @inject
    def depends(
        cls,
        user_query_repo: IUserQueryRepo = Depends(Provide[Container.user_query_repo]),
        user_command_repo: IUserCommandRepo = Depends(Provide[Container.user_command_repo]),
        password_hasher: IPasswordHasher = Depends(Provide[Container.password_hasher]),
        refresh_token_store: IRefreshTokenStore = Depends(
            Provide[Container.refresh_token_store]
        ),
    ) -> Self:
        return cls(
            user_query_repo=user_query_repo,
            user_command_repo=user_command_repo,
            password_hasher=password_hasher,
            refresh_token_store=refresh_token_store,
        )

    async def _get_user(self, user_id: int) -> UserEntity:
        user = await self.user_query_repo.get_by_id(user_id)
        if not user:
            raise NotFoundError('User not found')
        return user

    @Logger.io
    async def update_profile(
        self, *, user_id: int, name: Optional[str], contact: Optional[str]
    ) -> tuple[UserEntity, list[str]]:
        user = await self._get_user(user_id)
        updated, updated_fields = user.apply_profile_update(name=name, contact=contact)
        saved = await self.user_command_repo.update(updated)
        Logger.base.info(f'✏️ [USER] User {user_id} updated {", ".join(updated_fields)}')
        return saved, updated_fields

    @Logger.io
    async def change_password(
        self, *, user_id: int, current_password: str, new_password: str
    ) -> None:
        user = await self._get_user(user_id)
        if not self.password_hasher.verify_password(
            plain_password=SecretStr(current_password), hashed_password=user.hashed_password
        ):
            raise DomainError('CURRENT_PASSWORD_MISMATCH')

        UserEntity.validate_new_password(new_password)
        if self.password_hasher.verify_password(
            plain_password=SecretStr(new_password), hashed_password=user.hashed_password
        ):
            raise DomainError('New password must differ from the current password')

        user.set_password(new_password, self.password_hasher)
        await self.user_command_repo.update_password(
            user_id=user_id, hashed_password=user.hashed_password
        )
        Logger.base.info(f'🔐 [USER] User {user_id} changed password')

    @Logger.io
    async def deactivate(self, *, user_id: int) -> UserEntity:
        user = await self._get_user(user_id)
        deactivated = await self.user_command_repo.update(user.deactivate())
        await self.refresh_token_store.delete(user_id=user_id)
        Logger.base.info(f'🚫 [USER] User {user_id} deactivated')
        return deactivated
