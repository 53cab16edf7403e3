from datetime import datetime
from typing import AsyncContextManager, Callable

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.marketplace.app.interface.i_user_command_repo import IUserCommandRepo
from src.service.marketplace.domain.entity.user_entity import UserEntity
from src.service.marketplace.driven_adapter.model.user_model import UserModel
from src.service.marketplace.driven_adapter.repo.user_query_repo_impl import user_model_to_entity


def new_user_model(user_entity: UserEntity) -> UserModel:
    return UserModel(
        login_id=user_entity.login_id,
        name=user_entity.name,
        nickname=user_entity.nickname,
        email=user_entity.email,
        contact=user_entity.contact,
        hashed_password=user_entity.hashed_password,
        role=user_entity.role.value,
        profile_image=user_entity.profile_image,
        is_active=user_entity.is_active,
        is_verified=user_entity.is_verified,
        terms_agreed=user_entity.terms_agreed,
    )


class UserCommandRepoImpl(IUserCommandRepo):
    def __init__(self, session_factory: Callable[..., AsyncContextManager[AsyncSession]]):
        self.session_factory = session_factory

    @Logger.io
    async def create(self, user_entity: UserEntity) -> UserEntity:
        async with self.session_factory() as session:
            user_model = new_user_model(user_entity)

            session.add(user_model)
            await session.commit()
            await session.refresh(user_model)

            return user_model_to_entity(user_model)

    @Logger.io
    async def update(self, user_entity: UserEntity) -> UserEntity:
        async with self.session_factory() as session:
            user_model = await session.get(UserModel, user_entity.id)
            if not user_model:
                raise NotFoundError('User not found')

            user_model.name = user_entity.name
            user_model.nickname = user_entity.nickname
            user_model.email = user_entity.email
            user_model.contact = user_entity.contact
            user_model.profile_image = user_entity.profile_image
            user_model.is_active = user_entity.is_active
            user_model.is_verified = user_entity.is_verified

            await session.commit()
            await session.refresh(user_model)
            return user_model_to_entity(user_model)

    @Logger.io
    async def update_password(self, *, user_id: int, hashed_password: str) -> None:
        async with self.session_factory() as session:
            await session.execute(
                update(UserModel)
                .where(UserModel.id == user_id)
                .values(hashed_password=hashed_password)
            )
            await session.commit()

    @Logger.io
    async def update_last_login(self, *, user_id: int, logged_in_at: datetime) -> None:
        async with self.session_factory() as session:
            await session.execute(
                update(UserModel).where(UserModel.id == user_id).values(last_login_at=logged_in_at)
            )
            await session.commit()
