from typing import AsyncContextManager, Callable, Optional

from sqlalchemy import exists, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.logging.loguru_io import Logger
from src.service.marketplace.app.interface.i_user_query_repo import IUserQueryRepo
from src.service.marketplace.domain.entity.user_entity import UserEntity, UserRole
from src.service.marketplace.driven_adapter.model.user_model import UserModel


def user_model_to_entity(user_model: UserModel) -> UserEntity:
    return UserEntity(
        id=user_model.id,
        login_id=user_model.login_id,
        name=user_model.name,
        nickname=user_model.nickname,
        email=user_model.email,
        contact=user_model.contact,
        hashed_password=user_model.hashed_password,
        role=UserRole(user_model.role),
        profile_image=user_model.profile_image,
        is_active=user_model.is_active,
        is_verified=user_model.is_verified,
        terms_agreed=user_model.terms_agreed,
        last_login_at=user_model.last_login_at,
        created_at=user_model.created_at,
    )


class UserQueryRepoImpl(IUserQueryRepo):
    def __init__(self, session_factory: Callable[..., AsyncContextManager[AsyncSession]]):
        self.session_factory = session_factory

    @Logger.io
    async def get_by_id(self, user_id: int) -> Optional[UserEntity]:
        async with self.session_factory() as session:
            user_model = await session.get(UserModel, user_id)
            return user_model_to_entity(user_model) if user_model else None

    @Logger.io
    async def get_by_login_id(self, login_id: str) -> Optional[UserEntity]:
        async with self.session_factory() as session:
            result = await session.execute(select(UserModel).where(UserModel.login_id == login_id))
            user_model = result.scalar_one_or_none()
            return user_model_to_entity(user_model) if user_model else None

    @Logger.io
    async def exists_by_login_id(self, login_id: str) -> bool:
        async with self.session_factory() as session:
            result = await session.execute(select(exists().where(UserModel.login_id == login_id)))
            return bool(result.scalar())

    @Logger.io
    async def exists_by_nickname(self, nickname: str) -> bool:
        async with self.session_factory() as session:
            result = await session.execute(select(exists().where(UserModel.nickname == nickname)))
            return bool(result.scalar())
