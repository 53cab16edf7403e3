from fastapi import Depends
from opentelemetry import trace

from src.platform.exception.exceptions import ForbiddenError
from src.service.marketplace.domain.entity.user_entity import UserEntity, UserRole
from src.service.marketplace.driving_adapter.http_controller.user_controller import (
    get_current_user as get_user_from_controller,
)


class RoleAuthStrategy:
    @staticmethod
    def is_user(user: UserEntity) -> bool:
        return user.role == UserRole.USER

    @staticmethod
    def is_advisor(user: UserEntity) -> bool:
        return user.role == UserRole.ADVISOR

    @staticmethod
    def is_admin(user: UserEntity) -> bool:
        return user.role == UserRole.ADMIN


async def get_current_user(
    current_user: UserEntity = Depends(get_user_from_controller),
) -> UserEntity:
    return current_user


def _require(current_user: UserEntity, role: UserRole) -> UserEntity:
    tracer = trace.get_tracer(__name__)
    with tracer.start_as_current_span(
        f'auth.require_{role.value}',
        attributes={
            'user.id': current_user.id or 0,
            'user.role': current_user.role.value,
        },
    ):
        if current_user.role != role:
            raise ForbiddenError(f'Only {role.value}s can perform this action')
        return current_user


async def require_user(current_user: UserEntity = Depends(get_user_from_controller)) -> UserEntity:
    return _require(current_user, UserRole.USER)


async def require_advisor(
    current_user: UserEntity = Depends(get_user_from_controller),
) -> UserEntity:
    return _require(current_user, UserRole.ADVISOR)


async def require_admin(
    current_user: UserEntity = Depends(get_user_from_controller),
) -> UserEntity:
    return _require(current_user, UserRole.ADMIN)
