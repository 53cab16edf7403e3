from typing import Optional

from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Cookie, Depends, Response

from src.platform.config.core_setting import settings
from src.platform.config.di import Container
from src.platform.logging.loguru_io import Logger
from src.service.marketplace.app.command.user_account_use_case import UserAccountUseCase
from src.service.marketplace.app.query.user_query_use_case import UserQueryUseCase
from src.service.marketplace.domain.entity.user_entity import UserEntity
from src.service.marketplace.driving_adapter.http_controller.auth.auth_cookie import (
    clear_auth_cookies,
)
from src.service.marketplace.driving_adapter.http_controller.auth.jwt_auth import JwtAuth
from src.service.marketplace.driving_adapter.http_controller.schema.page_schema import (
    MessageResponse,
)
from src.service.marketplace.driving_adapter.http_controller.schema.user_schema import (
    ChangePasswordRequest,
    UpdateProfileRequest,
    UpdateProfileResponse,
    UserProfileResponse,
)


# === API Router ===

router = APIRouter()


@inject
async def get_current_user(
    jwt_auth: JwtAuth = Depends(Provide[Container.jwt_auth]),
    token: Optional[str] = Cookie(None, alias=settings.ACCESS_TOKEN_COOKIE),
) -> UserEntity:
    """Current user from the access-token cookie (stateless, no DB query)"""
    return jwt_auth.get_current_user_info_from_jwt(token)


@router.get('/me', response_model=UserProfileResponse)
@Logger.io
async def get_me(
    current_user: UserEntity = Depends(get_current_user),
    use_case: UserQueryUseCase = Depends(UserQueryUseCase.depends),
) -> UserProfileResponse:
    user = await use_case.get_me(user_id=current_user.id or 0)
    return UserProfileResponse.from_entity(user)


@router.put('/me', response_model=UpdateProfileResponse)
@Logger.io
async def update_me(
    request: UpdateProfileRequest,
    current_user: UserEntity = Depends(get_current_user),
    use_case: UserAccountUseCase = Depends(UserAccountUseCase.depends),
) -> UpdateProfileResponse:
    user, updated_fields = await use_case.update_profile(
        user_id=current_user.id or 0, name=request.name, contact=request.contact
    )
    return UpdateProfileResponse(
        updated_fields=updated_fields, user=UserProfileResponse.from_entity(user)
    )


@router.put('/me/password', response_model=MessageResponse)
@Logger.io
async def change_password(
    request: ChangePasswordRequest,
    current_user: UserEntity = Depends(get_current_user),
    use_case: UserAccountUseCase = Depends(UserAccountUseCase.depends),
) -> MessageResponse:
    await use_case.change_password(
        user_id=current_user.id or 0,
        current_password=request.current_password.get_secret_value(),
        new_password=request.new_password.get_secret_value(),
    )
    return MessageResponse(message='password changed')


@router.delete('/me', response_model=MessageResponse)
@Logger.io
async def deactivate_me(
    response: Response,
    current_user: UserEntity = Depends(get_current_user),
    use_case: UserAccountUseCase = Depends(UserAccountUseCase.depends),
) -> MessageResponse:
    await use_case.deactivate(user_id=current_user.id or 0)
    clear_auth_cookies(response)
    return MessageResponse(message='account deactivated')
