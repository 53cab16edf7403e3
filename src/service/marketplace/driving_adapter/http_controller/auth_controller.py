from typing import Optional

from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Cookie, Depends, Query, Response, status

from src.platform.config.core_setting import settings
from src.platform.config.di import Container
from src.platform.logging.loguru_io import Logger
from src.service.marketplace.app.command.auth_session_use_case import AuthSessionUseCase
from src.service.marketplace.app.command.signup_use_case import SignupUseCase
from src.service.marketplace.app.query.user_query_use_case import UserQueryUseCase
from src.service.marketplace.driving_adapter.http_controller.auth.auth_cookie import (
    clear_auth_cookies,
    set_auth_cookies,
)
from src.service.marketplace.driving_adapter.http_controller.auth.jwt_auth import JwtAuth
from src.service.marketplace.driving_adapter.http_controller.schema.page_schema import (
    MessageResponse,
)
from src.service.marketplace.driving_adapter.http_controller.schema.user_schema import (
    AdvisorSignupRequest,
    AdvisorSignupResponse,
    DuplicateCheckResponse,
    LoginRequest,
    SignupRequest,
    UserSummaryResponse,
)


router = APIRouter()


@router.post('/signup', response_model=UserSummaryResponse, status_code=status.HTTP_201_CREATED)
@Logger.io
async def signup(
    request: SignupRequest,
    use_case: SignupUseCase = Depends(SignupUseCase.depends),
) -> UserSummaryResponse:
    user = await use_case.signup_user(
        login_id=request.user_id,
        name=request.name,
        nickname=request.nickname,
        password=request.password.get_secret_value(),
        password_confirm=request.password_confirm.get_secret_value(),
        contact=request.contact,
        email=request.email,
        agreed_terms=request.agreed_terms,
        agreed_privacy=request.agreed_privacy,
    )
    return UserSummaryResponse.from_entity(user)


@router.post(
    '/signup/advisor', response_model=AdvisorSignupResponse, status_code=status.HTTP_201_CREATED
)
@Logger.io
async def signup_advisor(
    request: AdvisorSignupRequest,
    use_case: SignupUseCase = Depends(SignupUseCase.depends),
) -> AdvisorSignupResponse:
    account = await use_case.signup_advisor(
        login_id=request.user_id,
        name=request.name,
        nickname=request.nickname,
        password=request.password.get_secret_value(),
        password_confirm=request.password_confirm.get_secret_value(),
        contact=request.contact,
        email=request.email,
        agreed_terms=request.agreed_terms,
        agreed_privacy=request.agreed_privacy,
        certificate_name=request.certificate_name,
        certificate_file_sn=request.certificate_file_sn,
        birth=request.birth,
        certificate_file_number=request.certificate_file_number,
        profile_image_url=request.profile_image_url,
    )
    return AdvisorSignupResponse(
        user_id=account.user_id,
        login_id=account.login_id,
        name=account.name,
        nickname=account.nickname,
        email=account.email,
        certificate_name=account.certificate_name,
        approval_request_id=account.approval_request_id,
    )


@router.get('/check-duplicate', response_model=DuplicateCheckResponse)
@Logger.io
async def check_duplicate(
    type: str = Query(..., description='id | nickname'),
    value: str = Query(..., min_length=1),
    use_case: UserQueryUseCase = Depends(UserQueryUseCase.depends),
) -> DuplicateCheckResponse:
    duplicated = await use_case.is_duplicated(check_type=type, value=value)
    return DuplicateCheckResponse(duplicated=duplicated)


@router.post('/login', response_model=UserSummaryResponse)
@Logger.io
@inject
async def login(
    response: Response,
    request: LoginRequest,
    use_case: AuthSessionUseCase = Depends(AuthSessionUseCase.depends),
    jwt_auth: JwtAuth = Depends(Provide[Container.jwt_auth]),
) -> UserSummaryResponse:
    issued = await use_case.login(
        login_id=request.user_id, password=request.password.get_secret_value()
    )
    set_auth_cookies(
        response,
        access_token=issued.access_token,
        access_max_age=jwt_auth.access_ttl_seconds,
        refresh_token=issued.refresh_token,
        refresh_max_age=jwt_auth.refresh_ttl_seconds,
    )
    return UserSummaryResponse.from_entity(issued.user)  # type: ignore[arg-type]


@router.post('/refresh', response_model=MessageResponse)
@Logger.io
@inject
async def refresh(
    response: Response,
    refresh_token: Optional[str] = Cookie(None, alias=settings.REFRESH_TOKEN_COOKIE),
    use_case: AuthSessionUseCase = Depends(AuthSessionUseCase.depends),
    jwt_auth: JwtAuth = Depends(Provide[Container.jwt_auth]),
) -> MessageResponse:
    issued = await use_case.refresh(refresh_token=refresh_token)
    set_auth_cookies(
        response,
        access_token=issued.access_token,
        access_max_age=jwt_auth.access_ttl_seconds,
        refresh_token=issued.refresh_token,
        refresh_max_age=jwt_auth.refresh_ttl_seconds,
    )
    if issued.refresh_token:
        return MessageResponse(message='access token reissued, refresh token rotated')
    return MessageResponse(message='access token reissued')


@router.post('/logout', response_model=MessageResponse)
@Logger.io
async def logout(
    response: Response,
    refresh_token: Optional[str] = Cookie(None, alias=settings.REFRESH_TOKEN_COOKIE),
    use_case: AuthSessionUseCase = Depends(AuthSessionUseCase.depends),
) -> MessageResponse:
    await use_case.logout(refresh_token=refresh_token)
    clear_auth_cookies(response)
    return MessageResponse(message='logged out')
