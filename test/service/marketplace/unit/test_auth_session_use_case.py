from datetime import timedelta
from unittest.mock import AsyncMock, Mock

import pytest

from src.platform.config.core_setting import settings
from src.platform.exception.exceptions import AuthenticationError
from src.service.marketplace.app.command.auth_session_use_case import AuthSessionUseCase
from src.service.marketplace.domain.entity.user_entity import UserEntity
from src.service.marketplace.driving_adapter.http_controller.auth.jwt_auth import (
    REFRESH_TOKEN_TYPE,
    JwtAuth,
)


USER_ID = 5


def _refresh_token(jwt_auth: JwtAuth, expires_in: timedelta) -> str:
    return jwt_auth._encode(
        {'sub': str(USER_ID), 'type': REFRESH_TOKEN_TYPE, 'user_id': USER_ID}, expires_in
    )


@pytest.fixture
def jwt_auth() -> JwtAuth:
    return JwtAuth()


@pytest.fixture
def mock_refresh_token_store() -> Mock:
    return AsyncMock()


@pytest.fixture
def mock_user_query_repo() -> Mock:
    repo = AsyncMock()
    repo.get_by_id.return_value = UserEntity(
        id=USER_ID, login_id='investor01', name='Kim Minsu', nickname='minsu'
    )
    return repo


@pytest.fixture
def auth_session_use_case(
    jwt_auth: JwtAuth, mock_refresh_token_store: Mock, mock_user_query_repo: Mock
) -> AuthSessionUseCase:
    return AuthSessionUseCase(
        user_query_repo=mock_user_query_repo,
        user_command_repo=AsyncMock(),
        password_hasher=Mock(),
        refresh_token_store=mock_refresh_token_store,
        token_provider=jwt_auth,
    )


@pytest.mark.unit
class TestRefreshRotation:
    @pytest.mark.asyncio
    async def test_token_within_threshold_is_rotated(
        self,
        auth_session_use_case: AuthSessionUseCase,
        jwt_auth: JwtAuth,
        mock_refresh_token_store: Mock,
    ):
        # Given
        expiring = _refresh_token(
            jwt_auth, timedelta(days=settings.REFRESH_TOKEN_ROTATE_THRESHOLD_DAYS - 1)
        )
        mock_refresh_token_store.get.return_value = expiring

        # When
        issued = await auth_session_use_case.refresh(refresh_token=expiring)

        # Then
        assert issued.access_token
        assert issued.refresh_token is not None
        assert issued.refresh_token != expiring
        mock_refresh_token_store.save.assert_awaited_once_with(
            user_id=USER_ID,
            token=issued.refresh_token,
            ttl_seconds=jwt_auth.refresh_ttl_seconds,
        )

    @pytest.mark.asyncio
    async def test_token_outside_threshold_is_kept(
        self,
        auth_session_use_case: AuthSessionUseCase,
        jwt_auth: JwtAuth,
        mock_refresh_token_store: Mock,
    ):
        # Given
        fresh = _refresh_token(
            jwt_auth, timedelta(days=settings.REFRESH_TOKEN_ROTATE_THRESHOLD_DAYS + 2)
        )
        mock_refresh_token_store.get.return_value = fresh

        # When
        issued = await auth_session_use_case.refresh(refresh_token=fresh)

        # Then
        assert issued.refresh_token is None
        mock_refresh_token_store.save.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_replaced_token_is_rejected(
        self,
        auth_session_use_case: AuthSessionUseCase,
        jwt_auth: JwtAuth,
        mock_refresh_token_store: Mock,
    ):
        # Given: the store already holds a newer token
        stale = _refresh_token(jwt_auth, timedelta(days=1))
        mock_refresh_token_store.get.return_value = 'newer-token'

        # When / Then
        with pytest.raises(AuthenticationError) as exc_info:
            await auth_session_use_case.refresh(refresh_token=stale)

        assert exc_info.value.message == 'INVALID_REFRESH_TOKEN'
        mock_refresh_token_store.save.assert_not_awaited()
