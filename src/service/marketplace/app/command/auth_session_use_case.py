from datetime import datetime, timedelta, timezone
from typing import Optional, Self

import attrs
from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from pydantic import SecretStr

from src.platform.config.core_setting import settings
from src.platform.config.di import Container
from src.platform.exception.exceptions import AuthenticationError, LoginError
from src.platform.logging.loguru_io import Logger
from src.service.marketplace.app.interface.i_password_hasher import IPasswordHasher
from src.service.marketplace.app.interface.i_refresh_token_store import IRefreshTokenStore
from src.service.marketplace.app.interface.i_token_provider import (
    ITokenProvider,
    RefreshClaims,
)
from src.service.marketplace.app.interface.i_user_command_repo import IUserCommandRepo
from src.service.marketplace.app.interface.i_user_query_repo import IUserQueryRepo
from src.service.marketplace.domain.entity.user_entity import UserEntity


@attrs.define(frozen=True)
class IssuedTokens:
    access_token: str
    refresh_token: Optional[str]
    user: Optional[UserEntity] = None


class AuthSessionUseCase:
    """
    Login / refresh / logout

    The refresh token is a JWT whose current value is also kept server-side
    (one per user), so logout and deactivation revoke it immediately.
    """

    def __init__(
        self,
        *,
        user_query_repo: IUserQueryRepo,
        user_command_repo: IUserCommandRepo,
        password_hasher: IPasswordHasher,
        refresh_token_store: IRefreshTokenStore,
        token_provider: ITokenProvider,
    ) -> None:
        self.user_query_repo = user_query_repo
        self.user_command_repo = user_command_repo
        self.password_hasher = password_hasher
        self.refresh_token_store = refresh_token_store
        self.token_provider = token_provider

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
        token_provider: ITokenProvider = Depends(Provide[Container.jwt_auth]),
    ) -> Self:
        return cls(
            user_query_repo=user_query_repo,
            user_command_repo=user_command_repo,
            password_hasher=password_hasher,
            refresh_token_store=refresh_token_store,
            token_provider=token_provider,
        )

    @Logger.io
    async def login(self, *, login_id: str, password: str) -> IssuedTokens:
        user = UserEntity.validate_user_exists(await self.user_query_repo.get_by_login_id(login_id))
        if not self.password_hasher.verify_password(
            plain_password=SecretStr(password), hashed_password=user.hashed_password
        ):
            raise LoginError('LOGIN_BAD_CREDENTIALS')
        user.validate_active()

        access_token = self.token_provider.create_access_token(user)
        refresh_token = self.token_provider.create_refresh_token(user)
        await self.refresh_token_store.save(
            user_id=user.id or 0,
            token=refresh_token,
            ttl_seconds=self.token_provider.refresh_ttl_seconds,
        )

        now = datetime.now(timezone.utc)
        await self.user_command_repo.update_last_login(user_id=user.id or 0, logged_in_at=now)
        Logger.base.info(f'🔑 [AUTH] User {user.id} logged in')

        return IssuedTokens(
            access_token=access_token,
            refresh_token=refresh_token,
            user=attrs.evolve(user, last_login_at=now),
        )

    async def _validate_stored_refresh_token(self, refresh_token: Optional[str]) -> RefreshClaims:
        if not refresh_token:
            raise AuthenticationError('REFRESH_TOKEN_REQUIRED')

        claims = self.token_provider.decode_refresh_token(refresh_token)
        stored = await self.refresh_token_store.get(user_id=claims.user_id)
        if stored is None or stored != refresh_token:
            raise AuthenticationError('INVALID_REFRESH_TOKEN')
        return claims

    @Logger.io
    async def refresh(self, *, refresh_token: Optional[str]) -> IssuedTokens:
        """
        Issue a new access token; rotate the refresh token only when it is
        close to expiry (REFRESH_TOKEN_ROTATE_THRESHOLD_DAYS).

        Returns:
            IssuedTokens with refresh_token None when no rotation happened
        """
        claims = await self._validate_stored_refresh_token(refresh_token)
        user_id = claims.user_id

        user = await self.user_query_repo.get_by_id(user_id)
        if user is None or not user.is_active:
            await self.refresh_token_store.delete(user_id=user_id)
            raise AuthenticationError('INVALID_REFRESH_TOKEN')

        access_token = self.token_provider.create_access_token(user)

        rotated: Optional[str] = None
        remaining = claims.expires_at - datetime.now(timezone.utc)
        if remaining <= timedelta(days=settings.REFRESH_TOKEN_ROTATE_THRESHOLD_DAYS):
            rotated = self.token_provider.create_refresh_token(user)
            await self.refresh_token_store.save(
                user_id=user_id,
                token=rotated,
                ttl_seconds=self.token_provider.refresh_ttl_seconds,
            )
            Logger.base.info(f'🔄 [AUTH] Refresh token rotated for user {user_id}')

        return IssuedTokens(access_token=access_token, refresh_token=rotated, user=user)

    @Logger.io
    async def logout(self, *, refresh_token: Optional[str]) -> None:
        user_id = (await self._validate_stored_refresh_token(refresh_token)).user_id
        await self.refresh_token_store.delete(user_id=user_id)
        Logger.base.info(f'👋 [AUTH] User {user_id} logged out')
