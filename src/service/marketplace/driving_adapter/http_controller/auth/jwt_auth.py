"""
JWT access/refresh tokens

Both tokens are HS256 JWTs carried in HTTP-only cookies. The access token
embeds the user summary so request authentication needs no DB query; the
refresh token only carries the user id and a `type` claim.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from fastapi import HTTPException, status
import jwt

from src.platform.config.core_setting import settings
from src.platform.exception.exceptions import AuthenticationError
from src.service.marketplace.app.interface.i_token_provider import ITokenProvider, RefreshClaims
from src.service.marketplace.domain.entity.user_entity import UserEntity, UserRole


ACCESS_TOKEN_TYPE = 'access'
REFRESH_TOKEN_TYPE = 'refresh'


class JwtAuth(ITokenProvider):
    def __init__(self) -> None:
        self.secret = settings.SECRET_KEY.get_secret_value()
        self.algorithm = settings.ALGORITHM
        self.access_expire = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
        self.refresh_expire = timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS)

    @property
    def access_ttl_seconds(self) -> int:
        return int(self.access_expire.total_seconds())

    @property
    def refresh_ttl_seconds(self) -> int:
        return int(self.refresh_expire.total_seconds())

    def _encode(self, claims: Dict[str, Any], expires_in: timedelta) -> str:
        now = datetime.now(timezone.utc)
        payload = {**claims, 'iat': now, 'exp': now + expires_in}
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def _decode(self, token: str) -> Dict[str, Any]:
        return jwt.decode(token, self.secret, algorithms=[self.algorithm])

    def create_access_token(self, user_entity: UserEntity) -> str:
        return self._encode(
            {
                'sub': str(user_entity.id),
                'type': ACCESS_TOKEN_TYPE,
                'user_id': user_entity.id,
                'login_id': user_entity.login_id,
                'name': user_entity.name,
                'nickname': user_entity.nickname,
                'email': user_entity.email,
                'role': user_entity.role.value,
                'is_active': user_entity.is_active,
            },
            self.access_expire,
        )

    def create_refresh_token(self, user_entity: UserEntity) -> str:
        return self._encode(
            {'sub': str(user_entity.id), 'type': REFRESH_TOKEN_TYPE, 'user_id': user_entity.id},
            self.refresh_expire,
        )

    def decode_refresh_token(self, token: str) -> RefreshClaims:
        try:
            payload = self._decode(token)
        except jwt.PyJWTError as e:
            raise AuthenticationError('INVALID_REFRESH_TOKEN') from e

        if payload.get('type') != REFRESH_TOKEN_TYPE or not payload.get('user_id'):
            raise AuthenticationError('INVALID_REFRESH_TOKEN')

        return RefreshClaims(
            user_id=int(payload['user_id']),
            expires_at=datetime.fromtimestamp(payload['exp'], tz=timezone.utc),
        )

    def get_current_user_info_from_jwt(self, token: Optional[str]) -> UserEntity:
        if not token:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED, detail='Not authenticated'
            )

        try:
            payload = self._decode(token)
        except jwt.PyJWTError:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail='Invalid token')

        user_id = payload.get('user_id')
        role = payload.get('role')
        is_active = payload.get('is_active')
        if payload.get('type') != ACCESS_TOKEN_TYPE or not user_id or not role or is_active is None:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail='Invalid token')

        # Rebuild UserEntity from JWT payload (no DB query)
        user_entity = UserEntity(
            id=user_id,
            login_id=payload.get('login_id', ''),
            name=payload.get('name', ''),
            nickname=payload.get('nickname', ''),
            email=payload.get('email', ''),
            role=UserRole(role),
            is_active=is_active,
        )

        if not user_entity.is_active:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail='User is inactive')

        return user_entity
