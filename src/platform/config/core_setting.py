from pathlib import Path
from typing import List, Optional

from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


_PROJECT_ROOT = Path(__file__).resolve().parents[3]
_ENV_PATH = _PROJECT_ROOT / '.env'
_ENV_FILE = _ENV_PATH if _ENV_PATH.exists() else (_PROJECT_ROOT / '.env.example')


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE),
        env_ignore_empty=True,
        extra='ignore',
    )

    PROJECT_NAME: str = 'Stalk Advisory Marketplace'
    VERSION: str = '0.1.0'
    DEBUG: bool = True  # Set to False in production

    # Database
    POSTGRES_SERVER: str = 'localhost'
    POSTGRES_USER: str = 'postgres'
    POSTGRES_PASSWORD: SecretStr = SecretStr('postgres')
    POSTGRES_DB: str = 'stalk'
    POSTGRES_PORT: int = 5432
    DATABASE_URL: Optional[str] = None  # Overrides POSTGRES_* (e.g. sqlite+aiosqlite for tests)

    DB_POOL_SIZE_WRITE: int = 10
    DB_POOL_SIZE_READ: int = 20
    DB_POOL_MAX_OVERFLOW: int = 5
    DB_POOL_TIMEOUT: int = 30
    DB_POOL_RECYCLE: int = 3600
    DB_POOL_PRE_PING: bool = True

    @property
    def DATABASE_URL_ASYNC(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        password = self.POSTGRES_PASSWORD.get_secret_value()
        return f'postgresql+asyncpg://{self.POSTGRES_USER}:{password}@{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}'

    @property
    def IS_SQLITE(self) -> bool:
        return self.DATABASE_URL_ASYNC.startswith('sqlite')

    # Security
    SECRET_KEY: SecretStr = SecretStr('test_secret_key_change_in_production')
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 30
    REFRESH_TOKEN_EXPIRE_DAYS: int = 7
    REFRESH_TOKEN_ROTATE_THRESHOLD_DAYS: int = 3
    ALGORITHM: str = 'HS256'
    ACCESS_TOKEN_COOKIE: str = 'stalk_access_token'
    REFRESH_TOKEN_COOKIE: str = 'stalk_refresh_token'
    COOKIE_SECURE: bool = False  # Set to True behind HTTPS

    # CORS
    BACKEND_CORS_ORIGINS: List[str] = []  # add your frontend URL here

    @field_validator('BACKEND_CORS_ORIGINS', mode='before')
    @classmethod
    def assemble_cors_origins(cls, v: str | List[str]) -> List[str]:
        if isinstance(v, str) and not v.startswith('['):
            return [i.strip() for i in v.split(',')]
        elif isinstance(v, list):
            return v
        return []

    # Redis (refresh tokens + notification counters)
    REDIS_HOST: str = 'localhost'
    REDIS_PORT: int = 6379
    REDIS_DB: int = 0
    REDIS_PASSWORD: str = ''
    REDIS_DECODE_RESPONSES: bool = True
    REDIS_POOL_MAX_CONNECTIONS: int = 50
    REDIS_POOL_SOCKET_TIMEOUT: int = 5
    REDIS_POOL_SOCKET_CONNECT_TIMEOUT: int = 5
    REDIS_POOL_HEALTH_CHECK_INTERVAL: int = 30

    # Toss Payments
    TOSS_SECRET_KEY: SecretStr = SecretStr('test_sk_change_in_production')
    TOSS_CLIENT_KEY: str = 'test_ck_change_in_production'
    TOSS_API_URL: str = 'https://api.tosspayments.com/v1/payments/'
    PAYMENT_SUCCESS_URL: str = 'http://localhost:5173/payment/success'
    PAYMENT_FAIL_URL: str = 'http://localhost:5173/payment/fail'
    PAYMENT_TIMEOUT_SECONDS: float = 10.0
    PAYMENT_ORDER_PREFIX: str = 'CONSULT'

    # Business rules
    TIMEZONE: str = 'Asia/Seoul'
    DEFAULT_CONSULTATION_FEE: int = 30000
    DEFAULT_PROFILE_IMAGE: str = '/images/default_profile.png'


settings = Settings()  # type: ignore
