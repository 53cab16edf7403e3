from contextvars import ContextVar
from datetime import datetime
from enum import StrEnum
import logging
import os
import sys
from typing import TYPE_CHECKING
import zoneinfo

from loguru import logger as loguru_logger


if TYPE_CHECKING:
    from loguru import Logger as LoguruLogger

from src.platform.config.core_setting import settings
from src.platform.constant.path import LOG_DIR
from src.platform.logging.service_context import get_service_context


# Use test log directory if in test environment
LOG_DIR = os.environ.get('TEST_LOG_DIR', LOG_DIR)


# Constants and shared variables for LoguruIO
SENSITIVE_KEYWORDS = {
    'password',
    'password_confirm',
    'current_password',
    'new_password',
    'plain_password',
    'hashed_password',
    'secret_key',
    'token',
    'refresh_token',
    'payment_key',
}
MASK = '********'
MAX_CONTENT_LENGTH = 1000

chain_start_time_var: ContextVar[float] = ContextVar('first_time_var', default=0)
call_depth_var: ContextVar[int] = ContextVar('call_depth_var', default=0)


class ExtraField(StrEnum):
    SERVICE_CONTEXT = 'service_context'
    CHAIN_START_TIME = 'chain_start_time'
    CALL_TARGET = 'call_target'


def _parse_http_status_level(message: str) -> str | None:
    """
    Map uvicorn access log lines to a log level by status code.

    Format: '127.0.0.1:51234 - "GET /api/users/me HTTP/1.1" 200'
    """
    if '"' not in message or ' HTTP/' not in message:
        return None

    try:
        status_part = message.rsplit('"', 1)[1].strip().split()
        if not status_part:
            return None
        status_code = int(status_part[0])
    except (ValueError, IndexError):
        return None

    if status_code >= 500:
        return 'CRITICAL'
    if status_code >= 400:
        return 'ERROR'
    if status_code >= 300:
        return 'WARNING'
    if status_code >= 200:
        return 'SUCCESS'
    return 'INFO'


_intercept_bound_logger = None  # Cached bound logger for InterceptHandler


def _get_intercept_bound_logger() -> 'LoguruLogger':
    """Get or create bound logger with default extra fields (cached)."""
    global _intercept_bound_logger
    if _intercept_bound_logger is None:
        _intercept_bound_logger = loguru_logger.bind(
            **{
                ExtraField.SERVICE_CONTEXT: get_service_context(),
                ExtraField.CHAIN_START_TIME: '',
                ExtraField.CALL_TARGET: '',
            }
        )
    return _intercept_bound_logger


class InterceptHandler(logging.Handler):
    def emit(self, record: logging.LogRecord) -> None:
        message = record.getMessage()

        if record.levelno <= logging.DEBUG:
            # asyncio / aiosqlite chatter
            if 'Using selector:' in message:
                return
            if record.name.startswith('aiosqlite'):
                return

        level = _parse_http_status_level(message) if record.name == 'uvicorn.access' else None
        if level is None:
            # Get corresponding Loguru level if it exists
            try:
                level = loguru_logger.level(record.levelname).name
            except ValueError:
                level = record.levelno

        # Find caller from where originated the logged message
        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back  # type: ignore
            depth += 1

        _get_intercept_bound_logger().opt(depth=depth, exception=record.exc_info).log(
            level, message
        )


# Log format for LoguruIO decorated functions
io_log_format = ' | '.join(
    (
        f'<c>{{extra[{ExtraField.SERVICE_CONTEXT}]}}</>',
        '<lvl>{level:<8}</>',
        f'<c>{{file}}::{{function}}:{{line}}</>=><y>{{extra[{ExtraField.CALL_TARGET}]}}</>',
        '{message}',
        '<lk>{elapsed}</>',
        f'<lk>{{extra[{ExtraField.CHAIN_START_TIME}]:<18}}</>',
    )
)


# Configure logger
loguru_logger.remove()  # Remove default handler to avoid duplicate output and use custom format
custom_logger = loguru_logger.bind(
    **{
        ExtraField.SERVICE_CONTEXT: get_service_context(),
        ExtraField.CHAIN_START_TIME: '',
        ExtraField.CALL_TARGET: '',
    }
)

min_log_level = 'DEBUG' if settings.DEBUG else 'INFO'

custom_logger.add(sys.stdout, format=io_log_format, level=min_log_level, enqueue=True)

# File output only in DEBUG mode; production ships stdout
if settings.DEBUG:
    local_tz = zoneinfo.ZoneInfo(settings.TIMEZONE)
    now_local = datetime.now(local_tz)
    log_filename = (
        f'test_{now_local.strftime("%Y-%m-%d_%H")}.log'
        if os.environ.get('TEST_LOG_DIR')
        else f'{now_local.strftime("%Y-%m-%d_%H")}.log'
    )
    custom_logger.add(
        f'{LOG_DIR}/{log_filename}',
        format=io_log_format,
        rotation='1 hour',
        retention='7 days',
        compression='gz',
        enqueue=True,
        level=min_log_level,
    )

# Intercept standard logging → loguru
logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
