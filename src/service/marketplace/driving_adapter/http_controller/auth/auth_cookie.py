from typing import Optional

from fastapi import Response

from src.platform.config.core_setting import settings


def set_auth_cookies(
    response: Response,
    *,
    access_token: str,
    access_max_age: int,
    refresh_token: Optional[str] = None,
    refresh_max_age: Optional[int] = None,
) -> None:
    response.set_cookie(
        key=settings.ACCESS_TOKEN_COOKIE,
        value=access_token,
        max_age=access_max_age,
        httponly=True,
        samesite='lax',
        secure=settings.COOKIE_SECURE,
    )
    if refresh_token:
        response.set_cookie(
            key=settings.REFRESH_TOKEN_COOKIE,
            value=refresh_token,
            max_age=refresh_max_age,
            httponly=True,
            samesite='lax',
            secure=settings.COOKIE_SECURE,
        )


def clear_auth_cookies(response: Response) -> None:
    for key in (settings.ACCESS_TOKEN_COOKIE, settings.REFRESH_TOKEN_COOKIE):
        response.delete_cookie(key=key, httponly=True, samesite='lax', secure=settings.COOKIE_SECURE)
