from datetime import date, datetime, timedelta
from typing import Any, Callable, Dict, Optional
from zoneinfo import ZoneInfo

from fastapi.testclient import TestClient

from src.platform.config.core_setting import settings
from test.util_constant import (
    ADMIN_ADVISOR_REQUESTS,
    ADVISOR_PROFILE,
    AUTH_LOGIN,
    AUTH_SIGNUP,
    AUTH_SIGNUP_ADVISOR,
    DEFAULT_PASSWORD,
    TEST_ADMIN_LOGIN_ID,
    TEST_ADMIN_NAME,
    TEST_ADMIN_NICKNAME,
    TEST_ADVISOR_LOGIN_ID,
    TEST_ADVISOR_NAME,
    TEST_ADVISOR_NICKNAME,
    TEST_CERTIFICATE,
    TEST_PROFILE,
)


def assert_response_status(response, expected_status: int, message: str | None = None):
    response_text = getattr(response, 'text', getattr(response, 'content', 'N/A'))
    assert response.status_code == expected_status, (
        message or f'Expected {expected_status}, got {response.status_code}: {response_text}'
    )


def signup_payload(*, login_id: str, name: str, nickname: str) -> Dict[str, Any]:
    return {
        'user_id': login_id,
        'name': name,
        'nickname': nickname,
        'password': DEFAULT_PASSWORD,
        'password_confirm': DEFAULT_PASSWORD,
        'contact': '01012345678',
        'email': f'{login_id}@example.com',
        'agreed_terms': True,
        'agreed_privacy': True,
    }


def signup_user(client: TestClient, *, login_id: str, name: str, nickname: str) -> Dict[str, Any]:
    response = client.post(
        AUTH_SIGNUP, json=signup_payload(login_id=login_id, name=name, nickname=nickname)
    )
    assert_response_status(response, 201, f'Failed to sign up {login_id}')
    return response.json()


def signup_advisor(
    client: TestClient,
    *,
    login_id: str = TEST_ADVISOR_LOGIN_ID,
    name: str = TEST_ADVISOR_NAME,
    nickname: str = TEST_ADVISOR_NICKNAME,
) -> Dict[str, Any]:
    payload = {
        **signup_payload(login_id=login_id, name=name, nickname=nickname),
        **TEST_CERTIFICATE,
    }
    response = client.post(AUTH_SIGNUP_ADVISOR, json=payload)
    assert_response_status(response, 201, f'Failed to sign up advisor {login_id}')
    return response.json()


def login_user(client: TestClient, login_id: str, password: str = DEFAULT_PASSWORD) -> Any:
    """Log in and keep the auth cookies on the client (previous user's cookies are dropped)"""
    client.cookies.clear()
    login_response = client.post(AUTH_LOGIN, json={'user_id': login_id, 'password': password})
    assert login_response.status_code == 200, f'Login failed: {login_response.text}'
    return login_response


def create_admin(
    client: TestClient, execute_sql_statement: Callable[..., Any]
) -> Dict[str, Any]:
    """There is no admin signup; promote a fresh user in the database"""
    admin = signup_user(
        client, login_id=TEST_ADMIN_LOGIN_ID, name=TEST_ADMIN_NAME, nickname=TEST_ADMIN_NICKNAME
    )
    execute_sql_statement(
        "UPDATE users SET role = 'admin' WHERE id = :id", {'id': admin['id']}
    )
    return {**admin, 'role': 'admin'}


def approve_advisor(client: TestClient, *, admin_login_id: str, request_id: int) -> Dict[str, Any]:
    login_user(client, admin_login_id)
    response = client.post(f'{ADMIN_ADVISOR_REQUESTS}/{request_id}/approve')
    assert_response_status(response, 200, f'Failed to approve request {request_id}')
    client.cookies.clear()
    return response.json()


def create_approved_advisor(
    client: TestClient,
    execute_sql_statement: Callable[..., Any],
    *,
    admin: Optional[Dict[str, Any]] = None,
    login_id: str = TEST_ADVISOR_LOGIN_ID,
    name: str = TEST_ADVISOR_NAME,
    nickname: str = TEST_ADVISOR_NICKNAME,
    with_profile: bool = True,
) -> Dict[str, Any]:
    """Advisor signup -> admin approval -> profile; returns the advisor signup body"""
    advisor = signup_advisor(client, login_id=login_id, name=name, nickname=nickname)
    admin = admin or create_admin(client, execute_sql_statement)
    approve_advisor(
        client, admin_login_id=admin['user_id'], request_id=advisor['approval_request_id']
    )

    if with_profile:
        login_user(client, login_id)
        response = client.post(ADVISOR_PROFILE, json=TEST_PROFILE)
        assert_response_status(response, 201, 'Failed to create advisor profile')
        client.cookies.clear()

    return advisor


def next_weekday(min_days_ahead: int = 2) -> date:
    """First Monday-Friday at least `min_days_ahead` days after today (business timezone)"""
    day = datetime.now(ZoneInfo(settings.TIMEZONE)).date() + timedelta(days=min_days_ahead)
    while day.weekday() >= 5:
        day += timedelta(days=1)
    return day


def next_weekend_day() -> date:
    day = datetime.now(ZoneInfo(settings.TIMEZONE)).date() + timedelta(days=1)
    while day.weekday() != 5:
        day += timedelta(days=1)
    return day
