from typing import Any

from fastapi.testclient import TestClient
import pytest

from test.shared.utils import (
    assert_response_status,
    create_approved_advisor,
    login_user,
    next_weekday,
)
from test.util_constant import RESERVATION_BASE, TEST_ADVISOR_LOGIN_ID, TEST_USER_LOGIN_ID


@pytest.fixture
def approved_advisor(client: TestClient, execute_sql_statement) -> dict[str, Any]:
    """Approved advisor with a completed profile (fee 50000)"""
    return create_approved_advisor(client, execute_sql_statement)


@pytest.fixture
def book_reservation(client: TestClient, approved_advisor, test_user):
    """Book `time` on `day` as the test user; returns the create response body"""

    def _book(day, time: str = '10:00', message: str = 'Portfolio review') -> dict[str, Any]:
        login_user(client, TEST_USER_LOGIN_ID)
        response = client.post(
            RESERVATION_BASE,
            json={
                'advisor_user_id': approved_advisor['user_id'],
                'date': day.isoformat(),
                'time': time,
                'request_message': message,
            },
        )
        assert_response_status(response, 201, 'Failed to book reservation')
        return response.json()

    return _book


@pytest.fixture
def completed_reservation(client: TestClient, book_reservation) -> dict[str, Any]:
    booked = book_reservation(next_weekday())
    login_user(client, TEST_ADVISOR_LOGIN_ID)
    response = client.patch(f'{RESERVATION_BASE}/{booked["reservation_id"]}/complete')
    assert_response_status(response, 200, 'Failed to complete reservation')
    client.cookies.clear()
    return booked
