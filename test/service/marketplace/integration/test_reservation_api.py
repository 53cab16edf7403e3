from fastapi.testclient import TestClient
import pytest

from test.shared.utils import login_user, next_weekday, next_weekend_day, signup_advisor
from test.util_constant import (
    ADVISOR_BASE,
    ADVISOR_BLOCKED_TIMES,
    ANOTHER_USER_LOGIN_ID,
    NOTIFICATION_BASE,
    RESERVATION_BASE,
    TEST_ADVISOR_LOGIN_ID,
    TEST_ADVISOR_NAME,
    TEST_USER_LOGIN_ID,
    TEST_USER_NAME,
)


def _reservation_body(advisor_id: int, day, time: str = '10:00') -> dict:
    return {
        'advisor_user_id': advisor_id,
        'date': day.isoformat(),
        'time': time,
        'request_message': 'Portfolio review',
    }


@pytest.mark.integration
class TestCreateReservationAPI:
    def test_book_slot(self, client: TestClient, approved_advisor, test_user):
        day = next_weekday()
        login_user(client, TEST_USER_LOGIN_ID)

        body = _reservation_body(approved_advisor['user_id'], day)
        response = client.post(RESERVATION_BASE, json=body)

        assert response.status_code == 201
        data = response.json()
        assert data['reservation_id'] > 0
        assert data['scheduled_time'] == f'{day.isoformat()}T10:00:00+09:00'

    def test_booking_notifies_advisor(self, client: TestClient, book_reservation):
        booked = book_reservation(next_weekday())

        login_user(client, TEST_ADVISOR_LOGIN_ID)
        notifications = client.get(NOTIFICATION_BASE).json()['content']

        created = [n for n in notifications if n['type'] == 'RESERVATION_CREATED']
        assert len(created) == 1
        assert created[0]['related_id'] == booked['reservation_id']
        assert TEST_USER_NAME in created[0]['message']

    def test_same_slot_twice_is_conflict(
        self, client: TestClient, approved_advisor, book_reservation, another_user
    ):
        day = next_weekday()
        book_reservation(day)
        login_user(client, ANOTHER_USER_LOGIN_ID)

        body = _reservation_body(approved_advisor['user_id'], day)
        response = client.post(RESERVATION_BASE, json=body)

        assert response.status_code == 409
        assert response.json()['detail'] == 'TIME_SLOT_ALREADY_RESERVED'

    def test_blocked_slot_is_conflict(self, client: TestClient, approved_advisor, test_user):
        day = next_weekday()
        login_user(client, TEST_ADVISOR_LOGIN_ID)
        client.put(
            ADVISOR_BLOCKED_TIMES,
            params={'date': day.isoformat()},
            json={'blocked_times': ['10:00']},
        )
        login_user(client, TEST_USER_LOGIN_ID)

        body = _reservation_body(approved_advisor['user_id'], day)
        response = client.post(RESERVATION_BASE, json=body)

        assert response.status_code == 409
        assert response.json()['detail'] == 'BLOCKED_TIME_SLOT'

    def test_weekend_is_rejected(self, client: TestClient, approved_advisor, test_user):
        login_user(client, TEST_USER_LOGIN_ID)

        response = client.post(
            RESERVATION_BASE,
            json=_reservation_body(approved_advisor['user_id'], next_weekend_day()),
        )

        assert response.status_code == 400
        assert response.json()['detail'] == 'WEEKEND_NOT_ALLOWED'

    def test_last_slot_cannot_be_booked(self, client: TestClient, approved_advisor, test_user):
        login_user(client, TEST_USER_LOGIN_ID)

        response = client.post(
            RESERVATION_BASE,
            json=_reservation_body(approved_advisor['user_id'], next_weekday(), time='20:00'),
        )

        assert response.status_code == 400
        assert response.json()['detail'] == 'INVALID_RESERVATION_TIME'

    def test_unapproved_advisor_is_not_found(self, client: TestClient, test_user):
        pending = signup_advisor(client)
        login_user(client, TEST_USER_LOGIN_ID)

        body = _reservation_body(pending['user_id'], next_weekday())
        response = client.post(RESERVATION_BASE, json=body)

        assert response.status_code == 404

    def test_advisor_cannot_book(self, client: TestClient, approved_advisor):
        login_user(client, TEST_ADVISOR_LOGIN_ID)

        body = _reservation_body(approved_advisor['user_id'], next_weekday())
        response = client.post(RESERVATION_BASE, json=body)

        assert response.status_code == 403

    def test_reserved_slot_shows_unavailable(
        self, client: TestClient, approved_advisor, book_reservation
    ):
        day = next_weekday()
        book_reservation(day, time='14:00')

        response = client.get(
            f'{ADVISOR_BASE}/{approved_advisor["user_id"]}/available-times',
            params={'date': day.isoformat()},
        )

        slots = {slot['time']: slot for slot in response.json()['slots']}
        assert slots['14:00']['is_reserved'] is True
        assert slots['14:00']['is_available'] is False


@pytest.mark.integration
class TestListReservationsAPI:
    def test_user_and_advisor_see_each_other(self, client: TestClient, book_reservation):
        booked = book_reservation(next_weekday())

        user_view = client.get(RESERVATION_BASE).json()['content']
        login_user(client, TEST_ADVISOR_LOGIN_ID)
        advisor_view = client.get(RESERVATION_BASE).json()['content']

        assert user_view[0]['reservation_id'] == booked['reservation_id']
        assert user_view[0]['counterpart_name'] == TEST_ADVISOR_NAME
        assert user_view[0]['status'] == 'PENDING'
        assert user_view[0]['can_cancel'] is True
        assert advisor_view[0]['counterpart_name'] == TEST_USER_NAME


@pytest.mark.integration
class TestCancelReservationAPI:
    def test_cancel_frees_slot_and_notifies_advisor(
        self, client: TestClient, approved_advisor, book_reservation
    ):
        day = next_weekday()
        booked = book_reservation(day)

        response = client.patch(
            f'{RESERVATION_BASE}/{booked["reservation_id"]}/cancel',
            json={'cancel_reason': 'SCHEDULE_CHANGE', 'cancel_memo': 'Business trip'},
        )

        assert response.status_code == 200
        assert response.json()['message'] == 'reservation canceled'

        # The slot is bookable again
        body = _reservation_body(approved_advisor['user_id'], day)
        rebook = client.post(RESERVATION_BASE, json=body)
        assert rebook.status_code == 201

        login_user(client, TEST_ADVISOR_LOGIN_ID)
        types = [n['type'] for n in client.get(NOTIFICATION_BASE).json()['content']]
        assert 'RESERVATION_CANCELED' in types

    def test_cancel_twice(self, client: TestClient, book_reservation):
        booked = book_reservation(next_weekday())
        url = f'{RESERVATION_BASE}/{booked["reservation_id"]}/cancel'
        client.patch(url, json={'cancel_reason': 'PERSONAL_REASON'})

        response = client.patch(url, json={'cancel_reason': 'PERSONAL_REASON'})

        assert response.status_code == 400
        assert response.json()['detail'] == 'ALREADY_CANCELED'

    def test_outsider_cannot_cancel(self, client: TestClient, book_reservation, another_user):
        booked = book_reservation(next_weekday())
        login_user(client, ANOTHER_USER_LOGIN_ID)

        response = client.patch(
            f'{RESERVATION_BASE}/{booked["reservation_id"]}/cancel',
            json={'cancel_reason': 'PERSONAL_REASON'},
        )

        assert response.status_code == 403
        assert response.json()['detail'] == 'NOT_RESERVATION_PARTICIPANT'

    def test_advisor_can_cancel_and_client_is_notified(self, client: TestClient, book_reservation):
        booked = book_reservation(next_weekday())
        login_user(client, TEST_ADVISOR_LOGIN_ID)

        response = client.patch(
            f'{RESERVATION_BASE}/{booked["reservation_id"]}/cancel',
            json={'cancel_reason': 'HEALTH_ISSUE'},
        )
        assert response.status_code == 200

        login_user(client, TEST_USER_LOGIN_ID)
        notifications = client.get(NOTIFICATION_BASE).json()['content']
        assert notifications[0]['type'] == 'RESERVATION_CANCELED'
        assert 'HEALTH_ISSUE' in notifications[0]['message']

    def test_completed_reservation_cannot_be_canceled(
        self, client: TestClient, completed_reservation
    ):
        login_user(client, TEST_USER_LOGIN_ID)

        response = client.patch(
            f'{RESERVATION_BASE}/{completed_reservation["reservation_id"]}/cancel',
            json={'cancel_reason': 'PERSONAL_REASON'},
        )

        assert response.status_code == 400
        assert response.json()['detail'] == 'NOT_CANCELABLE'
