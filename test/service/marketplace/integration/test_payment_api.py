from unittest.mock import patch

from fastapi.testclient import TestClient
import pytest

from src.platform.config.core_setting import settings
from test.shared.utils import login_user, next_weekday
from test.util_constant import (
    ADVISOR_BASE,
    ANOTHER_USER_LOGIN_ID,
    NOTIFICATION_BASE,
    PAYMENT_CONFIRM,
    PAYMENT_PREPARE,
    RESERVATION_BASE,
    TEST_ADVISOR_LOGIN_ID,
    TEST_PROFILE,
    TEST_USER_LOGIN_ID,
)


@pytest.fixture
def prepared_order(client: TestClient, approved_advisor, test_user) -> dict:
    login_user(client, TEST_USER_LOGIN_ID)
    response = client.post(
        PAYMENT_PREPARE,
        json={
            'advisor_user_id': approved_advisor['user_id'],
            'date': next_weekday().isoformat(),
            'time': '15:00',
            'request_message': 'Retirement plan',
        },
    )
    assert response.status_code == 201, response.text
    return response.json()


def _confirm(client: TestClient, order: dict, amount: int | None = None):
    return client.post(
        PAYMENT_CONFIRM,
        json={
            'payment_key': 'tgen_test_key',
            'order_id': order['order_id'],
            'amount': amount if amount is not None else order['amount'],
        },
    )


@pytest.mark.integration
class TestPreparePaymentAPI:
    def test_prepare_returns_checkout_data(
        self, client: TestClient, approved_advisor, test_user, prepared_order
    ):
        assert prepared_order['amount'] == TEST_PROFILE['consultation_fee']
        assert prepared_order['order_id'].startswith(f'{settings.PAYMENT_ORDER_PREFIX}_')
        assert prepared_order['order_id'].endswith(
            f'_{test_user["id"]}_{approved_advisor["user_id"]}'
        )
        assert prepared_order['customer_email'] == test_user['email']
        assert prepared_order['client_key'] == settings.TOSS_CLIENT_KEY
        assert prepared_order['success_url'] == settings.PAYMENT_SUCCESS_URL

    def test_back_to_back_orders_get_distinct_ids(
        self, client: TestClient, approved_advisor, prepared_order
    ):
        response = client.post(
            PAYMENT_PREPARE,
            json={
                'advisor_user_id': approved_advisor['user_id'],
                'date': next_weekday().isoformat(),
                'time': '16:00',
                'request_message': 'Follow-up',
            },
        )

        assert response.status_code == 201
        assert response.json()['order_id'] != prepared_order['order_id']

    def test_order_id_collision_is_not_a_slot_conflict(
        self, client: TestClient, approved_advisor, prepared_order
    ):
        with patch(
            'src.service.marketplace.app.command.payment_use_case.build_order_id',
            return_value=prepared_order['order_id'],
        ):
            response = client.post(
                PAYMENT_PREPARE,
                json={
                    'advisor_user_id': approved_advisor['user_id'],
                    'date': next_weekday().isoformat(),
                    'time': '16:00',
                    'request_message': 'Follow-up',
                },
            )

        assert response.status_code == 409
        assert response.json()['detail'] == 'DUPLICATE_ORDER_ID'
        reservations = client.get(RESERVATION_BASE).json()['content']
        assert [r['reservation_id'] for r in reservations] == [prepared_order['reservation_id']]

    def test_prepared_order_holds_the_slot(
        self, client: TestClient, approved_advisor, prepared_order
    ):
        reservations = client.get(RESERVATION_BASE).json()['content']

        assert reservations[0]['reservation_id'] == prepared_order['reservation_id']
        assert reservations[0]['payment_status'] == 'PENDING'


@pytest.mark.integration
class TestConfirmPaymentAPI:
    def test_confirm_marks_paid_and_notifies_advisor(
        self, client: TestClient, prepared_order, payment_gateway
    ):
        response = _confirm(client, prepared_order)

        assert response.status_code == 200
        data = response.json()
        assert data['payment_status'] == 'PAID'
        assert data['status'] == 'PENDING'
        assert data['payment_method'] == 'CARD'
        assert payment_gateway.confirmed == [prepared_order['order_id']]

        login_user(client, TEST_ADVISOR_LOGIN_ID)
        notifications = client.get(NOTIFICATION_BASE).json()['content']
        assert [n['type'] for n in notifications] == ['RESERVATION_CREATED']
        assert notifications[0]['related_id'] == prepared_order['reservation_id']

    def test_amount_mismatch(self, client: TestClient, prepared_order):
        response = _confirm(client, prepared_order, amount=1000)

        assert response.status_code == 400
        assert response.json()['detail'] == 'PAYMENT_AMOUNT_MISMATCH'

    def test_other_user_cannot_confirm(self, client: TestClient, prepared_order, another_user):
        login_user(client, ANOTHER_USER_LOGIN_ID)

        response = _confirm(client, prepared_order)

        assert response.status_code == 403
        assert response.json()['detail'] == 'NOT_ORDER_OWNER'

    def test_confirm_twice_is_conflict(self, client: TestClient, prepared_order):
        _confirm(client, prepared_order)

        response = _confirm(client, prepared_order)

        assert response.status_code == 409
        assert response.json()['detail'] == 'ALREADY_PROCESSED'

    def test_gateway_failure_releases_the_slot(
        self, client: TestClient, approved_advisor, prepared_order, payment_gateway
    ):
        payment_gateway.fail_next_confirm = True

        response = _confirm(client, prepared_order)

        assert response.status_code == 502
        assert response.json()['detail'] == 'PAYMENT_CONFIRM_FAILED'
        assert client.get(RESERVATION_BASE).json()['content'] == []

    def test_unknown_order(self, client: TestClient, test_user):
        login_user(client, TEST_USER_LOGIN_ID)

        response = _confirm(client, {'order_id': 'CONSULT_missing', 'amount': 30000})

        assert response.status_code == 404


@pytest.mark.integration
class TestCancelPaymentAPI:
    def test_cancel_paid_order_refunds(
        self, client: TestClient, approved_advisor, prepared_order, payment_gateway
    ):
        _confirm(client, prepared_order)

        response = client.post(
            f'/api/payments/{prepared_order["order_id"]}/cancel',
            json={'cancel_reason': 'Change of plans'},
        )

        assert response.status_code == 200
        data = response.json()
        assert data['status'] == 'CANCELED'
        assert data['payment_status'] == 'CANCELED'
        assert payment_gateway.canceled == ['tgen_test_key']

        # Slot is open again
        available = client.get(
            f'{ADVISOR_BASE}/{approved_advisor["user_id"]}/available-times',
            params={'date': next_weekday().isoformat()},
        ).json()
        slot = next(s for s in available['slots'] if s['time'] == '15:00')
        assert slot['is_available'] is True

    def test_cancel_unpaid_order_skips_gateway(
        self, client: TestClient, prepared_order, payment_gateway
    ):
        response = client.post(
            f'/api/payments/{prepared_order["order_id"]}/cancel',
            json={'cancel_reason': 'Changed my mind'},
        )

        assert response.status_code == 200
        assert response.json()['status'] == 'CANCELED'
        assert payment_gateway.canceled == []

    def test_canceled_order_cannot_be_confirmed(
        self, client: TestClient, prepared_order, payment_gateway
    ):
        client.post(
            f'/api/payments/{prepared_order["order_id"]}/cancel',
            json={'cancel_reason': 'Changed my mind'},
        )

        response = _confirm(client, prepared_order)

        assert response.status_code == 409
        assert response.json()['detail'] == 'ALREADY_PROCESSED'
        assert payment_gateway.confirmed == []
        [reservation] = client.get(RESERVATION_BASE).json()['content']
        assert reservation['status'] == 'CANCELED'
        assert reservation['payment_status'] == 'PENDING'
