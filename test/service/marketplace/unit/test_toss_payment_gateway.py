"""
Unit tests for the Toss Payments client

Requests go through httpx.MockTransport, so no network is involved.
"""

import base64
import json

import httpx
import pytest

from src.platform.exception.exceptions import ExternalServiceError
from src.service.marketplace.driven_adapter.payment.toss_payment_gateway_impl import (
    TossPaymentGatewayImpl,
)


API_URL = 'https://toss.test/v1/payments/'
SECRET_KEY = 'test_sk_unit'


def _gateway(handler) -> TossPaymentGatewayImpl:
    return TossPaymentGatewayImpl(
        api_url=API_URL,
        secret_key=SECRET_KEY,
        timeout_seconds=1,
        transport=httpx.MockTransport(handler),
    )


@pytest.mark.unit
class TestTossPaymentGateway:
    @pytest.mark.asyncio
    async def test_confirm_maps_response(self):
        requests: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(
                200,
                json={
                    'paymentKey': 'pay_key',
                    'orderId': 'CONSULT_1',
                    'status': 'DONE',
                    'method': 'CARD',
                    'card': {'company': 'SHINHAN'},
                    'receipt': {'url': 'https://receipt.test/1'},
                    'approvedAt': '2026-10-19T10:00:00+09:00',
                },
            )

        confirmation = await _gateway(handler).confirm(
            payment_key='pay_key', order_id='CONSULT_1', amount=50000
        )

        assert confirmation.status == 'DONE'
        assert confirmation.card_company == 'SHINHAN'
        assert confirmation.receipt_url == 'https://receipt.test/1'

        [request] = requests
        assert str(request.url) == f'{API_URL}confirm'
        expected_auth = base64.b64encode(f'{SECRET_KEY}:'.encode('utf-8')).decode('utf-8')
        assert request.headers['Authorization'] == f'Basic {expected_auth}'
        assert request.headers['Idempotency-Key']
        assert json.loads(request.content) == {
            'paymentKey': 'pay_key',
            'orderId': 'CONSULT_1',
            'amount': 50000,
        }

    @pytest.mark.asyncio
    async def test_rejection_carries_gateway_code(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                400, json={'code': 'INVALID_CARD_COMPANY', 'message': 'Card not supported'}
            )

        with pytest.raises(ExternalServiceError) as exc_info:
            await _gateway(handler).confirm(payment_key='k', order_id='o', amount=1000)

        assert exc_info.value.message == 'PAYMENT_GATEWAY_REJECTED: INVALID_CARD_COMPANY'

    @pytest.mark.asyncio
    async def test_transport_failure(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError('connection refused', request=request)

        with pytest.raises(ExternalServiceError) as exc_info:
            await _gateway(handler).confirm(payment_key='k', order_id='o', amount=1000)

        assert exc_info.value.message == 'PAYMENT_GATEWAY_UNAVAILABLE'

    @pytest.mark.asyncio
    async def test_cancel_posts_reason_and_amount(self):
        requests: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(200, json={'status': 'CANCELED'})

        await _gateway(handler).cancel(
            payment_key='pay_key', cancel_reason='Change of plans', cancel_amount=20000
        )

        [request] = requests
        assert str(request.url) == f'{API_URL}pay_key/cancel'
        assert json.loads(request.content) == {
            'cancelReason': 'Change of plans',
            'cancelAmount': 20000,
        }
