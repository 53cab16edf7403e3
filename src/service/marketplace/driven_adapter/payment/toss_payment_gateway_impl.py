"""
Toss Payments client

confirm: POST {TOSS_API_URL}confirm
cancel:  POST {TOSS_API_URL}{paymentKey}/cancel

Auth is HTTP Basic with the secret key as username and an empty password.
"""

import base64
from typing import Any, Dict, Optional

import httpx
import orjson
import uuid_utils

from src.platform.config.core_setting import settings
from src.platform.exception.exceptions import ExternalServiceError
from src.platform.logging.loguru_io import Logger
from src.service.marketplace.app.dto.reservation_dto import PaymentConfirmation
from src.service.marketplace.app.interface.i_payment_gateway import IPaymentGateway


class TossPaymentGatewayImpl(IPaymentGateway):
    def __init__(
        self,
        *,
        api_url: Optional[str] = None,
        secret_key: Optional[str] = None,
        timeout_seconds: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.api_url = api_url or settings.TOSS_API_URL
        self.secret_key = secret_key or settings.TOSS_SECRET_KEY.get_secret_value()
        self.timeout_seconds = timeout_seconds or settings.PAYMENT_TIMEOUT_SECONDS
        self.transport = transport

    def _headers(self) -> Dict[str, str]:
        credentials = base64.b64encode(f'{self.secret_key}:'.encode('utf-8')).decode('utf-8')
        return {
            'Authorization': f'Basic {credentials}',
            'Content-Type': 'application/json',
            'Idempotency-Key': str(uuid_utils.uuid7()),
        }

    async def _post(self, path: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout_seconds, transport=self.transport
            ) as client:
                response = await client.post(
                    f'{self.api_url}{path}',
                    headers=self._headers(),
                    content=orjson.dumps(payload),
                )
        except httpx.HTTPError as e:
            Logger.base.error(f'💳 [TOSS] {path} transport failure: {e}')
            raise ExternalServiceError('PAYMENT_GATEWAY_UNAVAILABLE') from e

        try:
            body = orjson.loads(response.content) if response.content else {}
        except orjson.JSONDecodeError:
            body = {}

        if response.status_code >= 400:
            code = body.get('code', 'UNKNOWN')
            Logger.base.warning(
                f'💳 [TOSS] {path} rejected ({response.status_code}): '
                f'{code} {body.get("message", "")}'
            )
            raise ExternalServiceError(f'PAYMENT_GATEWAY_REJECTED: {code}')

        return body

    @Logger.io
    async def confirm(self, *, payment_key: str, order_id: str, amount: int) -> PaymentConfirmation:
        body = await self._post(
            'confirm', {'paymentKey': payment_key, 'orderId': order_id, 'amount': amount}
        )
        card = body.get('card') or {}
        receipt = body.get('receipt') or {}
        return PaymentConfirmation(
            payment_key=body.get('paymentKey', payment_key),
            order_id=body.get('orderId', order_id),
            status=body.get('status', ''),
            method=body.get('method'),
            card_company=card.get('company') or card.get('issuerCode'),
            receipt_url=receipt.get('url'),
            approved_at=body.get('approvedAt'),
        )

    @Logger.io
    async def cancel(
        self, *, payment_key: str, cancel_reason: str, cancel_amount: Optional[int]
    ) -> None:
        payload: Dict[str, Any] = {'cancelReason': cancel_reason}
        if cancel_amount is not None:
            payload['cancelAmount'] = cancel_amount
        await self._post(f'{payment_key}/cancel', payload)
