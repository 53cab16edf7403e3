from fastapi import APIRouter, Depends, status
from opentelemetry import trace

from src.platform.logging.loguru_io import Logger
from src.service.marketplace.app.command.payment_use_case import PaymentUseCase
from src.service.marketplace.domain.entity.user_entity import UserEntity
from src.service.marketplace.driving_adapter.http_controller.auth.role_auth import (
    get_current_user,
    require_user,
)
from src.service.marketplace.driving_adapter.http_controller.schema.payment_schema import (
    CancelPaymentRequest,
    ConfirmPaymentRequest,
    PaymentResultResponse,
    PreparePaymentRequest,
    PreparePaymentResponse,
)


router = APIRouter()
tracer = trace.get_tracer(__name__)


@router.post('/prepare', response_model=PreparePaymentResponse, status_code=status.HTTP_201_CREATED)
@Logger.io
async def prepare_payment(
    request: PreparePaymentRequest,
    current_user: UserEntity = Depends(require_user),
    use_case: PaymentUseCase = Depends(PaymentUseCase.depends),
) -> PreparePaymentResponse:
    with tracer.start_as_current_span('controller.prepare_payment') as span:
        span.set_attribute('advisor_id', request.advisor_user_id)
        span.set_attribute('client_id', current_user.id or 0)

        prepared = await use_case.prepare(
            client_id=current_user.id or 0,
            advisor_id=request.advisor_user_id,
            day=request.date,
            time_text=request.time,
            request_message=request.request_message,
        )
        span.set_attribute('order_id', prepared.order_id)
        return PreparePaymentResponse.from_dto(prepared)


@router.post('/confirm', response_model=PaymentResultResponse)
@Logger.io
async def confirm_payment(
    request: ConfirmPaymentRequest,
    current_user: UserEntity = Depends(get_current_user),
    use_case: PaymentUseCase = Depends(PaymentUseCase.depends),
) -> PaymentResultResponse:
    with tracer.start_as_current_span('controller.confirm_payment') as span:
        span.set_attribute('order_id', request.order_id)
        span.set_attribute('amount', request.amount)

        reservation = await use_case.confirm(
            client=current_user,
            payment_key=request.payment_key,
            order_id=request.order_id,
            amount=request.amount,
        )
        return PaymentResultResponse.from_entity(reservation)


@router.post('/{order_id}/cancel', response_model=PaymentResultResponse)
@Logger.io
async def cancel_payment(
    order_id: str,
    request: CancelPaymentRequest,
    current_user: UserEntity = Depends(get_current_user),
    use_case: PaymentUseCase = Depends(PaymentUseCase.depends),
) -> PaymentResultResponse:
    with tracer.start_as_current_span('controller.cancel_payment') as span:
        span.set_attribute('order_id', order_id)

        reservation = await use_case.cancel(
            client=current_user,
            order_id=order_id,
            cancel_reason=request.cancel_reason,
            cancel_amount=request.cancel_amount,
        )
        return PaymentResultResponse.from_entity(reservation)
