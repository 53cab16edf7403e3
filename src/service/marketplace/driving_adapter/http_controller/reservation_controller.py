from fastapi import APIRouter, Depends, Query, status
from opentelemetry import trace

from src.platform.logging.loguru_io import Logger
from src.service.marketplace.app.command.cancel_reservation_use_case import (
    CancelReservationUseCase,
)
from src.service.marketplace.app.command.create_reservation_use_case import (
    CreateReservationUseCase,
)
from src.service.marketplace.app.query.list_reservations_use_case import ListReservationsUseCase
from src.service.marketplace.domain.entity.user_entity import UserEntity
from src.service.marketplace.driving_adapter.http_controller.auth.role_auth import (
    get_current_user,
    require_advisor,
    require_user,
)
from src.service.marketplace.driving_adapter.http_controller.schema.page_schema import (
    PageResponse,
)
from src.service.marketplace.driving_adapter.http_controller.schema.reservation_schema import (
    CancelReservationRequest,
    CancelReservationResponse,
    CompleteReservationResponse,
    CreateReservationRequest,
    CreateReservationResponse,
    ReservationItemResponse,
)


router = APIRouter()
tracer = trace.get_tracer(__name__)


@router.post('', response_model=CreateReservationResponse, status_code=status.HTTP_201_CREATED)
@Logger.io
async def create_reservation(
    request: CreateReservationRequest,
    current_user: UserEntity = Depends(require_user),
    use_case: CreateReservationUseCase = Depends(CreateReservationUseCase.depends),
) -> CreateReservationResponse:
    with tracer.start_as_current_span('controller.create_reservation') as span:
        span.set_attribute('advisor_id', request.advisor_user_id)
        span.set_attribute('client_id', current_user.id or 0)
        span.set_attribute('slot', f'{request.date} {request.time}')

        reservation = await use_case.create_reservation(
            client_id=current_user.id or 0,
            advisor_id=request.advisor_user_id,
            day=request.date,
            time_text=request.time,
            request_message=request.request_message,
        )
        span.set_attribute('reservation_id', reservation.id or 0)

        return CreateReservationResponse(
            reservation_id=reservation.id or 0,
            scheduled_time=reservation.scheduled_at.isoformat(),
        )


@router.get('', response_model=PageResponse[ReservationItemResponse])
@Logger.io
async def list_reservations(
    page_no: int = Query(1, ge=1),
    page_size: int = Query(10, ge=1, le=50),
    current_user: UserEntity = Depends(get_current_user),
    use_case: ListReservationsUseCase = Depends(ListReservationsUseCase.depends),
) -> PageResponse[ReservationItemResponse]:
    """Advisors see consultations they give, users the ones they booked"""
    page = await use_case.list_reservations(
        current_user=current_user, page_no=page_no, page_size=page_size
    )
    return PageResponse[ReservationItemResponse].from_page(page, ReservationItemResponse.from_item)


@router.patch('/{reservation_id}/cancel', response_model=CancelReservationResponse)
@Logger.io
async def cancel_reservation(
    reservation_id: int,
    request: CancelReservationRequest,
    current_user: UserEntity = Depends(get_current_user),
    use_case: CancelReservationUseCase = Depends(CancelReservationUseCase.depends),
) -> CancelReservationResponse:
    with tracer.start_as_current_span('controller.cancel_reservation') as span:
        span.set_attribute('reservation_id', reservation_id)
        span.set_attribute('user_id', current_user.id or 0)

        canceled = await use_case.cancel(
            reservation_id=reservation_id,
            current_user=current_user,
            cancel_reason=request.cancel_reason,
            cancel_memo=request.cancel_memo,
        )
        return CancelReservationResponse(
            reservation_id=canceled.id or 0, canceled_at=canceled.canceled_at
        )


@router.patch('/{reservation_id}/complete', response_model=CompleteReservationResponse)
@Logger.io
async def complete_reservation(
    reservation_id: int,
    current_user: UserEntity = Depends(require_advisor),
    use_case: CancelReservationUseCase = Depends(CancelReservationUseCase.depends),
) -> CompleteReservationResponse:
    completed = await use_case.complete(
        reservation_id=reservation_id, advisor_id=current_user.id or 0
    )
    return CompleteReservationResponse(reservation_id=completed.id or 0, status=completed.status)
