from datetime import date, time
from typing import AsyncContextManager, Callable, List, Optional

from sqlalchemy import delete, exists, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.exception.exceptions import ConflictError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.marketplace_metrics import marketplace_metrics
from src.service.marketplace.app.dto.reservation_dto import ReservationWithCounterpart
from src.service.marketplace.app.interface.i_reservation_repo import IReservationRepo
from src.service.marketplace.domain.entity.reservation_entity import (
    CancelReason,
    PaymentStatus,
    Reservation,
    ReservationStatus,
)
from src.service.marketplace.driven_adapter.model.reservation_model import ReservationModel
from src.service.marketplace.driven_adapter.model.user_model import UserModel


def _is_order_id_violation(error: IntegrityError) -> bool:
    return 'order_id' in str(error.orig)


_MUTABLE_FIELDS = (
    'request_message',
    'amount',
    'order_id',
    'payment_key',
    'payment_method',
    'card_company',
    'receipt_url',
    'paid_at',
    'cancel_memo',
    'canceled_at',
    'canceled_by',
)


class ReservationRepoImpl(IReservationRepo):
    def __init__(self, session_factory: Callable[..., AsyncContextManager[AsyncSession]]):
        self.session_factory = session_factory

    @staticmethod
    def _model_to_entity(reservation_model: ReservationModel) -> Reservation:
        return Reservation(
            id=reservation_model.id,
            client_id=reservation_model.client_id,
            advisor_id=reservation_model.advisor_id,
            date=reservation_model.date,
            start_time=reservation_model.start_time,
            end_time=reservation_model.end_time,
            request_message=reservation_model.request_message,
            status=ReservationStatus(reservation_model.status),
            payment_status=PaymentStatus(reservation_model.payment_status),
            amount=reservation_model.amount,
            order_id=reservation_model.order_id,
            payment_key=reservation_model.payment_key,
            payment_method=reservation_model.payment_method,
            card_company=reservation_model.card_company,
            receipt_url=reservation_model.receipt_url,
            paid_at=reservation_model.paid_at,
            cancel_reason=CancelReason(reservation_model.cancel_reason)
            if reservation_model.cancel_reason
            else None,
            cancel_memo=reservation_model.cancel_memo,
            canceled_at=reservation_model.canceled_at,
            canceled_by=reservation_model.canceled_by,
            created_at=reservation_model.created_at,
        )

    @Logger.io
    async def create(self, reservation: Reservation) -> Reservation:
        async with self.session_factory() as session:
            reservation_model = ReservationModel(
                client_id=reservation.client_id,
                advisor_id=reservation.advisor_id,
                date=reservation.date,
                start_time=reservation.start_time,
                end_time=reservation.end_time,
                request_message=reservation.request_message,
                status=reservation.status.value,
                payment_status=reservation.payment_status.value,
                amount=reservation.amount,
                order_id=reservation.order_id,
            )
            session.add(reservation_model)
            try:
                await session.commit()
            except IntegrityError as e:
                await session.rollback()
                if _is_order_id_violation(e):
                    raise ConflictError('DUPLICATE_ORDER_ID') from e
                # Lost the race for the slot to a concurrent request
                marketplace_metrics.slot_conflicts.labels(reason='race').inc()
                raise ConflictError('TIME_SLOT_ALREADY_RESERVED') from e

            await session.refresh(reservation_model)
            return self._model_to_entity(reservation_model)

    @Logger.io
    async def get_by_id(self, reservation_id: int) -> Optional[Reservation]:
        async with self.session_factory() as session:
            reservation_model = await session.get(ReservationModel, reservation_id)
            return self._model_to_entity(reservation_model) if reservation_model else None

    @Logger.io
    async def get_by_order_id(self, order_id: str) -> Optional[Reservation]:
        async with self.session_factory() as session:
            result = await session.execute(
                select(ReservationModel).where(ReservationModel.order_id == order_id)
            )
            reservation_model = result.scalar_one_or_none()
            return self._model_to_entity(reservation_model) if reservation_model else None

    @Logger.io
    async def update(self, reservation: Reservation) -> Reservation:
        async with self.session_factory() as session:
            reservation_model = await session.get(ReservationModel, reservation.id)
            if not reservation_model:
                raise NotFoundError('Reservation not found')

            for field in _MUTABLE_FIELDS:
                setattr(reservation_model, field, getattr(reservation, field))
            reservation_model.status = reservation.status.value
            reservation_model.payment_status = reservation.payment_status.value
            reservation_model.cancel_reason = (
                reservation.cancel_reason.value if reservation.cancel_reason else None
            )

            await session.commit()
            await session.refresh(reservation_model)
            return self._model_to_entity(reservation_model)

    @Logger.io
    async def delete(self, reservation_id: int) -> None:
        async with self.session_factory() as session:
            await session.execute(delete(ReservationModel).where(ReservationModel.id == reservation_id))
            await session.commit()

    @Logger.io
    async def exists_active_slot(self, *, advisor_id: int, day: date, start_time: time) -> bool:
        async with self.session_factory() as session:
            result = await session.execute(
                select(
                    exists().where(
                        ReservationModel.advisor_id == advisor_id,
                        ReservationModel.date == day,
                        ReservationModel.start_time == start_time,
                        ReservationModel.status != ReservationStatus.CANCELED.value,
                    )
                )
            )
            return bool(result.scalar())

    @Logger.io
    async def list_reserved_times(self, *, advisor_id: int, day: date) -> List[time]:
        async with self.session_factory() as session:
            result = await session.execute(
                select(ReservationModel.start_time).where(
                    ReservationModel.advisor_id == advisor_id,
                    ReservationModel.date == day,
                    ReservationModel.status != ReservationStatus.CANCELED.value,
                )
            )
            return list(result.scalars().all())

    async def _list_with_counterpart(
        self, *, owner_column, counterpart_column, owner_id: int, offset: int, limit: int
    ) -> List[ReservationWithCounterpart]:
        async with self.session_factory() as session:
            result = await session.execute(
                select(ReservationModel, UserModel.name)
                .join(UserModel, UserModel.id == counterpart_column)
                .where(owner_column == owner_id)
                .order_by(
                    ReservationModel.date.desc(),
                    ReservationModel.start_time.desc(),
                    ReservationModel.id.desc(),
                )
                .offset(offset)
                .limit(limit)
            )
            return [
                ReservationWithCounterpart(
                    reservation=self._model_to_entity(reservation_model),
                    counterpart_name=counterpart_name,
                )
                for reservation_model, counterpart_name in result.all()
            ]

    @Logger.io
    async def list_for_client(
        self, *, client_id: int, offset: int, limit: int
    ) -> List[ReservationWithCounterpart]:
        return await self._list_with_counterpart(
            owner_column=ReservationModel.client_id,
            counterpart_column=ReservationModel.advisor_id,
            owner_id=client_id,
            offset=offset,
            limit=limit,
        )

    @Logger.io
    async def list_for_advisor(
        self, *, advisor_id: int, offset: int, limit: int
    ) -> List[ReservationWithCounterpart]:
        return await self._list_with_counterpart(
            owner_column=ReservationModel.advisor_id,
            counterpart_column=ReservationModel.client_id,
            owner_id=advisor_id,
            offset=offset,
            limit=limit,
        )
