from abc import ABC, abstractmethod
from datetime import date, time
from typing import List, Optional

from src.service.marketplace.app.dto.reservation_dto import ReservationWithCounterpart
from src.service.marketplace.domain.entity.reservation_entity import Reservation


class IReservationRepo(ABC):
    @abstractmethod
    async def create(self, reservation: Reservation) -> Reservation:
        """
        Raises:
            ConflictError: TIME_SLOT_ALREADY_RESERVED when the slot index rejects the row
        """
        pass

    @abstractmethod
    async def get_by_id(self, reservation_id: int) -> Optional[Reservation]:
        pass

    @abstractmethod
    async def get_by_order_id(self, order_id: str) -> Optional[Reservation]:
        pass

    @abstractmethod
    async def update(self, reservation: Reservation) -> Reservation:
        pass

    @abstractmethod
    async def delete(self, reservation_id: int) -> None:
        pass

    @abstractmethod
    async def exists_active_slot(self, *, advisor_id: int, day: date, start_time: time) -> bool:
        pass

    @abstractmethod
    async def list_reserved_times(self, *, advisor_id: int, day: date) -> List[time]:
        pass

    @abstractmethod
    async def list_for_client(
        self, *, client_id: int, offset: int, limit: int
    ) -> List[ReservationWithCounterpart]:
        pass

    @abstractmethod
    async def list_for_advisor(
        self, *, advisor_id: int, offset: int, limit: int
    ) -> List[ReservationWithCounterpart]:
        pass
