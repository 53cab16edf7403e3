from abc import ABC, abstractmethod
from typing import Optional

from src.service.marketplace.app.dto.reservation_dto import PaymentConfirmation


class IPaymentGateway(ABC):
    """External card payment provider"""

    @abstractmethod
    async def confirm(self, *, payment_key: str, order_id: str, amount: int) -> PaymentConfirmation:
        """
        Raises:
            ExternalServiceError: transport failure or a non-2xx gateway answer
        """
        pass

    @abstractmethod
    async def cancel(self, *, payment_key: str, cancel_reason: str, cancel_amount: Optional[int]) -> None:
        pass
