from abc import ABC, abstractmethod
from decimal import Decimal
from typing import List
from uuid import UUID


class IPaymentGateway(ABC):
    """Payment provider port; the provider reports the outcome through the webhook"""

    @abstractmethod
    async def create_payment_intent(
        self, *, user_id: int, ticket_ids: List[UUID], amount: Decimal
    ) -> str:
        """Register the charge and return the provider's payment reference."""
        pass
