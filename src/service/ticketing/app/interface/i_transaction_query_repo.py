"""Transaction Query Repository Interface - CQRS Read Side"""

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Optional
from uuid import UUID

from src.service.ticketing.app.dto.page import Page, PageRequest
from src.service.ticketing.domain.entity.transaction_entity import TransactionEntity


class ITransactionQueryRepo(ABC):
    @abstractmethod
    async def get_by_id(self, *, transaction_id: UUID) -> Optional[TransactionEntity]:
        pass

    @abstractmethod
    async def list_by_user(
        self, *, user_id: int, page_request: PageRequest
    ) -> Page[TransactionEntity]:
        pass

    @abstractmethod
    async def list_by_event(
        self, *, event_id: int, page_request: PageRequest
    ) -> Page[TransactionEntity]:
        pass

    @abstractmethod
    async def total_revenue(self, *, event_id: int) -> Decimal:
        """Sum of completed transaction amounts."""
        pass
