"""Transaction Command Repository Interface - CQRS Write Side"""

from abc import ABC, abstractmethod
from typing import List, Optional
from uuid import UUID

from src.service.ticketing.domain.entity.transaction_entity import TransactionEntity
from src.service.ticketing.domain.enum.transaction_status import TransactionStatus


class ITransactionCommandRepo(ABC):
    @abstractmethod
    async def create_many(
        self, *, transactions: List[TransactionEntity]
    ) -> List[TransactionEntity]:
        pass

    @abstractmethod
    async def get_by_id(self, *, transaction_id: UUID) -> Optional[TransactionEntity]:
        pass

    @abstractmethod
    async def update_status(
        self,
        *,
        transaction_id: UUID,
        from_status: TransactionStatus,
        to_status: TransactionStatus,
    ) -> bool:
        pass
