"""Transaction Command Repository Implementation - CQRS Write Side (Unit of Work session)"""

from typing import List, Optional, cast
from uuid import UUID

from sqlalchemy import CursorResult, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.logging.loguru_io import Logger
from src.platform.types.utc_datetime import utc_now
from src.service.ticketing.app.interface.i_transaction_command_repo import (
    ITransactionCommandRepo,
)
from src.service.ticketing.domain.entity.transaction_entity import TransactionEntity
from src.service.ticketing.domain.enum.transaction_status import TransactionStatus
from src.service.ticketing.driven_adapter.model.transaction_model import TransactionModel
from src.service.ticketing.driven_adapter.repo.model_mapper import (
    transaction_to_entity,
    transaction_to_model,
)


class TransactionCommandRepoImpl(ITransactionCommandRepo):
    def __init__(self, *, session: AsyncSession) -> None:
        self.session = session

    @Logger.io
    async def create_many(
        self, *, transactions: List[TransactionEntity]
    ) -> List[TransactionEntity]:
        rows = [transaction_to_model(transaction) for transaction in transactions]
        self.session.add_all(rows)
        await self.session.flush()
        return [transaction_to_entity(row) for row in rows]

    @Logger.io
    async def get_by_id(self, *, transaction_id: UUID) -> Optional[TransactionEntity]:
        result = await self.session.execute(
            select(TransactionModel)
            .where(TransactionModel.id == transaction_id)
            .execution_options(populate_existing=True)
        )
        row = result.scalar_one_or_none()
        return transaction_to_entity(row) if row else None

    @Logger.io
    async def update_status(
        self,
        *,
        transaction_id: UUID,
        from_status: TransactionStatus,
        to_status: TransactionStatus,
    ) -> bool:
        result = await self.session.execute(
            update(TransactionModel)
            .where(
                TransactionModel.id == transaction_id,
                TransactionModel.status == from_status.value,
            )
            .values(status=to_status.value, updated_at=utc_now())
            .execution_options(synchronize_session=False)
        )
        return cast(CursorResult, result).rowcount == 1
