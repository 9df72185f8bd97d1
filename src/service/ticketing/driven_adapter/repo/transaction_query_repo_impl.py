"""
Transaction Query Repository Implementation - CQRS Read Side
"""

from contextlib import asynccontextmanager
from decimal import Decimal
from typing import AsyncContextManager, AsyncIterator, Callable, Optional
from uuid import UUID

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.dto.page import Page, PageRequest
from src.service.ticketing.app.interface.i_transaction_query_repo import ITransactionQueryRepo
from src.service.ticketing.domain.entity.transaction_entity import TransactionEntity
from src.service.ticketing.domain.enum.transaction_status import TransactionStatus
from src.service.ticketing.driven_adapter.model.transaction_model import TransactionModel
from src.service.ticketing.driven_adapter.repo.model_mapper import (
    to_money,
    transaction_to_entity,
)


class TransactionQueryRepoImpl(ITransactionQueryRepo):
    def __init__(
        self, session_factory: Callable[..., AsyncContextManager[AsyncSession]] | None = None
    ) -> None:
        self.session_factory = session_factory

    @asynccontextmanager
    async def _get_session(self) -> AsyncIterator[AsyncSession]:
        if self.session_factory is None:
            raise RuntimeError('No session_factory available')
        async with self.session_factory() as session:
            yield session

    async def _paginate(
        self, stmt: Select, *, page_request: PageRequest
    ) -> Page[TransactionEntity]:
        async with self._get_session() as session:
            total = await session.scalar(select(func.count()).select_from(stmt.subquery()))
            result = await session.execute(
                stmt.order_by(TransactionModel.created_at.desc(), TransactionModel.id.desc())
                .offset(page_request.offset)
                .limit(page_request.limit)
            )
            return Page(
                items=[transaction_to_entity(row) for row in result.scalars().all()],
                total=total or 0,
                page=page_request.page,
                limit=page_request.limit,
            )

    @Logger.io
    async def get_by_id(self, *, transaction_id: UUID) -> Optional[TransactionEntity]:
        async with self._get_session() as session:
            result = await session.execute(
                select(TransactionModel).where(TransactionModel.id == transaction_id)
            )
            row = result.scalar_one_or_none()
            return transaction_to_entity(row) if row else None

    @Logger.io
    async def list_by_user(
        self, *, user_id: int, page_request: PageRequest
    ) -> Page[TransactionEntity]:
        stmt = select(TransactionModel).where(TransactionModel.user_id == user_id)
        return await self._paginate(stmt, page_request=page_request)

    @Logger.io
    async def list_by_event(
        self, *, event_id: int, page_request: PageRequest
    ) -> Page[TransactionEntity]:
        stmt = select(TransactionModel).where(TransactionModel.event_id == event_id)
        return await self._paginate(stmt, page_request=page_request)

    @Logger.io
    async def total_revenue(self, *, event_id: int) -> Decimal:
        async with self._get_session() as session:
            total = await session.scalar(
                select(func.coalesce(func.sum(TransactionModel.amount), 0)).where(
                    TransactionModel.event_id == event_id,
                    TransactionModel.status == TransactionStatus.COMPLETED.value,
                )
            )
            return to_money(total)
