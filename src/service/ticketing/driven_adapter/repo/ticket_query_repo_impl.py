"""
Ticket Query Repository Implementation - CQRS Read Side

Listings are newest first; the UUID7 id breaks ties between tickets created in
the same booking.
"""

from contextlib import asynccontextmanager
from datetime import datetime
from typing import AsyncContextManager, AsyncIterator, Callable, Dict, List, Optional
from uuid import UUID

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.dto.page import Page, PageRequest
from src.service.ticketing.app.interface.i_ticket_query_repo import ITicketQueryRepo
from src.service.ticketing.domain.entity.ticket_entity import TicketEntity
from src.service.ticketing.domain.enum.ticket_status import TicketStatus
from src.service.ticketing.driven_adapter.model.ticket_model import TicketModel
from src.service.ticketing.driven_adapter.repo.model_mapper import ticket_to_entity


class TicketQueryRepoImpl(ITicketQueryRepo):
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
    ) -> Page[TicketEntity]:
        async with self._get_session() as session:
            total = await session.scalar(select(func.count()).select_from(stmt.subquery()))
            result = await session.execute(
                stmt.order_by(TicketModel.created_at.desc(), TicketModel.id.desc())
                .offset(page_request.offset)
                .limit(page_request.limit)
            )
            return Page(
                items=[ticket_to_entity(row) for row in result.scalars().all()],
                total=total or 0,
                page=page_request.page,
                limit=page_request.limit,
            )

    @Logger.io
    async def get_by_id(self, *, ticket_id: UUID) -> Optional[TicketEntity]:
        async with self._get_session() as session:
            result = await session.execute(select(TicketModel).where(TicketModel.id == ticket_id))
            row = result.scalar_one_or_none()
            return ticket_to_entity(row) if row else None

    @Logger.io
    async def get_by_ticket_number(self, *, ticket_number: str) -> Optional[TicketEntity]:
        async with self._get_session() as session:
            result = await session.execute(
                select(TicketModel).where(TicketModel.ticket_number == ticket_number)
            )
            row = result.scalar_one_or_none()
            return ticket_to_entity(row) if row else None

    @Logger.io
    async def list_by_user(
        self, *, user_id: int, page_request: PageRequest, status: Optional[TicketStatus] = None
    ) -> Page[TicketEntity]:
        stmt = select(TicketModel).where(TicketModel.user_id == user_id)
        if status is not None:
            stmt = stmt.where(TicketModel.status == status.value)
        return await self._paginate(stmt, page_request=page_request)

    @Logger.io
    async def list_by_event(
        self, *, event_id: int, page_request: PageRequest, status: Optional[TicketStatus] = None
    ) -> Page[TicketEntity]:
        stmt = select(TicketModel).where(TicketModel.event_id == event_id)
        if status is not None:
            stmt = stmt.where(TicketModel.status == status.value)
        return await self._paginate(stmt, page_request=page_request)

    @Logger.io
    async def count_by_status(self, *, event_id: int) -> Dict[str, int]:
        async with self._get_session() as session:
            result = await session.execute(
                select(TicketModel.status, func.count())
                .where(TicketModel.event_id == event_id)
                .group_by(TicketModel.status)
            )
            counts = {status.value: 0 for status in TicketStatus}
            counts.update({status: count for status, count in result.all()})
            return counts

    @Logger.io
    async def list_expired_reservations(self, *, now: datetime, limit: int) -> List[TicketEntity]:
        async with self._get_session() as session:
            result = await session.execute(
                select(TicketModel)
                .where(
                    TicketModel.status == TicketStatus.RESERVED.value,
                    TicketModel.reservation_expiry.is_not(None),
                    TicketModel.reservation_expiry < now,
                )
                .order_by(TicketModel.reservation_expiry, TicketModel.id)
                .limit(limit)
            )
            return [ticket_to_entity(row) for row in result.scalars().all()]
