"""Ticket Command Repository Implementation - CQRS Write Side (Unit of Work session)"""

from typing import Iterable, List, Optional, Set, cast
from uuid import UUID

from sqlalchemy import CursorResult, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.interface.i_ticket_command_repo import ITicketCommandRepo
from src.service.ticketing.domain.entity.ticket_entity import TicketEntity
from src.service.ticketing.domain.enum.ticket_status import TicketStatus
from src.service.ticketing.driven_adapter.model.ticket_model import TicketModel
from src.service.ticketing.driven_adapter.repo.model_mapper import (
    ticket_to_entity,
    ticket_to_model,
)


class TicketCommandRepoImpl(ITicketCommandRepo):
    def __init__(self, *, session: AsyncSession) -> None:
        self.session = session

    @Logger.io
    async def get_by_id(self, *, ticket_id: UUID) -> Optional[TicketEntity]:
        result = await self.session.execute(
            select(TicketModel)
            .where(TicketModel.id == ticket_id)
            .execution_options(populate_existing=True)
        )
        row = result.scalar_one_or_none()
        return ticket_to_entity(row) if row else None

    @Logger.io
    async def get_by_ids(self, *, ticket_ids: List[UUID]) -> List[TicketEntity]:
        if not ticket_ids:
            return []
        result = await self.session.execute(
            select(TicketModel)
            .where(TicketModel.id.in_(ticket_ids))
            .order_by(TicketModel.id)
            .execution_options(populate_existing=True)
        )
        return [ticket_to_entity(row) for row in result.scalars().all()]

    @Logger.io
    async def find_existing_ticket_numbers(self, *, ticket_numbers: Iterable[str]) -> Set[str]:
        numbers = list(ticket_numbers)
        if not numbers:
            return set()
        result = await self.session.execute(
            select(TicketModel.ticket_number).where(TicketModel.ticket_number.in_(numbers))
        )
        return set(result.scalars().all())

    @Logger.io
    async def create_many(self, *, tickets: List[TicketEntity]) -> List[TicketEntity]:
        rows = [ticket_to_model(ticket) for ticket in tickets]
        self.session.add_all(rows)
        await self.session.flush()
        return [ticket_to_entity(row) for row in rows]

    @Logger.io
    async def save_transition(self, *, ticket: TicketEntity, from_status: TicketStatus) -> bool:
        result = await self.session.execute(
            update(TicketModel)
            .where(TicketModel.id == ticket.id, TicketModel.status == from_status.value)
            .values(
                status=ticket.status.value,
                reservation_expiry=ticket.reservation_expiry,
                checked=ticket.checked,
                updated_at=ticket.updated_at,
            )
            .execution_options(synchronize_session=False)
        )
        return cast(CursorResult, result).rowcount == 1
