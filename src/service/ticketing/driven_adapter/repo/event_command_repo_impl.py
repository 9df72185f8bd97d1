"""
Event Command Repository Implementation - CQRS Write Side

Runs inside a Unit of Work session. Counter changes are single guarded UPDATE
statements; the WHERE clause is the precondition and rowcount tells whether
it held at commit-ordering time.
"""

from typing import Optional, cast

from sqlalchemy import CursorResult, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.interface.i_event_command_repo import IEventCommandRepo
from src.service.ticketing.domain.entity.event_entity import EventEntity
from src.service.ticketing.domain.enum.event_status import EventStatus
from src.service.ticketing.driven_adapter.model.event_model import EventModel
from src.service.ticketing.driven_adapter.repo.model_mapper import (
    event_to_entity,
    event_to_model,
)


class EventCommandRepoImpl(IEventCommandRepo):
    def __init__(self, *, session: AsyncSession) -> None:
        self.session = session

    @Logger.io
    async def create(self, *, event: EventEntity) -> EventEntity:
        row = event_to_model(event)
        self.session.add(row)
        await self.session.flush()
        return event_to_entity(row)

    @Logger.io
    async def get_by_id(self, *, event_id: int) -> Optional[EventEntity]:
        # populate_existing: always reflect the latest committed counter
        result = await self.session.execute(
            select(EventModel)
            .where(EventModel.id == event_id)
            .execution_options(populate_existing=True)
        )
        row = result.scalar_one_or_none()
        return event_to_entity(row) if row else None

    @Logger.io
    async def decrement_tickets_remaining(self, *, event_id: int, quantity: int) -> bool:
        result = await self.session.execute(
            update(EventModel)
            .where(
                EventModel.id == event_id,
                EventModel.status == EventStatus.ACTIVE.value,
                EventModel.tickets_remaining >= quantity,
            )
            .values(tickets_remaining=EventModel.tickets_remaining - quantity)
            .execution_options(synchronize_session=False)
        )
        return cast(CursorResult, result).rowcount == 1

    @Logger.io
    async def increment_tickets_remaining_if_active(
        self, *, event_id: int, quantity: int = 1
    ) -> bool:
        result = await self.session.execute(
            update(EventModel)
            .where(
                EventModel.id == event_id,
                EventModel.status == EventStatus.ACTIVE.value,
                EventModel.tickets_remaining + quantity <= EventModel.total_tickets,
            )
            .values(tickets_remaining=EventModel.tickets_remaining + quantity)
            .execution_options(synchronize_session=False)
        )
        restored = cast(CursorResult, result).rowcount == 1
        if not restored:
            Logger.base.info(
                f'🎫 [INVENTORY] Event {event_id} not active, seat not returned to inventory'
            )
        return restored

    @Logger.io
    async def update_status(
        self, *, event_id: int, from_status: EventStatus, to_status: EventStatus
    ) -> bool:
        result = await self.session.execute(
            update(EventModel)
            .where(EventModel.id == event_id, EventModel.status == from_status.value)
            .values(status=to_status.value)
            .execution_options(synchronize_session=False)
        )
        return cast(CursorResult, result).rowcount == 1
