from typing import Self
from uuid import UUID

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.exception.exceptions import ForbiddenError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.platform.types.utc_datetime import utc_now
from src.service.ticketing.app.dto.reservation_results import TicketVerificationReport
from src.service.ticketing.app.interface.i_event_query_repo import IEventQueryRepo
from src.service.ticketing.app.interface.i_ticket_query_repo import ITicketQueryRepo
from src.service.ticketing.domain.entity.event_entity import EventEntity
from src.service.ticketing.domain.entity.ticket_entity import TicketEntity
from src.service.ticketing.domain.entity.user_entity import UserEntity
from src.service.ticketing.domain.ticket_verification import verify_ticket


class GetTicketUseCase:
    """Ticket reads for the owner, the event organizer or an admin"""

    def __init__(
        self, *, ticket_query_repo: ITicketQueryRepo, event_query_repo: IEventQueryRepo
    ) -> None:
        self.ticket_query_repo = ticket_query_repo
        self.event_query_repo = event_query_repo

    @classmethod
    @inject
    def depends(
        cls,
        ticket_query_repo: ITicketQueryRepo = Depends(Provide[Container.ticket_query_repo]),
        event_query_repo: IEventQueryRepo = Depends(Provide[Container.event_query_repo]),
    ) -> Self:
        return cls(ticket_query_repo=ticket_query_repo, event_query_repo=event_query_repo)

    async def _load_event(self, ticket: TicketEntity) -> EventEntity:
        event = await self.event_query_repo.get_by_id(event_id=ticket.event_id)
        if event is None:
            raise NotFoundError('Event not found')
        return event

    async def _authorize(self, *, ticket: TicketEntity, acting_user: UserEntity) -> EventEntity:
        event = await self._load_event(ticket)
        if not (ticket.is_owned_by(acting_user.id) or event.is_managed_by(acting_user)):
            raise ForbiddenError('You do not have access to this ticket')
        return event

    @Logger.io
    async def get_by_id(self, *, ticket_id: UUID, acting_user: UserEntity) -> TicketEntity:
        ticket = await self.ticket_query_repo.get_by_id(ticket_id=ticket_id)
        if ticket is None:
            raise NotFoundError('Ticket not found')
        await self._authorize(ticket=ticket, acting_user=acting_user)
        return ticket

    @Logger.io
    async def get_by_ticket_number(
        self, *, ticket_number: str, acting_user: UserEntity
    ) -> TicketEntity:
        ticket = await self.ticket_query_repo.get_by_ticket_number(ticket_number=ticket_number)
        if ticket is None:
            raise NotFoundError('Ticket not found')
        await self._authorize(ticket=ticket, acting_user=acting_user)
        return ticket

    @Logger.io
    async def verify(self, *, ticket_id: UUID, acting_user: UserEntity) -> TicketVerificationReport:
        """Door check; read-only, organizer or admin"""
        ticket = await self.ticket_query_repo.get_by_id(ticket_id=ticket_id)
        if ticket is None:
            raise NotFoundError('Ticket not found')
        event = await self._load_event(ticket)
        if not event.is_managed_by(acting_user):
            raise ForbiddenError('Only the event organizer or an admin can verify tickets')

        return TicketVerificationReport(
            verification=verify_ticket(
                status=ticket.status,
                event_start=event.start_at,
                event_end=event.end_at,
                now=utc_now(),
            ),
            ticket=ticket,
            event=event,
        )
