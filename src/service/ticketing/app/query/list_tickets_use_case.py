from typing import Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.exception.exceptions import ForbiddenError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.dto.page import Page, PageRequest
from src.service.ticketing.app.dto.reservation_results import EventTicketsPage
from src.service.ticketing.app.interface.i_event_query_repo import IEventQueryRepo
from src.service.ticketing.app.interface.i_ticket_query_repo import ITicketQueryRepo
from src.service.ticketing.domain.entity.ticket_entity import TicketEntity
from src.service.ticketing.domain.entity.user_entity import UserEntity
from src.service.ticketing.domain.enum.ticket_status import TicketStatus


class ListTicketsUseCase:
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

    @Logger.io
    async def list_user_tickets(
        self,
        *,
        user_id: int,
        page_request: PageRequest,
        status: Optional[TicketStatus] = None,
    ) -> Page[TicketEntity]:
        return await self.ticket_query_repo.list_by_user(
            user_id=user_id, page_request=page_request, status=status
        )

    @Logger.io
    async def list_event_tickets(
        self,
        *,
        event_id: int,
        acting_user: UserEntity,
        page_request: PageRequest,
        status: Optional[TicketStatus] = None,
    ) -> EventTicketsPage:
        event = await self.event_query_repo.get_by_id(event_id=event_id)
        if event is None:
            raise NotFoundError('Event not found')
        if not event.is_managed_by(acting_user):
            raise ForbiddenError('Only the event organizer or an admin can list its tickets')

        return EventTicketsPage(
            page=await self.ticket_query_repo.list_by_event(
                event_id=event_id, page_request=page_request, status=status
            ),
            counts_by_status=await self.ticket_query_repo.count_by_status(event_id=event_id),
        )
