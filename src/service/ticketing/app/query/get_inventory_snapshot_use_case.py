from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.exception.exceptions import ForbiddenError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.dto.reservation_results import InventorySnapshot
from src.service.ticketing.app.interface.i_event_query_repo import IEventQueryRepo
from src.service.ticketing.app.interface.i_ticket_query_repo import ITicketQueryRepo
from src.service.ticketing.domain.entity.user_entity import UserEntity


class GetInventorySnapshotUseCase:
    """Counter vs. ticket rows for one event, with the seat accounting check"""

    def __init__(
        self, *, event_query_repo: IEventQueryRepo, ticket_query_repo: ITicketQueryRepo
    ) -> None:
        self.event_query_repo = event_query_repo
        self.ticket_query_repo = ticket_query_repo

    @classmethod
    @inject
    def depends(
        cls,
        event_query_repo: IEventQueryRepo = Depends(Provide[Container.event_query_repo]),
        ticket_query_repo: ITicketQueryRepo = Depends(Provide[Container.ticket_query_repo]),
    ) -> Self:
        return cls(event_query_repo=event_query_repo, ticket_query_repo=ticket_query_repo)

    @Logger.io
    async def execute(self, *, event_id: int, acting_user: UserEntity) -> InventorySnapshot:
        event = await self.event_query_repo.get_by_id(event_id=event_id)
        if event is None:
            raise NotFoundError('Event not found')
        if not event.is_managed_by(acting_user):
            raise ForbiddenError('Only the event organizer or an admin can view inventory')

        snapshot = InventorySnapshot(
            event=event,
            counts_by_status=await self.ticket_query_repo.count_by_status(event_id=event_id),
        )
        if not snapshot.is_consistent:
            Logger.base.error(
                f'❌ [INVENTORY] Event {event_id} counter drift: remaining '
                f'{event.tickets_remaining}, total {event.total_tickets}, '
                f'held {snapshot.seats_held}'
            )
        return snapshot
