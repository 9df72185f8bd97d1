from typing import Callable, Self
from uuid import UUID

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.retry import run_with_storage_retry
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import ForbiddenError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.platform.state.keyed_lock import KeyedLock
from src.platform.types.utc_datetime import utc_now
from src.service.ticketing.app.command.ticket_transition_executor import apply_ticket_transition
from src.service.ticketing.app.interface.i_ticket_query_repo import ITicketQueryRepo
from src.service.ticketing.domain.entity.ticket_entity import TicketEntity
from src.service.ticketing.domain.entity.user_entity import UserEntity
from src.service.ticketing.domain.enum.ticket_status import TicketStatus
from src.service.ticketing.domain.reservation_errors import InvalidTransitionError


class CancelTicketUseCase:
    """
    Cancel a reserved or paid ticket (owner or admin).

    The seat goes back to the event only while the event is still active.
    """

    def __init__(
        self,
        *,
        uow_factory: Callable[[], AbstractUnitOfWork],
        ticket_query_repo: ITicketQueryRepo,
        event_lock: KeyedLock,
    ) -> None:
        self.uow_factory = uow_factory
        self.ticket_query_repo = ticket_query_repo
        self.event_lock = event_lock

    @classmethod
    @inject
    def depends(
        cls,
        uow_factory: Callable[[], AbstractUnitOfWork] = Depends(
            Provide[Container.unit_of_work.provider]
        ),
        ticket_query_repo: ITicketQueryRepo = Depends(Provide[Container.ticket_query_repo]),
        event_lock: KeyedLock = Depends(Provide[Container.event_lock]),
    ) -> Self:
        return cls(
            uow_factory=uow_factory, ticket_query_repo=ticket_query_repo, event_lock=event_lock
        )

    @Logger.io
    async def execute(self, *, ticket_id: UUID, acting_user: UserEntity) -> TicketEntity:
        ticket = await self.ticket_query_repo.get_by_id(ticket_id=ticket_id)
        if ticket is None:
            raise NotFoundError('Ticket not found')
        if not (ticket.is_owned_by(acting_user.id) or acting_user.is_admin):
            raise ForbiddenError('Only the ticket owner or an admin can cancel this ticket')

        async with self.event_lock.hold(ticket.event_id):
            cancelled = await run_with_storage_retry(
                lambda: self._cancel(ticket_id=ticket_id),
                description=f'cancel ticket {ticket_id}',
            )

        Logger.base.info(f'🚫 [CANCEL] Ticket {ticket_id} cancelled by user {acting_user.id}')
        return cancelled

    async def _cancel(self, *, ticket_id: UUID) -> TicketEntity:
        async with self.uow_factory() as uow:
            ticket = await uow.ticket_command_repo.get_by_id(ticket_id=ticket_id)
            if ticket is None:
                raise NotFoundError('Ticket not found')

            cancelled = await apply_ticket_transition(
                uow=uow, ticket=ticket, to_status=TicketStatus.CANCELLED, now=utc_now()
            )
            if cancelled is None:
                raise InvalidTransitionError(
                    from_status=ticket.status.value,
                    to_status=TicketStatus.CANCELLED.value,
                    message='Ticket was changed by another request, try again',
                )
            await uow.commit()
            return cancelled
