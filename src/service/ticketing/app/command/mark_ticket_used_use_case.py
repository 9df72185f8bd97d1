from typing import Callable, Self
from uuid import UUID

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.retry import run_with_storage_retry
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import ForbiddenError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.platform.types.utc_datetime import utc_now
from src.service.ticketing.app.command.ticket_transition_executor import apply_ticket_transition
from src.service.ticketing.domain.entity.ticket_entity import TicketEntity
from src.service.ticketing.domain.entity.user_entity import UserEntity
from src.service.ticketing.domain.enum.ticket_status import TicketStatus
from src.service.ticketing.domain.reservation_errors import InvalidTransitionError


class MarkTicketUsedUseCase:
    """Venue check-in: paid -> used (event organizer or admin)"""

    def __init__(self, *, uow_factory: Callable[[], AbstractUnitOfWork]) -> None:
        self.uow_factory = uow_factory

    @classmethod
    @inject
    def depends(
        cls,
        uow_factory: Callable[[], AbstractUnitOfWork] = Depends(
            Provide[Container.unit_of_work.provider]
        ),
    ) -> Self:
        return cls(uow_factory=uow_factory)

    @Logger.io
    async def execute(self, *, ticket_id: UUID, acting_user: UserEntity) -> TicketEntity:
        return await run_with_storage_retry(
            lambda: self._mark_used(ticket_id=ticket_id, acting_user=acting_user),
            description=f'check in ticket {ticket_id}',
        )

    async def _mark_used(self, *, ticket_id: UUID, acting_user: UserEntity) -> TicketEntity:
        async with self.uow_factory() as uow:
            ticket = await uow.ticket_command_repo.get_by_id(ticket_id=ticket_id)
            if ticket is None:
                raise NotFoundError('Ticket not found')

            event = await uow.event_command_repo.get_by_id(event_id=ticket.event_id)
            if event is None:
                raise NotFoundError('Event not found')
            if not event.is_managed_by(acting_user):
                raise ForbiddenError('Only the event organizer or an admin can check in tickets')

            used = await apply_ticket_transition(
                uow=uow, ticket=ticket, to_status=TicketStatus.USED, now=utc_now()
            )
            if used is None:
                raise InvalidTransitionError(
                    from_status=ticket.status.value,
                    to_status=TicketStatus.USED.value,
                    message='Ticket was changed by another request, try again',
                )
            await uow.commit()

        Logger.base.info(f'✅ [CHECK-IN] Ticket {ticket_id} marked used by user {acting_user.id}')
        return used
