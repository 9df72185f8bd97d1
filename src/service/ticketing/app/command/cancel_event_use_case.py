from typing import Callable, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.retry import run_with_storage_retry
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import DomainError, ForbiddenError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.platform.state.keyed_lock import KeyedLock
from src.service.ticketing.domain.entity.event_entity import EventEntity
from src.service.ticketing.domain.entity.user_entity import UserEntity
from src.service.ticketing.domain.enum.event_status import EventStatus


class CancelEventUseCase:
    """
    active -> cancelled, one way.

    Outstanding holds are left for the sweeper; once the event is cancelled
    neither their reclaim nor any ticket cancellation replenishes inventory.
    """

    def __init__(
        self, *, uow_factory: Callable[[], AbstractUnitOfWork], event_lock: KeyedLock
    ) -> None:
        self.uow_factory = uow_factory
        self.event_lock = event_lock

    @classmethod
    @inject
    def depends(
        cls,
        uow_factory: Callable[[], AbstractUnitOfWork] = Depends(
            Provide[Container.unit_of_work.provider]
        ),
        event_lock: KeyedLock = Depends(Provide[Container.event_lock]),
    ) -> Self:
        return cls(uow_factory=uow_factory, event_lock=event_lock)

    @Logger.io
    async def execute(self, *, event_id: int, acting_user: UserEntity) -> EventEntity:
        async with self.event_lock.hold(event_id):
            cancelled = await run_with_storage_retry(
                lambda: self._cancel(event_id=event_id, acting_user=acting_user),
                description=f'cancel event {event_id}',
            )

        Logger.base.info(f'🛑 [EVENT] Event {event_id} cancelled by user {acting_user.id}')
        return cancelled

    async def _cancel(self, *, event_id: int, acting_user: UserEntity) -> EventEntity:
        async with self.uow_factory() as uow:
            event = await uow.event_command_repo.get_by_id(event_id=event_id)
            if event is None:
                raise NotFoundError('Event not found')
            if not event.is_managed_by(acting_user):
                raise ForbiddenError('Only the event organizer or an admin can cancel this event')

            cancelled = event.cancel()
            updated = await uow.event_command_repo.update_status(
                event_id=event_id,
                from_status=EventStatus.ACTIVE,
                to_status=EventStatus.CANCELLED,
            )
            if not updated:
                raise DomainError('Event is already cancelled')
            await uow.commit()
            return cancelled
