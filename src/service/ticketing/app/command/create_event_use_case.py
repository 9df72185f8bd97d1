from datetime import datetime
from decimal import Decimal
from typing import Callable, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import ForbiddenError
from src.platform.logging.loguru_io import Logger
from src.service.ticketing.domain.entity.event_entity import EventEntity
from src.service.ticketing.domain.entity.user_entity import UserEntity
from src.service.ticketing.domain.enum.event_category import EventCategory


class CreateEventUseCase:
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
    async def execute(
        self,
        *,
        organizer: UserEntity,
        title: str,
        description: str,
        venue: str,
        start_at: datetime,
        end_at: datetime,
        total_tickets: int,
        ticket_price: Decimal,
        category: EventCategory = EventCategory.OTHER,
    ) -> EventEntity:
        if not (organizer.is_organizer or organizer.is_admin):
            raise ForbiddenError('Only organizers can create events')

        event = EventEntity.create(
            title=title,
            description=description,
            venue=venue,
            organizer_id=organizer.id,
            start_at=start_at,
            end_at=end_at,
            total_tickets=total_tickets,
            ticket_price=ticket_price,
            category=category,
        )

        async with self.uow_factory() as uow:
            created = await uow.event_command_repo.create(event=event)
            await uow.commit()

        Logger.base.info(
            f'🎪 [EVENT] Created event {created.id} with {created.total_tickets} tickets '
            f'by organizer {organizer.id}'
        )
        return created
