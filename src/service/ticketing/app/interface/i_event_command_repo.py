"""
Event Command Repository Interface - CQRS Write Side

The inventory counter is only ever changed here, and only through guarded
updates evaluated by the database.
"""

from abc import ABC, abstractmethod
from typing import Optional

from src.service.ticketing.domain.entity.event_entity import EventEntity
from src.service.ticketing.domain.enum.event_status import EventStatus


class IEventCommandRepo(ABC):
    @abstractmethod
    async def create(self, *, event: EventEntity) -> EventEntity:
        pass

    @abstractmethod
    async def get_by_id(self, *, event_id: int) -> Optional[EventEntity]:
        pass

    @abstractmethod
    async def decrement_tickets_remaining(self, *, event_id: int, quantity: int) -> bool:
        """Take `quantity` seats if the event is active and has them; False if the guard failed."""
        pass

    @abstractmethod
    async def increment_tickets_remaining_if_active(
        self, *, event_id: int, quantity: int = 1
    ) -> bool:
        """Give seats back; a cancelled event keeps its counter unchanged (returns False)."""
        pass

    @abstractmethod
    async def update_status(
        self, *, event_id: int, from_status: EventStatus, to_status: EventStatus
    ) -> bool:
        pass
