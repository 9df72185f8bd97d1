"""Ticket Command Repository Interface - CQRS Write Side"""

from abc import ABC, abstractmethod
from typing import Iterable, List, Optional, Set
from uuid import UUID

from src.service.ticketing.domain.entity.ticket_entity import TicketEntity
from src.service.ticketing.domain.enum.ticket_status import TicketStatus


class ITicketCommandRepo(ABC):
    @abstractmethod
    async def get_by_id(self, *, ticket_id: UUID) -> Optional[TicketEntity]:
        pass

    @abstractmethod
    async def get_by_ids(self, *, ticket_ids: List[UUID]) -> List[TicketEntity]:
        pass

    @abstractmethod
    async def find_existing_ticket_numbers(self, *, ticket_numbers: Iterable[str]) -> Set[str]:
        pass

    @abstractmethod
    async def create_many(self, *, tickets: List[TicketEntity]) -> List[TicketEntity]:
        pass

    @abstractmethod
    async def save_transition(self, *, ticket: TicketEntity, from_status: TicketStatus) -> bool:
        """Persist `ticket` only if storage still holds `from_status`; False if another actor won."""
        pass
