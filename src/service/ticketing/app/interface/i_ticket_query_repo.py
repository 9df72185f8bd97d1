"""Ticket Query Repository Interface - CQRS Read Side"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Dict, List, Optional
from uuid import UUID

from src.service.ticketing.app.dto.page import Page, PageRequest
from src.service.ticketing.domain.entity.ticket_entity import TicketEntity
from src.service.ticketing.domain.enum.ticket_status import TicketStatus


class ITicketQueryRepo(ABC):
    @abstractmethod
    async def get_by_id(self, *, ticket_id: UUID) -> Optional[TicketEntity]:
        pass

    @abstractmethod
    async def get_by_ticket_number(self, *, ticket_number: str) -> Optional[TicketEntity]:
        pass

    @abstractmethod
    async def list_by_user(
        self, *, user_id: int, page_request: PageRequest, status: Optional[TicketStatus] = None
    ) -> Page[TicketEntity]:
        pass

    @abstractmethod
    async def list_by_event(
        self, *, event_id: int, page_request: PageRequest, status: Optional[TicketStatus] = None
    ) -> Page[TicketEntity]:
        pass

    @abstractmethod
    async def count_by_status(self, *, event_id: int) -> Dict[str, int]:
        pass

    @abstractmethod
    async def list_expired_reservations(self, *, now: datetime, limit: int) -> List[TicketEntity]:
        """Reserved tickets whose hold ended before `now`, oldest first."""
        pass
