from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from src.service.ticketing.domain.entity.ticket_entity import TicketEntity
from src.service.ticketing.domain.enum.ticket_status import TicketStatus


class BookTicketsRequest(BaseModel):
    event_id: int
    quantity: int = Field(ge=1)

    model_config = {'json_schema_extra': {'example': {'event_id': 1, 'quantity': 3}}}


class BookTicketsResponse(BaseModel):
    ticket_ids: List[UUID]
    ticket_numbers: List[str]
    total_price: Decimal
    reservation_expiry: datetime


class TicketResponse(BaseModel):
    id: UUID
    ticket_number: str
    event_id: int
    user_id: int
    price: Decimal
    status: TicketStatus
    reservation_expiry: Optional[datetime] = None
    checked: bool
    purchased_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, ticket: TicketEntity) -> 'TicketResponse':
        return cls(
            id=ticket.id,
            ticket_number=ticket.ticket_number,
            event_id=ticket.event_id,
            user_id=ticket.user_id,
            price=ticket.price,
            status=ticket.status,
            reservation_expiry=ticket.reservation_expiry,
            checked=ticket.checked,
            purchased_at=ticket.purchased_at,
        )


class TicketListResponse(BaseModel):
    tickets: List[TicketResponse]
    total: int
    page: int
    pages: int


class EventTicketListResponse(TicketListResponse):
    counts_by_status: Dict[str, int]


class TicketVerificationResponse(BaseModel):
    is_valid: bool
    message: str
    status: TicketStatus
    ticket_number: str
    event_title: str
