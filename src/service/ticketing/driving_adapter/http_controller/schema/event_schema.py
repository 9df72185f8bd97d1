from datetime import datetime
from decimal import Decimal
from typing import Dict

from pydantic import BaseModel, Field

from src.service.ticketing.domain.entity.event_entity import EventEntity
from src.service.ticketing.domain.enum.event_category import EventCategory
from src.service.ticketing.domain.enum.event_status import EventStatus


class EventCreateRequest(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    description: str = Field(min_length=1)
    venue: str = Field(min_length=1, max_length=255)
    start_at: datetime
    end_at: datetime
    total_tickets: int = Field(ge=1)
    ticket_price: Decimal = Field(ge=0, max_digits=10, decimal_places=2)
    category: EventCategory = EventCategory.OTHER

    model_config = {
        'json_schema_extra': {
            'example': {
                'title': 'Summer Jazz Night',
                'description': 'An evening of live jazz',
                'venue': 'Riverside Hall',
                'start_at': '2030-07-01T19:00:00Z',
                'end_at': '2030-07-01T23:00:00Z',
                'total_tickets': 200,
                'ticket_price': '20.00',
                'category': 'concert',
            }
        }
    }


class EventResponse(BaseModel):
    id: int
    title: str
    description: str
    venue: str
    category: EventCategory
    organizer_id: int
    start_at: datetime
    end_at: datetime
    total_tickets: int
    tickets_remaining: int
    tickets_sold: int
    ticket_price: Decimal
    status: EventStatus

    @classmethod
    def from_entity(cls, event: EventEntity) -> 'EventResponse':
        return cls(
            id=event.id or 0,
            title=event.title,
            description=event.description,
            venue=event.venue,
            category=event.category,
            organizer_id=event.organizer_id,
            start_at=event.start_at,
            end_at=event.end_at,
            total_tickets=event.total_tickets,
            tickets_remaining=event.tickets_remaining,
            tickets_sold=event.tickets_sold,
            ticket_price=event.ticket_price,
            status=event.status,
        )


class InventoryResponse(BaseModel):
    event_id: int
    status: EventStatus
    total_tickets: int
    tickets_remaining: int
    counts_by_status: Dict[str, int]
    is_consistent: bool
