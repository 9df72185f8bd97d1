from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional

import attrs

from src.platform.exception.exceptions import DomainError
from src.platform.logging.loguru_io import Logger
from src.service.ticketing.domain.entity.user_entity import UserEntity
from src.service.ticketing.domain.enum.event_category import EventCategory
from src.service.ticketing.domain.enum.event_status import EventStatus
from src.service.ticketing.domain.reservation_errors import (
    EventEndedError,
    EventInactiveError,
    InsufficientInventoryError,
)


PRICE_QUANTUM = Decimal('0.01')


def _validate_non_empty_string(instance: object, attribute: attrs.Attribute, value: str) -> None:
    if not value or not value.strip():
        raise DomainError(f'Event {attribute.name} cannot be empty')


@attrs.define
class EventEntity:
    title: str = attrs.field(validator=_validate_non_empty_string)
    description: str = attrs.field(validator=_validate_non_empty_string)
    venue: str = attrs.field(validator=_validate_non_empty_string)
    organizer_id: int
    start_at: datetime
    end_at: datetime
    total_tickets: int
    tickets_remaining: int
    ticket_price: Decimal
    category: EventCategory = EventCategory.OTHER
    status: EventStatus = EventStatus.ACTIVE
    id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    @Logger.io
    def create(
        cls,
        *,
        title: str,
        description: str,
        venue: str,
        organizer_id: int,
        start_at: datetime,
        end_at: datetime,
        total_tickets: int,
        ticket_price: Decimal,
        category: EventCategory = EventCategory.OTHER,
    ) -> 'EventEntity':
        if start_at.tzinfo is None or end_at.tzinfo is None:
            raise DomainError('Event start and end must include a timezone')
        if start_at >= end_at:
            raise DomainError('Event must start before it ends')
        if total_tickets < 1:
            raise DomainError('Must have at least 1 ticket available')
        if ticket_price < 0:
            raise DomainError('Ticket price cannot be negative')

        now = datetime.now(timezone.utc)
        return cls(
            title=title.strip(),
            description=description,
            venue=venue.strip(),
            organizer_id=organizer_id,
            start_at=start_at,
            end_at=end_at,
            total_tickets=total_tickets,
            tickets_remaining=total_tickets,
            ticket_price=Decimal(ticket_price).quantize(PRICE_QUANTUM),
            category=category,
            status=EventStatus.ACTIVE,
            created_at=now,
            updated_at=now,
        )

    @property
    def tickets_sold(self) -> int:
        return self.total_tickets - self.tickets_remaining

    @property
    def is_active(self) -> bool:
        return self.status == EventStatus.ACTIVE

    def has_ended(self, *, now: datetime) -> bool:
        return now >= self.end_at

    def ensure_bookable(self, *, quantity: int, now: datetime) -> None:
        """Booking preconditions, checked in this order"""
        if not self.is_active:
            raise EventInactiveError()
        if self.has_ended(now=now):
            raise EventEndedError()
        if self.tickets_remaining < quantity:
            raise InsufficientInventoryError(remaining=self.tickets_remaining)

    def price_for(self, quantity: int) -> Decimal:
        return (self.ticket_price * quantity).quantize(PRICE_QUANTUM)

    def is_managed_by(self, user: UserEntity) -> bool:
        return user.is_admin or self.organizer_id == user.id

    @Logger.io
    def cancel(self) -> 'EventEntity':
        if not self.is_active:
            raise DomainError('Event is already cancelled')
        return attrs.evolve(
            self, status=EventStatus.CANCELLED, updated_at=datetime.now(timezone.utc)
        )
