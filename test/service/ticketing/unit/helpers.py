from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Optional
from unittest.mock import AsyncMock

from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.service.ticketing.domain.entity.event_entity import EventEntity
from src.service.ticketing.domain.entity.ticket_entity import TicketEntity
from src.service.ticketing.domain.entity.transaction_entity import TransactionEntity
from src.service.ticketing.domain.enum.event_category import EventCategory
from src.service.ticketing.domain.enum.event_status import EventStatus
from src.service.ticketing.domain.enum.ticket_status import TicketStatus
from src.service.ticketing.domain.enum.transaction_status import (
    PaymentMethod,
    TransactionStatus,
)


NOW = datetime(2030, 6, 1, 12, 0, tzinfo=timezone.utc)


class FakeUnitOfWork(AbstractUnitOfWork):
    """Repositories are AsyncMocks; commits and rollbacks are counted"""

    def __init__(self) -> None:
        self.event_command_repo = AsyncMock()
        self.ticket_command_repo = AsyncMock()
        self.transaction_command_repo = AsyncMock()
        self.committed = 0
        self.rolled_back = 0

    async def _commit(self) -> None:
        self.committed += 1

    async def rollback(self) -> None:
        self.rolled_back += 1


def make_event(
    *,
    event_id: int = 1,
    organizer_id: int = 1,
    total_tickets: int = 10,
    tickets_remaining: Optional[int] = None,
    ticket_price: Decimal = Decimal('20.00'),
    status: EventStatus = EventStatus.ACTIVE,
    start_at: datetime = NOW + timedelta(days=1),
    end_at: datetime = NOW + timedelta(days=1, hours=4),
) -> EventEntity:
    return EventEntity(
        id=event_id,
        title='Summer Jazz Night',
        description='An evening of live jazz',
        venue='Riverside Hall',
        organizer_id=organizer_id,
        start_at=start_at,
        end_at=end_at,
        total_tickets=total_tickets,
        tickets_remaining=total_tickets if tickets_remaining is None else tickets_remaining,
        ticket_price=ticket_price,
        category=EventCategory.CONCERT,
        status=status,
    )


def make_ticket(
    *,
    event_id: int = 1,
    user_id: int = 2,
    status: TicketStatus = TicketStatus.RESERVED,
    price: Decimal = Decimal('20.00'),
    reservation_expiry: Optional[datetime] = NOW + timedelta(minutes=10),
    ticket_number: str = 'EVTEZ-123456-654321',
) -> TicketEntity:
    return TicketEntity(
        ticket_number=ticket_number,
        event_id=event_id,
        user_id=user_id,
        price=price,
        status=status,
        reservation_expiry=reservation_expiry if status == TicketStatus.RESERVED else None,
        purchased_at=NOW,
        created_at=NOW,
        updated_at=NOW,
    )


def make_transaction(
    *,
    ticket: TicketEntity,
    status: TransactionStatus = TransactionStatus.COMPLETED,
) -> TransactionEntity:
    return TransactionEntity(
        user_id=ticket.user_id,
        event_id=ticket.event_id,
        ticket_id=ticket.id,
        amount=ticket.price,
        payment_method=PaymentMethod.CREDIT_CARD,
        payment_id='PAY_MOCK_ABCD1234',
        status=status,
        created_at=NOW,
        updated_at=NOW,
    )
