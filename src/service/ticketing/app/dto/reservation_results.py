from datetime import datetime
from decimal import Decimal
from typing import Dict, List
from uuid import UUID

import attrs

from src.service.ticketing.app.dto.page import Page
from src.service.ticketing.domain.entity.event_entity import EventEntity
from src.service.ticketing.domain.entity.ticket_entity import TicketEntity
from src.service.ticketing.domain.entity.transaction_entity import TransactionEntity
from src.service.ticketing.domain.enum.ticket_status import SEAT_HOLDING_STATUSES
from src.service.ticketing.domain.ticket_verification import TicketVerification


@attrs.frozen
class BookingResult:
    ticket_ids: List[UUID]
    ticket_numbers: List[str]
    total_price: Decimal
    reservation_expiry: datetime


@attrs.frozen
class PaymentConfirmationResult:
    confirmed_count: int
    transaction_ids: List[UUID] = attrs.field(factory=list)
    skipped_ticket_ids: List[UUID] = attrs.field(factory=list)


@attrs.frozen
class PaymentIntentResult:
    payment_reference: str
    amount: Decimal
    ticket_ids: List[UUID]


@attrs.frozen
class SweepResult:
    reclaimed_count: int
    failed_count: int = 0


@attrs.frozen
class InventorySnapshot:
    event: EventEntity
    counts_by_status: Dict[str, int]

    @property
    def seats_held(self) -> int:
        return sum(
            self.counts_by_status.get(status.value, 0) for status in SEAT_HOLDING_STATUSES
        )

    @property
    def is_consistent(self) -> bool:
        if not self.event.is_active:
            return True
        return self.event.tickets_remaining == self.event.total_tickets - self.seats_held


@attrs.frozen
class EventTicketsPage:
    page: Page[TicketEntity]
    counts_by_status: Dict[str, int]


@attrs.frozen
class EventTransactionsPage:
    page: Page[TransactionEntity]
    total_revenue: Decimal


@attrs.frozen
class TicketVerificationReport:
    verification: TicketVerification
    ticket: TicketEntity
    event: EventEntity
