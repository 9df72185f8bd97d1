"""Reservation Domain Enums"""

from src.service.ticketing.domain.enum.event_category import EventCategory
from src.service.ticketing.domain.enum.event_status import EventStatus
from src.service.ticketing.domain.enum.ticket_status import SEAT_HOLDING_STATUSES, TicketStatus
from src.service.ticketing.domain.enum.transaction_status import PaymentMethod, TransactionStatus

__all__ = [
    'EventCategory',
    'EventStatus',
    'PaymentMethod',
    'SEAT_HOLDING_STATUSES',
    'TicketStatus',
    'TransactionStatus',
]
