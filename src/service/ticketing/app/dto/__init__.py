"""Application layer DTOs"""

from src.service.ticketing.app.dto.page import MAX_PAGE_LIMIT, Page, PageRequest
from src.service.ticketing.app.dto.reservation_results import (
    BookingResult,
    EventTicketsPage,
    EventTransactionsPage,
    InventorySnapshot,
    PaymentConfirmationResult,
    PaymentIntentResult,
    SweepResult,
    TicketVerificationReport,
)

__all__ = [
    'MAX_PAGE_LIMIT',
    'BookingResult',
    'EventTicketsPage',
    'EventTransactionsPage',
    'InventorySnapshot',
    'Page',
    'PageRequest',
    'PaymentConfirmationResult',
    'PaymentIntentResult',
    'SweepResult',
    'TicketVerificationReport',
]
