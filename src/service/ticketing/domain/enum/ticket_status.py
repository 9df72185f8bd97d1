from enum import StrEnum


class TicketStatus(StrEnum):
    RESERVED = 'reserved'
    PAID = 'paid'
    CANCELLED = 'cancelled'
    USED = 'used'


# Statuses that hold a seat out of the event's inventory
SEAT_HOLDING_STATUSES = frozenset({TicketStatus.RESERVED, TicketStatus.PAID, TicketStatus.USED})
