"""
Entry check for a ticket at the venue door. Pure: status, event window and the
current time decide the outcome; nothing is written.
"""

from datetime import datetime

import attrs

from src.service.ticketing.domain.enum.ticket_status import TicketStatus


@attrs.frozen
class TicketVerification:
    is_valid: bool
    message: str
    status: TicketStatus


def verify_ticket(
    *, status: TicketStatus, event_start: datetime, event_end: datetime, now: datetime
) -> TicketVerification:
    # First matching rule wins
    if status == TicketStatus.CANCELLED:
        return TicketVerification(False, 'Ticket has been cancelled', status)
    if status == TicketStatus.USED:
        return TicketVerification(False, 'Ticket has already been used', status)
    if now < event_start:
        return TicketVerification(False, 'Event has not started yet', status)
    if now > event_end:
        return TicketVerification(False, 'Event has already ended', status)
    return TicketVerification(True, 'Ticket is valid', status)
