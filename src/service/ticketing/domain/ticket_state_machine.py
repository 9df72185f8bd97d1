"""
Ticket lifecycle transition table.

    reserved ──pay──────▶ paid ──check in──▶ used
        │                   │
        └──expire/cancel──▶ cancelled ◀──cancel/refund

Every status change goes through `plan_transition`; anything not listed in
ALLOWED_TRANSITIONS raises InvalidTransitionError. A transition into
`cancelled` gives the seat back to the event (only while the event is active,
which the caller checks against storage).
"""

from datetime import datetime

import attrs

from src.service.ticketing.domain.enum.ticket_status import TicketStatus
from src.service.ticketing.domain.reservation_errors import InvalidTransitionError


ALLOWED_TRANSITIONS: dict[TicketStatus, frozenset[TicketStatus]] = {
    TicketStatus.RESERVED: frozenset({TicketStatus.PAID, TicketStatus.CANCELLED}),
    TicketStatus.PAID: frozenset({TicketStatus.USED, TicketStatus.CANCELLED}),
    TicketStatus.CANCELLED: frozenset(),
    TicketStatus.USED: frozenset(),
}


@attrs.frozen
class TicketTransition:
    from_status: TicketStatus
    to_status: TicketStatus
    releases_seat: bool
    marks_checked: bool
    clears_reservation_expiry: bool
    occurred_at: datetime


def can_transition(from_status: TicketStatus, to_status: TicketStatus) -> bool:
    return to_status in ALLOWED_TRANSITIONS.get(from_status, frozenset())


def plan_transition(
    *, from_status: TicketStatus, to_status: TicketStatus, now: datetime
) -> TicketTransition:
    if not can_transition(from_status, to_status):
        raise InvalidTransitionError(from_status=from_status.value, to_status=to_status.value)

    return TicketTransition(
        from_status=from_status,
        to_status=to_status,
        releases_seat=to_status == TicketStatus.CANCELLED,
        marks_checked=to_status == TicketStatus.USED,
        clears_reservation_expiry=from_status == TicketStatus.RESERVED,
        occurred_at=now,
    )
