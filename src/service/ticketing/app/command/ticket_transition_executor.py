"""
Persist one ticket status change inside an open Unit of Work.

Shared by every command that moves a ticket (cancel, check-in, payment,
refund, expiry sweep) so the transition table and its inventory side effect
live in exactly one code path.
"""

from datetime import datetime
from typing import Optional

from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.reservation_metrics import metrics
from src.service.ticketing.domain.entity.ticket_entity import TicketEntity
from src.service.ticketing.domain.enum.ticket_status import TicketStatus


async def apply_ticket_transition(
    *,
    uow: AbstractUnitOfWork,
    ticket: TicketEntity,
    to_status: TicketStatus,
    now: datetime,
) -> Optional[TicketEntity]:
    """
    Returns the updated ticket, or None when another actor changed the ticket
    first (the guarded UPDATE matched no row).

    Raises:
        InvalidTransitionError: the transition is not in the table
    """
    updated, transition = ticket.transition_to(to_status, now=now)

    saved = await uow.ticket_command_repo.save_transition(
        ticket=updated, from_status=transition.from_status
    )
    if not saved:
        Logger.base.info(
            f'🔁 [TRANSITION] Ticket {ticket.id} already left {transition.from_status}, no-op'
        )
        return None

    if transition.releases_seat:
        await uow.event_command_repo.increment_tickets_remaining_if_active(
            event_id=ticket.event_id, quantity=1
        )

    metrics.record_transition(
        from_status=transition.from_status.value, to_status=transition.to_status.value
    )
    return updated
