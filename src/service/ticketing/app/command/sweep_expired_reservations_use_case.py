from datetime import datetime
from typing import Callable, Optional
from uuid import UUID

from opentelemetry import trace

from src.platform.config.core_setting import settings
from src.platform.database.retry import run_with_storage_retry
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.logging.loguru_io import Logger
from src.platform.state.keyed_lock import KeyedLock
from src.platform.types.utc_datetime import utc_now
from src.service.ticketing.app.command.ticket_transition_executor import apply_ticket_transition
from src.service.ticketing.app.dto.reservation_results import SweepResult
from src.service.ticketing.app.interface.i_ticket_query_repo import ITicketQueryRepo
from src.service.ticketing.domain.enum.ticket_status import TicketStatus


class SweepExpiredReservationsUseCase:
    """
    Return expired holds to inventory.

    Each ticket is reclaimed in its own transaction through the guarded
    reserved -> cancelled transition, so a ticket paid (or reclaimed by
    another sweeper) in the meantime is a no-op and a failure on one ticket
    never blocks the rest of the batch.
    """

    def __init__(
        self,
        *,
        uow_factory: Callable[[], AbstractUnitOfWork],
        ticket_query_repo: ITicketQueryRepo,
        event_lock: KeyedLock,
    ) -> None:
        self.uow_factory = uow_factory
        self.ticket_query_repo = ticket_query_repo
        self.event_lock = event_lock
        self.tracer = trace.get_tracer(__name__)

    @Logger.io
    async def execute(
        self, *, now: Optional[datetime] = None, batch_size: Optional[int] = None
    ) -> SweepResult:
        now = now or utc_now()
        limit = batch_size or settings.RESERVATION_SWEEP_BATCH_SIZE

        with self.tracer.start_as_current_span(
            'use_case.sweep_expired_reservations', attributes={'sweep.batch_size': limit}
        ) as span:
            expired = await self.ticket_query_repo.list_expired_reservations(now=now, limit=limit)
            reclaimed = 0
            failed = 0

            for ticket in expired:
                try:
                    async with self.event_lock.hold(ticket.event_id):
                        if await run_with_storage_retry(
                            lambda: self._reclaim(ticket_id=ticket.id, now=now),
                            description=f'reclaim ticket {ticket.id}',
                        ):
                            reclaimed += 1
                except Exception as e:
                    failed += 1
                    Logger.base.error(f'❌ [SWEEPER] Failed to reclaim ticket {ticket.id}: {e}')

            span.set_attribute('sweep.reclaimed', reclaimed)
            span.set_attribute('sweep.failed', failed)

        if expired:
            Logger.base.info(
                f'🧹 [SWEEPER] Reclaimed {reclaimed}/{len(expired)} expired holds'
                + (f', {failed} failed' if failed else '')
            )
        return SweepResult(reclaimed_count=reclaimed, failed_count=failed)

    async def _reclaim(self, *, ticket_id: UUID, now: datetime) -> bool:
        async with self.uow_factory() as uow:
            ticket = await uow.ticket_command_repo.get_by_id(ticket_id=ticket_id)
            if ticket is None or not ticket.is_hold_expired(now=now):
                return False

            cancelled = await apply_ticket_transition(
                uow=uow, ticket=ticket, to_status=TicketStatus.CANCELLED, now=now
            )
            if cancelled is None:
                return False
            await uow.commit()
            return True
