from typing import Callable, List, Self
from uuid import UUID

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.retry import run_with_storage_retry
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.reservation_metrics import metrics
from src.platform.types.utc_datetime import utc_now
from src.service.ticketing.app.command.ticket_transition_executor import apply_ticket_transition
from src.service.ticketing.app.dto.reservation_results import PaymentConfirmationResult
from src.service.ticketing.domain.entity.transaction_entity import TransactionEntity
from src.service.ticketing.domain.enum.ticket_status import TicketStatus
from src.service.ticketing.domain.enum.transaction_status import PaymentMethod


class ConfirmPaymentUseCase:
    """
    Apply the payment provider's callback (delivered at least once).

    Every reserved ticket with a live hold becomes paid and gets one completed
    transaction. Anything else is skipped and logged, never errored, so a
    redelivered callback is a no-op.
    """

    def __init__(self, *, uow_factory: Callable[[], AbstractUnitOfWork]) -> None:
        self.uow_factory = uow_factory

    @classmethod
    @inject
    def depends(
        cls,
        uow_factory: Callable[[], AbstractUnitOfWork] = Depends(
            Provide[Container.unit_of_work.provider]
        ),
    ) -> Self:
        return cls(uow_factory=uow_factory)

    @Logger.io
    async def execute(
        self,
        *,
        payment_reference: str,
        ticket_ids: List[UUID],
        success: bool = True,
        payment_method: PaymentMethod = PaymentMethod.CREDIT_CARD,
    ) -> PaymentConfirmationResult:
        unique_ticket_ids = list(dict.fromkeys(ticket_ids))

        if not success:
            # Holds stay in place until the sweeper reclaims them
            Logger.base.warning(
                f'💳 [PAYMENT] Payment {payment_reference} failed, '
                f'{len(unique_ticket_ids)} tickets left on hold'
            )
            return PaymentConfirmationResult(
                confirmed_count=0, skipped_ticket_ids=unique_ticket_ids
            )

        result = await run_with_storage_retry(
            lambda: self._confirm(
                payment_reference=payment_reference,
                ticket_ids=unique_ticket_ids,
                payment_method=payment_method,
            ),
            description=f'confirm payment {payment_reference}',
        )

        metrics.record_payment_confirmed(count=result.confirmed_count)
        Logger.base.info(
            f'✅ [PAYMENT] {payment_reference}: confirmed {result.confirmed_count}, '
            f'skipped {len(result.skipped_ticket_ids)}'
        )
        return result

    async def _confirm(
        self,
        *,
        payment_reference: str,
        ticket_ids: List[UUID],
        payment_method: PaymentMethod,
    ) -> PaymentConfirmationResult:
        now = utc_now()
        transactions: List[TransactionEntity] = []
        skipped: List[UUID] = []

        async with self.uow_factory() as uow:
            tickets = {
                ticket.id: ticket
                for ticket in await uow.ticket_command_repo.get_by_ids(ticket_ids=ticket_ids)
            }

            for ticket_id in ticket_ids:
                ticket = tickets.get(ticket_id)
                if ticket is None:
                    Logger.base.warning(f'⚠️ [PAYMENT] Ticket {ticket_id} not found, skipped')
                    skipped.append(ticket_id)
                    continue
                if ticket.status != TicketStatus.RESERVED:
                    Logger.base.info(
                        f'⏭️ [PAYMENT] Ticket {ticket_id} is {ticket.status}, skipped'
                    )
                    skipped.append(ticket_id)
                    continue
                if ticket.is_hold_expired(now=now):
                    Logger.base.warning(f'⌛ [PAYMENT] Hold on ticket {ticket_id} expired, skipped')
                    skipped.append(ticket_id)
                    continue

                paid = await apply_ticket_transition(
                    uow=uow, ticket=ticket, to_status=TicketStatus.PAID, now=now
                )
                if paid is None:
                    skipped.append(ticket_id)
                    continue

                transactions.append(
                    TransactionEntity.completed_for(
                        user_id=paid.user_id,
                        event_id=paid.event_id,
                        ticket_id=paid.id,
                        amount=paid.price,
                        payment_method=payment_method,
                        payment_id=payment_reference,
                        now=now,
                    )
                )

            if transactions:
                await uow.transaction_command_repo.create_many(transactions=transactions)
            await uow.commit()

        return PaymentConfirmationResult(
            confirmed_count=len(transactions),
            transaction_ids=[transaction.id for transaction in transactions],
            skipped_ticket_ids=skipped,
        )
