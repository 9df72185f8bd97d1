from typing import Callable, Self
from uuid import UUID

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.retry import run_with_storage_retry
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import DomainError, ForbiddenError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.platform.state.keyed_lock import KeyedLock
from src.platform.types.utc_datetime import utc_now
from src.service.ticketing.app.command.ticket_transition_executor import apply_ticket_transition
from src.service.ticketing.app.interface.i_transaction_query_repo import ITransactionQueryRepo
from src.service.ticketing.domain.entity.transaction_entity import TransactionEntity
from src.service.ticketing.domain.entity.user_entity import UserEntity
from src.service.ticketing.domain.enum.ticket_status import TicketStatus
from src.service.ticketing.domain.enum.transaction_status import TransactionStatus
from src.service.ticketing.domain.reservation_errors import InvalidTransitionError


class RefundTransactionUseCase:
    """
    Admin refund: the transaction becomes refunded and its ticket goes
    paid -> cancelled in the same commit.
    """

    def __init__(
        self,
        *,
        uow_factory: Callable[[], AbstractUnitOfWork],
        transaction_query_repo: ITransactionQueryRepo,
        event_lock: KeyedLock,
    ) -> None:
        self.uow_factory = uow_factory
        self.transaction_query_repo = transaction_query_repo
        self.event_lock = event_lock

    @classmethod
    @inject
    def depends(
        cls,
        uow_factory: Callable[[], AbstractUnitOfWork] = Depends(
            Provide[Container.unit_of_work.provider]
        ),
        transaction_query_repo: ITransactionQueryRepo = Depends(
            Provide[Container.transaction_query_repo]
        ),
        event_lock: KeyedLock = Depends(Provide[Container.event_lock]),
    ) -> Self:
        return cls(
            uow_factory=uow_factory,
            transaction_query_repo=transaction_query_repo,
            event_lock=event_lock,
        )

    @Logger.io
    async def execute(
        self, *, transaction_id: UUID, acting_user: UserEntity
    ) -> TransactionEntity:
        if not acting_user.is_admin:
            raise ForbiddenError('Only admins can refund transactions')

        transaction = await self.transaction_query_repo.get_by_id(transaction_id=transaction_id)
        if transaction is None:
            raise NotFoundError('Transaction not found')

        async with self.event_lock.hold(transaction.event_id):
            refunded = await run_with_storage_retry(
                lambda: self._refund(transaction_id=transaction_id),
                description=f'refund transaction {transaction_id}',
            )

        Logger.base.info(
            f'💸 [REFUND] Transaction {transaction_id} refunded by admin {acting_user.id}'
        )
        return refunded

    async def _refund(self, *, transaction_id: UUID) -> TransactionEntity:
        async with self.uow_factory() as uow:
            transaction = await uow.transaction_command_repo.get_by_id(
                transaction_id=transaction_id
            )
            if transaction is None:
                raise NotFoundError('Transaction not found')
            refunded = transaction.refund()

            ticket = await uow.ticket_command_repo.get_by_id(ticket_id=transaction.ticket_id)
            if ticket is None:
                raise NotFoundError('Ticket not found')
            if ticket.status != TicketStatus.PAID:
                raise InvalidTransitionError(
                    from_status=ticket.status.value,
                    to_status=TicketStatus.CANCELLED.value,
                    message=f'Cannot refund a ticket that is {ticket.status.value}',
                )

            updated = await uow.transaction_command_repo.update_status(
                transaction_id=transaction_id,
                from_status=TransactionStatus.COMPLETED,
                to_status=TransactionStatus.REFUNDED,
            )
            if not updated:
                raise DomainError('Transaction is already refunded', 409)

            cancelled = await apply_ticket_transition(
                uow=uow, ticket=ticket, to_status=TicketStatus.CANCELLED, now=utc_now()
            )
            if cancelled is None:
                raise InvalidTransitionError(
                    from_status=ticket.status.value,
                    to_status=TicketStatus.CANCELLED.value,
                    message='Ticket was changed by another request, try again',
                )
            await uow.commit()
            return refunded
