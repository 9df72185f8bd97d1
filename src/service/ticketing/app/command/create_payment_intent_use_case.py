from decimal import Decimal
from typing import Callable, List, Self
from uuid import UUID

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import DomainError, ForbiddenError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.platform.types.utc_datetime import utc_now
from src.service.ticketing.app.dto.reservation_results import PaymentIntentResult
from src.service.ticketing.app.interface.i_payment_gateway import IPaymentGateway
from src.service.ticketing.domain.entity.event_entity import PRICE_QUANTUM
from src.service.ticketing.domain.enum.ticket_status import TicketStatus
from src.service.ticketing.domain.reservation_errors import InvalidTransitionError


class CreatePaymentIntentUseCase:
    def __init__(
        self,
        *,
        uow_factory: Callable[[], AbstractUnitOfWork],
        payment_gateway: IPaymentGateway,
    ) -> None:
        self.uow_factory = uow_factory
        self.payment_gateway = payment_gateway

    @classmethod
    @inject
    def depends(
        cls,
        uow_factory: Callable[[], AbstractUnitOfWork] = Depends(
            Provide[Container.unit_of_work.provider]
        ),
        payment_gateway: IPaymentGateway = Depends(Provide[Container.payment_gateway]),
    ) -> Self:
        return cls(uow_factory=uow_factory, payment_gateway=payment_gateway)

    @Logger.io
    async def execute(self, *, user_id: int, ticket_ids: List[UUID]) -> PaymentIntentResult:
        unique_ticket_ids = list(dict.fromkeys(ticket_ids))
        if not unique_ticket_ids:
            raise DomainError('At least one ticket is required')

        now = utc_now()
        async with self.uow_factory() as uow:
            tickets = {
                ticket.id: ticket
                for ticket in await uow.ticket_command_repo.get_by_ids(
                    ticket_ids=unique_ticket_ids
                )
            }

        amount = Decimal('0')
        for ticket_id in unique_ticket_ids:
            ticket = tickets.get(ticket_id)
            if ticket is None:
                raise NotFoundError(f'Ticket {ticket_id} not found')
            if not ticket.is_owned_by(user_id):
                raise ForbiddenError('Only the ticket owner can pay for this ticket')
            if ticket.status != TicketStatus.RESERVED:
                raise InvalidTransitionError(
                    from_status=ticket.status.value,
                    to_status=TicketStatus.PAID.value,
                    message=f'Ticket {ticket.ticket_number} is not awaiting payment',
                )
            if ticket.is_hold_expired(now=now):
                raise InvalidTransitionError(
                    from_status=ticket.status.value,
                    to_status=TicketStatus.PAID.value,
                    message=f'Reservation for ticket {ticket.ticket_number} has expired',
                )
            amount += ticket.price

        amount = amount.quantize(PRICE_QUANTUM)
        payment_reference = await self.payment_gateway.create_payment_intent(
            user_id=user_id, ticket_ids=unique_ticket_ids, amount=amount
        )
        return PaymentIntentResult(
            payment_reference=payment_reference, amount=amount, ticket_ids=unique_ticket_ids
        )
