from datetime import timedelta
import time
from typing import Callable, List, Self, Set

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace
from sqlalchemy.exc import IntegrityError

from src.platform.config.core_setting import settings
from src.platform.config.di import Container
from src.platform.database.retry import run_with_storage_retry
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import CustomBaseError, DomainError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.reservation_metrics import metrics
from src.platform.state.keyed_lock import KeyedLock
from src.platform.types.utc_datetime import utc_now
from src.service.ticketing.app.dto.reservation_results import BookingResult
from src.service.ticketing.domain.entity.ticket_entity import TicketEntity
from src.service.ticketing.domain.reservation_errors import (
    DuplicateTicketNumberError,
    EventEndedError,
    EventInactiveError,
    InsufficientInventoryError,
)
from src.service.ticketing.domain.ticket_number import generate_ticket_number


def _is_ticket_number_collision(error: IntegrityError) -> bool:
    return 'ticket_number' in str(error.orig)


def _booking_result_label(error: BaseException) -> str:
    if isinstance(error, EventInactiveError):
        return 'inactive'
    if isinstance(error, EventEndedError):
        return 'ended'
    if isinstance(error, InsufficientInventoryError):
        return 'insufficient'
    if isinstance(error, NotFoundError):
        return 'not_found'
    return 'error'


class BookTicketsUseCase:
    """
    Reserve `quantity` tickets for one event in a single transaction.

    Flow (under the event's in-process lock):
    1. Load the event and check preconditions (exists, active, not ended, stock)
    2. Guarded decrement of tickets_remaining (database enforces the stock check)
    3. Insert the reserved tickets with unique ticket numbers and a shared hold
    4. Commit; any failure before this point rolls everything back

    A unique-constraint race on ticket_number retries the whole unit with fresh
    numbers; transient storage errors are retried by run_with_storage_retry.
    """

    def __init__(
        self,
        *,
        uow_factory: Callable[[], AbstractUnitOfWork],
        event_lock: KeyedLock,
    ) -> None:
        self.uow_factory = uow_factory
        self.event_lock = event_lock
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(
        cls,
        uow_factory: Callable[[], AbstractUnitOfWork] = Depends(
            Provide[Container.unit_of_work.provider]
        ),
        event_lock: KeyedLock = Depends(Provide[Container.event_lock]),
    ) -> Self:
        return cls(uow_factory=uow_factory, event_lock=event_lock)

    @Logger.io
    async def execute(self, *, event_id: int, user_id: int, quantity: int) -> BookingResult:
        if quantity < 1:
            raise DomainError('Quantity must be at least 1')
        if quantity > settings.MAX_TICKETS_PER_BOOKING:
            raise DomainError(
                f'Cannot book more than {settings.MAX_TICKETS_PER_BOOKING} tickets at once'
            )

        start_time = time.perf_counter()
        with self.tracer.start_as_current_span(
            'use_case.book_tickets',
            attributes={
                'event.id': event_id,
                'user.id': user_id,
                'booking.quantity': quantity,
            },
        ):
            try:
                async with self.event_lock.hold(event_id):
                    result = await self._book_with_unique_numbers(
                        event_id=event_id, user_id=user_id, quantity=quantity
                    )
            except CustomBaseError as e:
                metrics.record_booking(
                    event_id=event_id,
                    result=_booking_result_label(e),
                    quantity=quantity,
                    duration=time.perf_counter() - start_time,
                )
                raise

        metrics.record_booking(
            event_id=event_id,
            result='success',
            quantity=quantity,
            duration=time.perf_counter() - start_time,
        )
        Logger.base.info(
            f'🎟️ [BOOKING] User {user_id} reserved {quantity} tickets for event {event_id}, '
            f'hold until {result.reservation_expiry.isoformat()}'
        )
        return result

    async def _book_with_unique_numbers(
        self, *, event_id: int, user_id: int, quantity: int
    ) -> BookingResult:
        max_attempts = settings.TICKET_NUMBER_MAX_RETRIES
        for attempt in range(1, max_attempts + 1):
            try:
                return await run_with_storage_retry(
                    lambda: self._reserve_once(
                        event_id=event_id, user_id=user_id, quantity=quantity
                    ),
                    description=f'book tickets for event {event_id}',
                )
            except IntegrityError as e:
                if not _is_ticket_number_collision(e):
                    raise
                Logger.base.warning(
                    f'⚠️ [BOOKING] Ticket number collision on commit, '
                    f'attempt {attempt}/{max_attempts}'
                )
        raise DuplicateTicketNumberError(attempts=max_attempts)

    async def _reserve_once(self, *, event_id: int, user_id: int, quantity: int) -> BookingResult:
        now = utc_now()
        async with self.uow_factory() as uow:
            event = await uow.event_command_repo.get_by_id(event_id=event_id)
            if event is None:
                raise NotFoundError('Event not found')
            event.ensure_bookable(quantity=quantity, now=now)

            decremented = await uow.event_command_repo.decrement_tickets_remaining(
                event_id=event_id, quantity=quantity
            )
            if not decremented:
                # A concurrent writer won; report whichever precondition now fails
                current = await uow.event_command_repo.get_by_id(event_id=event_id)
                if current is None:
                    raise NotFoundError('Event not found')
                current.ensure_bookable(quantity=quantity, now=now)
                raise InsufficientInventoryError(remaining=current.tickets_remaining)

            ticket_numbers = await self._allocate_ticket_numbers(uow=uow, quantity=quantity)
            hold = timedelta(minutes=settings.RESERVATION_HOLD_MINUTES)
            tickets = await uow.ticket_command_repo.create_many(
                tickets=[
                    TicketEntity.reserve(
                        ticket_number=ticket_number,
                        event_id=event_id,
                        user_id=user_id,
                        price=event.ticket_price,
                        now=now,
                        hold=hold,
                    )
                    for ticket_number in ticket_numbers
                ]
            )
            await uow.commit()

        return BookingResult(
            ticket_ids=[ticket.id for ticket in tickets],
            ticket_numbers=[ticket.ticket_number for ticket in tickets],
            total_price=event.price_for(quantity),
            reservation_expiry=now + hold,
        )

    async def _allocate_ticket_numbers(
        self, *, uow: AbstractUnitOfWork, quantity: int
    ) -> List[str]:
        """Draw numbers unique against storage and against each other"""
        allocated: List[str] = []
        taken: Set[str] = set()
        for _ in range(quantity):
            allocated.append(await self._draw_unique_number(uow=uow, taken=taken))
            taken.add(allocated[-1])
        return allocated

    async def _draw_unique_number(self, *, uow: AbstractUnitOfWork, taken: Set[str]) -> str:
        max_attempts = settings.TICKET_NUMBER_MAX_RETRIES
        for _ in range(max_attempts):
            candidate = generate_ticket_number()
            if candidate in taken:
                continue
            existing = await uow.ticket_command_repo.find_existing_ticket_numbers(
                ticket_numbers=[candidate]
            )
            if not existing:
                return candidate
        raise DuplicateTicketNumberError(attempts=max_attempts)
