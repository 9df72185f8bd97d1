"""
Unit tests for BookTicketsUseCase

Test Coverage:
1. Quantity validation
2. Successful booking (one transaction, unique numbers, hold deadline)
3. Precondition failures roll back without writing tickets
4. Ticket number collisions (pre-check and unique constraint on commit)
"""

from datetime import timedelta
from decimal import Decimal

import pytest
from sqlalchemy.exc import IntegrityError

from src.platform.config.core_setting import settings
from src.platform.exception.exceptions import DomainError, NotFoundError
from src.platform.state.keyed_lock import KeyedLock
from src.platform.types.utc_datetime import utc_now
from src.service.ticketing.app.command import book_tickets_use_case as module
from src.service.ticketing.app.command.book_tickets_use_case import BookTicketsUseCase
from src.service.ticketing.domain.enum.event_status import EventStatus
from src.service.ticketing.domain.enum.ticket_status import TicketStatus
from src.service.ticketing.domain.reservation_errors import (
    DuplicateTicketNumberError,
    EventInactiveError,
    InsufficientInventoryError,
)
from src.service.ticketing.domain.ticket_number import is_valid_ticket_number
from test.service.ticketing.unit.helpers import FakeUnitOfWork, make_event


pytestmark = pytest.mark.unit


def _collision_error() -> IntegrityError:
    return IntegrityError(
        'INSERT INTO ticket', {}, Exception('UNIQUE constraint failed: ticket.ticket_number')
    )


class TestBookTickets:
    def setup_method(self):
        self.uow = FakeUnitOfWork()
        self.event = make_event(event_id=1, total_tickets=10, ticket_price=Decimal('20.00'))
        self.uow.event_command_repo.get_by_id.return_value = self.event
        self.uow.event_command_repo.decrement_tickets_remaining.return_value = True
        self.uow.ticket_command_repo.find_existing_ticket_numbers.return_value = set()
        self.uow.ticket_command_repo.create_many.side_effect = lambda *, tickets: tickets

        self.use_case = BookTicketsUseCase(uow_factory=lambda: self.uow, event_lock=KeyedLock())

    @pytest.mark.parametrize('quantity', [0, -1])
    async def test_quantity_must_be_positive(self, quantity: int):
        with pytest.raises(DomainError, match='Quantity must be at least 1'):
            await self.use_case.execute(event_id=1, user_id=2, quantity=quantity)

        self.uow.event_command_repo.get_by_id.assert_not_awaited()

    async def test_quantity_is_capped_per_booking(self):
        with pytest.raises(DomainError, match='Cannot book more than'):
            await self.use_case.execute(
                event_id=1, user_id=2, quantity=settings.MAX_TICKETS_PER_BOOKING + 1
            )

    async def test_reserves_tickets_in_one_commit(self):
        before = utc_now()

        result = await self.use_case.execute(event_id=1, user_id=2, quantity=3)

        assert self.uow.committed == 1
        self.uow.event_command_repo.decrement_tickets_remaining.assert_awaited_once_with(
            event_id=1, quantity=3
        )
        tickets = self.uow.ticket_command_repo.create_many.await_args.kwargs['tickets']
        assert len(tickets) == 3
        assert {ticket.status for ticket in tickets} == {TicketStatus.RESERVED}
        assert {ticket.user_id for ticket in tickets} == {2}
        assert {ticket.price for ticket in tickets} == {Decimal('20.00')}
        # One hold deadline shared by the whole booking
        assert len({ticket.reservation_expiry for ticket in tickets}) == 1

        assert result.total_price == Decimal('60.00')
        assert result.ticket_ids == [ticket.id for ticket in tickets]
        assert len(set(result.ticket_numbers)) == 3
        assert all(is_valid_ticket_number(number) for number in result.ticket_numbers)
        hold = timedelta(minutes=settings.RESERVATION_HOLD_MINUTES)
        assert before + hold <= result.reservation_expiry <= utc_now() + hold

    async def test_missing_event_is_not_found(self):
        self.uow.event_command_repo.get_by_id.return_value = None

        with pytest.raises(NotFoundError, match='Event not found'):
            await self.use_case.execute(event_id=404, user_id=2, quantity=1)

        assert self.uow.committed == 0
        self.uow.ticket_command_repo.create_many.assert_not_awaited()

    async def test_inactive_event_cannot_be_booked(self):
        self.uow.event_command_repo.get_by_id.return_value = make_event(
            status=EventStatus.CANCELLED
        )

        with pytest.raises(EventInactiveError):
            await self.use_case.execute(event_id=1, user_id=2, quantity=1)

        self.uow.event_command_repo.decrement_tickets_remaining.assert_not_awaited()

    async def test_lost_decrement_race_reports_current_stock(self):
        self.uow.event_command_repo.get_by_id.side_effect = [
            make_event(tickets_remaining=3),
            make_event(tickets_remaining=1),
        ]
        self.uow.event_command_repo.decrement_tickets_remaining.return_value = False

        with pytest.raises(InsufficientInventoryError) as exc_info:
            await self.use_case.execute(event_id=1, user_id=2, quantity=2)

        assert exc_info.value.remaining == 1
        assert self.uow.committed == 0
        assert self.uow.rolled_back == 1
        self.uow.ticket_command_repo.create_many.assert_not_awaited()

    async def test_duplicate_candidates_are_redrawn(self, monkeypatch: pytest.MonkeyPatch):
        candidates = iter(
            ['EVTEZ-111111-000001', 'EVTEZ-111111-000001', 'EVTEZ-222222-000002']
        )
        monkeypatch.setattr(module, 'generate_ticket_number', lambda: next(candidates))

        result = await self.use_case.execute(event_id=1, user_id=2, quantity=2)

        assert result.ticket_numbers == ['EVTEZ-111111-000001', 'EVTEZ-222222-000002']

    async def test_numbers_taken_in_storage_are_redrawn(self, monkeypatch: pytest.MonkeyPatch):
        candidates = iter(['EVTEZ-111111-000001', 'EVTEZ-333333-000003'])
        monkeypatch.setattr(module, 'generate_ticket_number', lambda: next(candidates))
        self.uow.ticket_command_repo.find_existing_ticket_numbers.side_effect = [
            {'EVTEZ-111111-000001'},
            set(),
        ]

        result = await self.use_case.execute(event_id=1, user_id=2, quantity=1)

        assert result.ticket_numbers == ['EVTEZ-333333-000003']

    async def test_unique_constraint_race_retries_whole_booking(self):
        created = []

        def create_many(*, tickets):
            if not created:
                created.append(tickets)
                raise _collision_error()
            return tickets

        self.uow.ticket_command_repo.create_many.side_effect = create_many

        result = await self.use_case.execute(event_id=1, user_id=2, quantity=2)

        assert self.uow.ticket_command_repo.create_many.await_count == 2
        assert self.uow.event_command_repo.decrement_tickets_remaining.await_count == 2
        assert self.uow.committed == 1
        assert len(result.ticket_ids) == 2

    async def test_gives_up_after_repeated_collisions(self):
        self.uow.ticket_command_repo.create_many.side_effect = _collision_error()

        with pytest.raises(DuplicateTicketNumberError):
            await self.use_case.execute(event_id=1, user_id=2, quantity=1)

        assert (
            self.uow.ticket_command_repo.create_many.await_count
            == settings.TICKET_NUMBER_MAX_RETRIES
        )
        assert self.uow.committed == 0
