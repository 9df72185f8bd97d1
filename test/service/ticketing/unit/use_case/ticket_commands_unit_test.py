"""
Unit tests for the commands that move an existing ticket:
cancel, check-in, refund and the expiry sweep.
"""

from datetime import timedelta
from unittest.mock import AsyncMock

import pytest

from src.platform.exception.exceptions import DomainError, ForbiddenError, NotFoundError
from src.platform.state.keyed_lock import KeyedLock
from src.service.ticketing.app.command.cancel_ticket_use_case import CancelTicketUseCase
from src.service.ticketing.app.command.mark_ticket_used_use_case import MarkTicketUsedUseCase
from src.service.ticketing.app.command.refund_transaction_use_case import (
    RefundTransactionUseCase,
)
from src.service.ticketing.app.command.sweep_expired_reservations_use_case import (
    SweepExpiredReservationsUseCase,
)
from src.service.ticketing.domain.entity.user_entity import UserEntity, UserRole
from src.service.ticketing.domain.enum.ticket_status import TicketStatus
from src.service.ticketing.domain.enum.transaction_status import TransactionStatus
from src.service.ticketing.domain.reservation_errors import InvalidTransitionError
from test.service.ticketing.unit.helpers import (
    NOW,
    FakeUnitOfWork,
    make_event,
    make_ticket,
    make_transaction,
)


pytestmark = pytest.mark.unit

OWNER = UserEntity(id=2, role=UserRole.USER)
STRANGER = UserEntity(id=3, role=UserRole.USER)
ORGANIZER = UserEntity(id=1, role=UserRole.ORGANIZER)
OTHER_ORGANIZER = UserEntity(id=5, role=UserRole.ORGANIZER)
ADMIN = UserEntity(id=4, role=UserRole.ADMIN)


class TestCancelTicket:
    def setup_method(self):
        self.uow = FakeUnitOfWork()
        self.ticket_query_repo = AsyncMock()
        self.uow.ticket_command_repo.save_transition.return_value = True
        self.use_case = CancelTicketUseCase(
            uow_factory=lambda: self.uow,
            ticket_query_repo=self.ticket_query_repo,
            event_lock=KeyedLock(),
        )

    def _given_ticket(self, ticket):
        self.ticket_query_repo.get_by_id.return_value = ticket
        self.uow.ticket_command_repo.get_by_id.return_value = ticket

    @pytest.mark.parametrize('status', [TicketStatus.RESERVED, TicketStatus.PAID])
    async def test_owner_cancels_and_seat_is_released(self, status: TicketStatus):
        ticket = make_ticket(status=status, user_id=OWNER.id, event_id=7)
        self._given_ticket(ticket)

        cancelled = await self.use_case.execute(ticket_id=ticket.id, acting_user=OWNER)

        assert cancelled.status == TicketStatus.CANCELLED
        assert cancelled.reservation_expiry is None
        self.uow.ticket_command_repo.save_transition.assert_awaited_once()
        assert self.uow.ticket_command_repo.save_transition.await_args.kwargs[
            'from_status'
        ] == status
        self.uow.event_command_repo.increment_tickets_remaining_if_active.assert_awaited_once_with(
            event_id=7, quantity=1
        )
        assert self.uow.committed == 1

    async def test_admin_can_cancel_any_ticket(self):
        ticket = make_ticket(user_id=OWNER.id)
        self._given_ticket(ticket)

        cancelled = await self.use_case.execute(ticket_id=ticket.id, acting_user=ADMIN)

        assert cancelled.status == TicketStatus.CANCELLED

    async def test_other_users_are_forbidden(self):
        ticket = make_ticket(user_id=OWNER.id)
        self._given_ticket(ticket)

        with pytest.raises(ForbiddenError):
            await self.use_case.execute(ticket_id=ticket.id, acting_user=STRANGER)

        self.uow.ticket_command_repo.save_transition.assert_not_awaited()

    async def test_missing_ticket_is_not_found(self):
        self._given_ticket(None)

        with pytest.raises(NotFoundError, match='Ticket not found'):
            await self.use_case.execute(ticket_id=make_ticket().id, acting_user=OWNER)

    @pytest.mark.parametrize('status', [TicketStatus.USED, TicketStatus.CANCELLED])
    async def test_terminal_tickets_cannot_be_cancelled(self, status: TicketStatus):
        ticket = make_ticket(status=status, user_id=OWNER.id)
        self._given_ticket(ticket)

        with pytest.raises(InvalidTransitionError):
            await self.use_case.execute(ticket_id=ticket.id, acting_user=OWNER)

        self.uow.event_command_repo.increment_tickets_remaining_if_active.assert_not_awaited()

    async def test_lost_race_asks_to_retry(self):
        ticket = make_ticket(user_id=OWNER.id)
        self._given_ticket(ticket)
        self.uow.ticket_command_repo.save_transition.return_value = False

        with pytest.raises(InvalidTransitionError, match='changed by another request'):
            await self.use_case.execute(ticket_id=ticket.id, acting_user=OWNER)

        self.uow.event_command_repo.increment_tickets_remaining_if_active.assert_not_awaited()
        assert self.uow.committed == 0


class TestMarkTicketUsed:
    def setup_method(self):
        self.uow = FakeUnitOfWork()
        self.uow.event_command_repo.get_by_id.return_value = make_event(organizer_id=ORGANIZER.id)
        self.uow.ticket_command_repo.save_transition.return_value = True
        self.use_case = MarkTicketUsedUseCase(uow_factory=lambda: self.uow)

    @pytest.mark.parametrize('user', [ORGANIZER, ADMIN])
    async def test_paid_ticket_is_checked_in(self, user: UserEntity):
        ticket = make_ticket(status=TicketStatus.PAID)
        self.uow.ticket_command_repo.get_by_id.return_value = ticket

        used = await self.use_case.execute(ticket_id=ticket.id, acting_user=user)

        assert used.status == TicketStatus.USED
        assert used.checked is True
        self.uow.event_command_repo.increment_tickets_remaining_if_active.assert_not_awaited()
        assert self.uow.committed == 1

    @pytest.mark.parametrize('user', [OWNER, OTHER_ORGANIZER])
    async def test_only_event_managers_can_check_in(self, user: UserEntity):
        ticket = make_ticket(status=TicketStatus.PAID, user_id=OWNER.id)
        self.uow.ticket_command_repo.get_by_id.return_value = ticket

        with pytest.raises(ForbiddenError):
            await self.use_case.execute(ticket_id=ticket.id, acting_user=user)

    @pytest.mark.parametrize(
        'status', [TicketStatus.RESERVED, TicketStatus.CANCELLED, TicketStatus.USED]
    )
    async def test_only_paid_tickets_can_be_checked_in(self, status: TicketStatus):
        ticket = make_ticket(status=status)
        self.uow.ticket_command_repo.get_by_id.return_value = ticket

        with pytest.raises(InvalidTransitionError):
            await self.use_case.execute(ticket_id=ticket.id, acting_user=ORGANIZER)

        assert self.uow.committed == 0


class TestRefundTransaction:
    def setup_method(self):
        self.uow = FakeUnitOfWork()
        self.ticket = make_ticket(status=TicketStatus.PAID, event_id=7)
        self.transaction = make_transaction(ticket=self.ticket)
        self.transaction_query_repo = AsyncMock()
        self.transaction_query_repo.get_by_id.return_value = self.transaction
        self.uow.transaction_command_repo.get_by_id.return_value = self.transaction
        self.uow.transaction_command_repo.update_status.return_value = True
        self.uow.ticket_command_repo.get_by_id.return_value = self.ticket
        self.uow.ticket_command_repo.save_transition.return_value = True
        self.use_case = RefundTransactionUseCase(
            uow_factory=lambda: self.uow,
            transaction_query_repo=self.transaction_query_repo,
            event_lock=KeyedLock(),
        )

    async def test_refund_cancels_ticket_in_the_same_commit(self):
        refunded = await self.use_case.execute(
            transaction_id=self.transaction.id, acting_user=ADMIN
        )

        assert refunded.status == TransactionStatus.REFUNDED
        self.uow.transaction_command_repo.update_status.assert_awaited_once_with(
            transaction_id=self.transaction.id,
            from_status=TransactionStatus.COMPLETED,
            to_status=TransactionStatus.REFUNDED,
        )
        saved_ticket = self.uow.ticket_command_repo.save_transition.await_args.kwargs['ticket']
        assert saved_ticket.status == TicketStatus.CANCELLED
        self.uow.event_command_repo.increment_tickets_remaining_if_active.assert_awaited_once_with(
            event_id=7, quantity=1
        )
        assert self.uow.committed == 1

    @pytest.mark.parametrize('user', [OWNER, ORGANIZER])
    async def test_only_admins_can_refund(self, user: UserEntity):
        with pytest.raises(ForbiddenError):
            await self.use_case.execute(transaction_id=self.transaction.id, acting_user=user)

        self.transaction_query_repo.get_by_id.assert_not_awaited()

    async def test_already_refunded_is_a_conflict(self):
        refunded = make_transaction(ticket=self.ticket, status=TransactionStatus.REFUNDED)
        self.uow.transaction_command_repo.get_by_id.return_value = refunded

        with pytest.raises(DomainError, match='already refunded') as exc_info:
            await self.use_case.execute(transaction_id=refunded.id, acting_user=ADMIN)

        assert exc_info.value.status_code == 409
        assert self.uow.committed == 0

    async def test_checked_in_ticket_cannot_be_refunded(self):
        self.uow.ticket_command_repo.get_by_id.return_value = make_ticket(
            status=TicketStatus.USED
        )

        with pytest.raises(InvalidTransitionError, match='Cannot refund a ticket that is used'):
            await self.use_case.execute(transaction_id=self.transaction.id, acting_user=ADMIN)

        self.uow.transaction_command_repo.update_status.assert_not_awaited()

    async def test_concurrent_refund_loses_the_guarded_update(self):
        self.uow.transaction_command_repo.update_status.return_value = False

        with pytest.raises(DomainError, match='already refunded'):
            await self.use_case.execute(transaction_id=self.transaction.id, acting_user=ADMIN)

        self.uow.ticket_command_repo.save_transition.assert_not_awaited()
        assert self.uow.committed == 0


class TestSweepExpiredReservations:
    def setup_method(self):
        self.uows: list[FakeUnitOfWork] = []
        self.tickets: dict = {}
        self.ticket_query_repo = AsyncMock()
        self.use_case = SweepExpiredReservationsUseCase(
            uow_factory=self._new_uow,
            ticket_query_repo=self.ticket_query_repo,
            event_lock=KeyedLock(),
        )

    def _new_uow(self) -> FakeUnitOfWork:
        uow = FakeUnitOfWork()
        uow.ticket_command_repo.get_by_id.side_effect = lambda *, ticket_id: self.tickets.get(
            ticket_id
        )
        uow.ticket_command_repo.save_transition.return_value = True
        self.uows.append(uow)
        return uow

    def _given_expired(self, *tickets):
        self.tickets = {ticket.id: ticket for ticket in tickets}
        self.ticket_query_repo.list_expired_reservations.return_value = list(tickets)

    async def test_each_expired_hold_is_reclaimed_in_its_own_transaction(self):
        tickets = [
            make_ticket(reservation_expiry=NOW - timedelta(minutes=1)),
            make_ticket(reservation_expiry=NOW - timedelta(minutes=5), event_id=2),
        ]
        self._given_expired(*tickets)

        result = await self.use_case.execute(now=NOW, batch_size=50)

        assert result.reclaimed_count == 2
        assert result.failed_count == 0
        self.ticket_query_repo.list_expired_reservations.assert_awaited_once_with(
            now=NOW, limit=50
        )
        assert len(self.uows) == 2
        assert all(uow.committed == 1 for uow in self.uows)
        for uow, ticket in zip(self.uows, tickets, strict=True):
            uow.event_command_repo.increment_tickets_remaining_if_active.assert_awaited_once_with(
                event_id=ticket.event_id, quantity=1
            )

    async def test_ticket_paid_meanwhile_is_left_alone(self):
        stale = make_ticket(reservation_expiry=NOW - timedelta(minutes=1))
        self._given_expired(stale)
        # Storage now says the ticket was paid
        self.tickets[stale.id] = make_ticket(status=TicketStatus.PAID)

        result = await self.use_case.execute(now=NOW)

        assert result.reclaimed_count == 0
        self.uows[0].ticket_command_repo.save_transition.assert_not_awaited()

    async def test_hold_extended_past_now_is_left_alone(self):
        ticket = make_ticket(reservation_expiry=NOW + timedelta(minutes=1))
        self._given_expired(ticket)

        result = await self.use_case.execute(now=NOW)

        assert result.reclaimed_count == 0

    async def test_one_failure_does_not_stop_the_batch(self):
        broken = make_ticket(reservation_expiry=NOW - timedelta(minutes=2))
        fine = make_ticket(reservation_expiry=NOW - timedelta(minutes=1))
        self._given_expired(broken, fine)

        original_new_uow = self._new_uow

        def new_uow() -> FakeUnitOfWork:
            uow = original_new_uow()
            if len(self.uows) == 1:
                uow.ticket_command_repo.save_transition.side_effect = RuntimeError('disk full')
            return uow

        self.use_case.uow_factory = new_uow

        result = await self.use_case.execute(now=NOW)

        assert result.reclaimed_count == 1
        assert result.failed_count == 1

    async def test_nothing_expired(self):
        self._given_expired()

        result = await self.use_case.execute(now=NOW)

        assert result.reclaimed_count == 0
        assert result.failed_count == 0
