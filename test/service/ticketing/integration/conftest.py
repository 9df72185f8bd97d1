"""
Fixtures for use cases running against the test database.

Data is created inside each test (never in fixtures) so the clean_database
fixture, which runs after these, cannot wipe it.
"""

from datetime import timedelta
from decimal import Decimal
from typing import Any, Awaitable, Callable

import pytest

from src.platform.database.orm_db_setting import Database
from src.platform.database.unit_of_work import SqlAlchemyUnitOfWork
from src.platform.state.keyed_lock import KeyedLock
from src.platform.types.utc_datetime import utc_now
from src.service.ticketing.app.command.book_tickets_use_case import BookTicketsUseCase
from src.service.ticketing.app.command.cancel_event_use_case import CancelEventUseCase
from src.service.ticketing.app.command.cancel_ticket_use_case import CancelTicketUseCase
from src.service.ticketing.app.command.confirm_payment_use_case import ConfirmPaymentUseCase
from src.service.ticketing.app.command.create_event_use_case import CreateEventUseCase
from src.service.ticketing.app.command.mark_ticket_used_use_case import MarkTicketUsedUseCase
from src.service.ticketing.app.command.refund_transaction_use_case import (
    RefundTransactionUseCase,
)
from src.service.ticketing.app.command.sweep_expired_reservations_use_case import (
    SweepExpiredReservationsUseCase,
)
from src.service.ticketing.app.query.get_inventory_snapshot_use_case import (
    GetInventorySnapshotUseCase,
)
from src.service.ticketing.domain.entity.event_entity import EventEntity
from src.service.ticketing.domain.entity.user_entity import UserEntity
from src.service.ticketing.domain.enum.event_category import EventCategory
from src.service.ticketing.driven_adapter.repo.event_query_repo_impl import EventQueryRepoImpl
from src.service.ticketing.driven_adapter.repo.ticket_query_repo_impl import TicketQueryRepoImpl
from src.service.ticketing.driven_adapter.repo.transaction_query_repo_impl import (
    TransactionQueryRepoImpl,
)


@pytest.fixture
def event_lock() -> KeyedLock:
    return KeyedLock()


@pytest.fixture
def database() -> Database:
    return Database()


@pytest.fixture
def event_query_repo(database: Database) -> EventQueryRepoImpl:
    return EventQueryRepoImpl(session_factory=database.session)


@pytest.fixture
def ticket_query_repo(database: Database) -> TicketQueryRepoImpl:
    return TicketQueryRepoImpl(session_factory=database.session)


@pytest.fixture
def transaction_query_repo(database: Database) -> TransactionQueryRepoImpl:
    return TransactionQueryRepoImpl(session_factory=database.session)


@pytest.fixture
def book_tickets(event_lock: KeyedLock) -> BookTicketsUseCase:
    return BookTicketsUseCase(uow_factory=SqlAlchemyUnitOfWork, event_lock=event_lock)


@pytest.fixture
def confirm_payment() -> ConfirmPaymentUseCase:
    return ConfirmPaymentUseCase(uow_factory=SqlAlchemyUnitOfWork)


@pytest.fixture
def cancel_ticket(
    ticket_query_repo: TicketQueryRepoImpl, event_lock: KeyedLock
) -> CancelTicketUseCase:
    return CancelTicketUseCase(
        uow_factory=SqlAlchemyUnitOfWork,
        ticket_query_repo=ticket_query_repo,
        event_lock=event_lock,
    )


@pytest.fixture
def mark_ticket_used() -> MarkTicketUsedUseCase:
    return MarkTicketUsedUseCase(uow_factory=SqlAlchemyUnitOfWork)


@pytest.fixture
def refund_transaction(
    transaction_query_repo: TransactionQueryRepoImpl, event_lock: KeyedLock
) -> RefundTransactionUseCase:
    return RefundTransactionUseCase(
        uow_factory=SqlAlchemyUnitOfWork,
        transaction_query_repo=transaction_query_repo,
        event_lock=event_lock,
    )


@pytest.fixture
def cancel_event(event_lock: KeyedLock) -> CancelEventUseCase:
    return CancelEventUseCase(uow_factory=SqlAlchemyUnitOfWork, event_lock=event_lock)


@pytest.fixture
def sweep_expired(
    ticket_query_repo: TicketQueryRepoImpl, event_lock: KeyedLock
) -> SweepExpiredReservationsUseCase:
    return SweepExpiredReservationsUseCase(
        uow_factory=SqlAlchemyUnitOfWork,
        ticket_query_repo=ticket_query_repo,
        event_lock=event_lock,
    )


@pytest.fixture
def inventory_snapshot(
    event_query_repo: EventQueryRepoImpl, ticket_query_repo: TicketQueryRepoImpl
) -> GetInventorySnapshotUseCase:
    return GetInventorySnapshotUseCase(
        event_query_repo=event_query_repo, ticket_query_repo=ticket_query_repo
    )


@pytest.fixture
def create_event(organizer_user: UserEntity) -> Callable[..., Awaitable[EventEntity]]:
    async def _create(**overrides: Any) -> EventEntity:
        start_at = utc_now() + timedelta(days=30)
        fields: dict[str, Any] = {
            'organizer': organizer_user,
            'title': 'Summer Jazz Night',
            'description': 'An evening of live jazz',
            'venue': 'Riverside Hall',
            'start_at': start_at,
            'end_at': start_at + timedelta(hours=4),
            'total_tickets': 10,
            'ticket_price': Decimal('20.00'),
            'category': EventCategory.CONCERT,
        }
        fields.update(overrides)
        return await CreateEventUseCase(uow_factory=SqlAlchemyUnitOfWork).execute(**fields)

    return _create


@pytest.fixture
def context() -> dict[str, Any]:
    """State shared between the steps of one BDD scenario"""
    return {}
