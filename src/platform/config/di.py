"""
https://python-dependency-injector.ets-labs.org/index.html
https://python-dependency-injector.ets-labs.org/examples/fastapi-sqlalchemy.html
"""

from dependency_injector import containers, providers

from src.platform.config.core_setting import Settings
from src.platform.database.orm_db_setting import Database
from src.platform.database.unit_of_work import SqlAlchemyUnitOfWork
from src.platform.state.keyed_lock import KeyedLock
from src.service.ticketing.app.command.sweep_expired_reservations_use_case import (
    SweepExpiredReservationsUseCase,
)
from src.service.ticketing.driven_adapter.payment.mock_payment_gateway_impl import (
    MockPaymentGatewayImpl,
)
from src.service.ticketing.driven_adapter.repo.event_query_repo_impl import EventQueryRepoImpl
from src.service.ticketing.driven_adapter.repo.ticket_query_repo_impl import TicketQueryRepoImpl
from src.service.ticketing.driven_adapter.repo.transaction_query_repo_impl import (
    TransactionQueryRepoImpl,
)
from src.service.ticketing.driving_adapter.http_controller.auth.jwt_auth import JwtAuth


class Container(containers.DeclarativeContainer):
    # Configuration
    config_service = providers.Singleton(Settings)

    # Database (uses AsyncEngineManager with settings from config_service)
    database = providers.Singleton(Database)

    # Write side: a fresh Unit of Work (and session) per command
    # Use cases take the provider itself via Provide[Container.unit_of_work.provider]
    unit_of_work = providers.Factory(SqlAlchemyUnitOfWork)

    # Read side repositories (stateless - use session_factory per call)
    event_query_repo = providers.Singleton(
        EventQueryRepoImpl, session_factory=database.provided.session
    )
    ticket_query_repo = providers.Singleton(
        TicketQueryRepoImpl, session_factory=database.provided.session
    )
    transaction_query_repo = providers.Singleton(
        TransactionQueryRepoImpl, session_factory=database.provided.session
    )

    # Serializes inventory-changing commands per event inside this process
    event_lock = providers.Singleton(KeyedLock)

    # External collaborators
    payment_gateway = providers.Singleton(MockPaymentGatewayImpl)

    # Auth service
    jwt_auth = providers.Singleton(JwtAuth)

    # Background jobs (HTTP use cases are built per request through depends())
    sweep_expired_reservations_use_case = providers.Singleton(
        SweepExpiredReservationsUseCase,
        uow_factory=unit_of_work.provider,
        ticket_query_repo=ticket_query_repo,
        event_lock=event_lock,
    )


container = Container()

