from typing import Self
from uuid import UUID

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.exception.exceptions import ForbiddenError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.dto.page import Page, PageRequest
from src.service.ticketing.app.dto.reservation_results import EventTransactionsPage
from src.service.ticketing.app.interface.i_event_query_repo import IEventQueryRepo
from src.service.ticketing.app.interface.i_transaction_query_repo import ITransactionQueryRepo
from src.service.ticketing.domain.entity.transaction_entity import TransactionEntity
from src.service.ticketing.domain.entity.user_entity import UserEntity


class TransactionQueryUseCase:
    def __init__(
        self,
        *,
        transaction_query_repo: ITransactionQueryRepo,
        event_query_repo: IEventQueryRepo,
    ) -> None:
        self.transaction_query_repo = transaction_query_repo
        self.event_query_repo = event_query_repo

    @classmethod
    @inject
    def depends(
        cls,
        transaction_query_repo: ITransactionQueryRepo = Depends(
            Provide[Container.transaction_query_repo]
        ),
        event_query_repo: IEventQueryRepo = Depends(Provide[Container.event_query_repo]),
    ) -> Self:
        return cls(transaction_query_repo=transaction_query_repo, event_query_repo=event_query_repo)

    @Logger.io
    async def get_by_id(
        self, *, transaction_id: UUID, acting_user: UserEntity
    ) -> TransactionEntity:
        transaction = await self.transaction_query_repo.get_by_id(transaction_id=transaction_id)
        if transaction is None:
            raise NotFoundError('Transaction not found')
        if transaction.user_id == acting_user.id or acting_user.is_admin:
            return transaction

        event = await self.event_query_repo.get_by_id(event_id=transaction.event_id)
        if event is None or not event.is_managed_by(acting_user):
            raise ForbiddenError('You do not have access to this transaction')
        return transaction

    @Logger.io
    async def list_user_transactions(
        self, *, user_id: int, page_request: PageRequest
    ) -> Page[TransactionEntity]:
        return await self.transaction_query_repo.list_by_user(
            user_id=user_id, page_request=page_request
        )

    @Logger.io
    async def list_event_transactions(
        self, *, event_id: int, acting_user: UserEntity, page_request: PageRequest
    ) -> EventTransactionsPage:
        event = await self.event_query_repo.get_by_id(event_id=event_id)
        if event is None:
            raise NotFoundError('Event not found')
        if not event.is_managed_by(acting_user):
            raise ForbiddenError('Only the event organizer or an admin can list its transactions')

        return EventTransactionsPage(
            page=await self.transaction_query_repo.list_by_event(
                event_id=event_id, page_request=page_request
            ),
            total_revenue=await self.transaction_query_repo.total_revenue(event_id=event_id),
        )
