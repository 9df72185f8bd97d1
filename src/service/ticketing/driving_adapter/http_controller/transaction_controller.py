from uuid import UUID

from fastapi import APIRouter, Depends, Query

from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.command.refund_transaction_use_case import (
    RefundTransactionUseCase,
)
from src.service.ticketing.app.dto.page import MAX_PAGE_LIMIT, PageRequest
from src.service.ticketing.app.query.transaction_query_use_case import TransactionQueryUseCase
from src.service.ticketing.domain.entity.user_entity import UserEntity
from src.service.ticketing.driving_adapter.http_controller.auth.role_auth import (
    get_current_user,
    require_admin,
)
from src.service.ticketing.driving_adapter.http_controller.schema.transaction_schema import (
    EventTransactionListResponse,
    PaymentStatusResponse,
    TransactionListResponse,
    TransactionResponse,
)


router = APIRouter()


@router.get('/my_transactions')
@Logger.io
async def list_my_transactions(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=MAX_PAGE_LIMIT),
    current_user: UserEntity = Depends(get_current_user),
    use_case: TransactionQueryUseCase = Depends(TransactionQueryUseCase.depends),
) -> TransactionListResponse:
    result = await use_case.list_user_transactions(
        user_id=current_user.id, page_request=PageRequest(page=page, limit=limit)
    )
    return TransactionListResponse(
        transactions=[TransactionResponse.from_entity(item) for item in result.items],
        total=result.total,
        page=result.page,
        pages=result.pages,
    )


@router.get('/event/{event_id}')
@Logger.io
async def list_event_transactions(
    event_id: int,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=MAX_PAGE_LIMIT),
    current_user: UserEntity = Depends(get_current_user),
    use_case: TransactionQueryUseCase = Depends(TransactionQueryUseCase.depends),
) -> EventTransactionListResponse:
    result = await use_case.list_event_transactions(
        event_id=event_id,
        acting_user=current_user,
        page_request=PageRequest(page=page, limit=limit),
    )
    return EventTransactionListResponse(
        transactions=[TransactionResponse.from_entity(item) for item in result.page.items],
        total=result.page.total,
        page=result.page.page,
        pages=result.page.pages,
        total_revenue=result.total_revenue,
    )


@router.get('/{transaction_id}')
@Logger.io
async def get_transaction(
    transaction_id: UUID,
    current_user: UserEntity = Depends(get_current_user),
    use_case: TransactionQueryUseCase = Depends(TransactionQueryUseCase.depends),
) -> TransactionResponse:
    transaction = await use_case.get_by_id(transaction_id=transaction_id, acting_user=current_user)
    return TransactionResponse.from_entity(transaction)


@router.get('/{transaction_id}/status')
@Logger.io
async def get_payment_status(
    transaction_id: UUID,
    current_user: UserEntity = Depends(get_current_user),
    use_case: TransactionQueryUseCase = Depends(TransactionQueryUseCase.depends),
) -> PaymentStatusResponse:
    transaction = await use_case.get_by_id(transaction_id=transaction_id, acting_user=current_user)
    return PaymentStatusResponse(
        transaction_id=transaction.id,
        payment_id=transaction.payment_id,
        status=transaction.status,
        amount=transaction.amount,
    )


@router.patch('/{transaction_id}/refund')
@Logger.io
async def refund_transaction(
    transaction_id: UUID,
    current_user: UserEntity = Depends(require_admin),
    use_case: RefundTransactionUseCase = Depends(RefundTransactionUseCase.depends),
) -> TransactionResponse:
    transaction = await use_case.execute(transaction_id=transaction_id, acting_user=current_user)
    return TransactionResponse.from_entity(transaction)
