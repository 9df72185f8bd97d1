from datetime import datetime
from decimal import Decimal
from typing import List
from uuid import UUID

from pydantic import BaseModel

from src.service.ticketing.domain.entity.transaction_entity import TransactionEntity
from src.service.ticketing.domain.enum.transaction_status import (
    PaymentMethod,
    TransactionStatus,
)


class TransactionResponse(BaseModel):
    id: UUID
    user_id: int
    event_id: int
    ticket_id: UUID
    amount: Decimal
    payment_method: PaymentMethod
    payment_id: str
    status: TransactionStatus
    created_at: datetime | None = None

    @classmethod
    def from_entity(cls, transaction: TransactionEntity) -> 'TransactionResponse':
        return cls(
            id=transaction.id,
            user_id=transaction.user_id,
            event_id=transaction.event_id,
            ticket_id=transaction.ticket_id,
            amount=transaction.amount,
            payment_method=transaction.payment_method,
            payment_id=transaction.payment_id,
            status=transaction.status,
            created_at=transaction.created_at,
        )


class TransactionListResponse(BaseModel):
    transactions: List[TransactionResponse]
    total: int
    page: int
    pages: int


class EventTransactionListResponse(TransactionListResponse):
    total_revenue: Decimal


class PaymentStatusResponse(BaseModel):
    transaction_id: UUID
    payment_id: str
    status: TransactionStatus
    amount: Decimal
