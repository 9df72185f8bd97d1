from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional
from uuid import UUID

import attrs
from uuid_utils.compat import uuid7

from src.platform.exception.exceptions import DomainError
from src.service.ticketing.domain.enum.transaction_status import PaymentMethod, TransactionStatus


@attrs.define
class TransactionEntity:
    """Payment receipt for exactly one ticket"""

    user_id: int
    event_id: int
    ticket_id: UUID
    amount: Decimal
    payment_method: PaymentMethod
    payment_id: str
    status: TransactionStatus = TransactionStatus.PENDING
    id: UUID = attrs.field(factory=uuid7)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def completed_for(
        cls,
        *,
        user_id: int,
        event_id: int,
        ticket_id: UUID,
        amount: Decimal,
        payment_method: PaymentMethod,
        payment_id: str,
        now: datetime,
    ) -> 'TransactionEntity':
        return cls(
            user_id=user_id,
            event_id=event_id,
            ticket_id=ticket_id,
            amount=amount,
            payment_method=payment_method,
            payment_id=payment_id,
            status=TransactionStatus.COMPLETED,
            created_at=now,
            updated_at=now,
        )

    def refund(self) -> 'TransactionEntity':
        if self.status == TransactionStatus.REFUNDED:
            raise DomainError('Transaction is already refunded', 409)
        if self.status != TransactionStatus.COMPLETED:
            raise DomainError(f'Cannot refund a {self.status.value} transaction', 409)
        return attrs.evolve(
            self, status=TransactionStatus.REFUNDED, updated_at=datetime.now(timezone.utc)
        )
