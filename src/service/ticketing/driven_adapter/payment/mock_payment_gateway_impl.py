from decimal import Decimal
import random
import string
from typing import List
from uuid import UUID

from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.interface.i_payment_gateway import IPaymentGateway


PAYMENT_REFERENCE_PREFIX = 'PAY_MOCK_'


class MockPaymentGatewayImpl(IPaymentGateway):
    """Mock payment provider: issues references, never charges"""

    @Logger.io
    async def create_payment_intent(
        self, *, user_id: int, ticket_ids: List[UUID], amount: Decimal
    ) -> str:
        payment_reference = (
            f'{PAYMENT_REFERENCE_PREFIX}'
            f'{"".join(random.choices(string.ascii_uppercase + string.digits, k=8))}'
        )
        Logger.base.info(
            f'💳 [PAYMENT] Intent {payment_reference} for user {user_id}: '
            f'{len(ticket_ids)} tickets, amount {amount}'
        )
        return payment_reference
