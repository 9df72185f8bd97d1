from decimal import Decimal
from typing import List
from uuid import UUID

from pydantic import BaseModel, Field

from src.service.ticketing.domain.enum.transaction_status import PaymentMethod


class PaymentIntentRequest(BaseModel):
    ticket_ids: List[UUID] = Field(min_length=1)


class PaymentIntentResponse(BaseModel):
    payment_reference: str
    amount: Decimal
    ticket_ids: List[UUID]


class PaymentWebhookRequest(BaseModel):
    """Provider callback; may be delivered more than once"""

    payment_reference: str = Field(min_length=1)
    ticket_ids: List[UUID]
    success: bool = True
    payment_method: PaymentMethod = PaymentMethod.CREDIT_CARD

    model_config = {
        'json_schema_extra': {
            'example': {
                'payment_reference': 'PAY_MOCK_A1B2C3D4',
                'ticket_ids': ['01936d8f-5e73-7c4e-a9c5-123456789abc'],
                'success': True,
                'payment_method': 'credit_card',
            }
        }
    }


class PaymentWebhookResponse(BaseModel):
    confirmed_count: int
