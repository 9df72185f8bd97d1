import hmac
from typing import Optional

from fastapi import APIRouter, Depends, Header

from src.platform.config.core_setting import settings
from src.platform.exception.exceptions import AuthenticationError
from src.platform.logging.loguru_io import Logger
from src.service.ticketing.app.command.confirm_payment_use_case import ConfirmPaymentUseCase
from src.service.ticketing.app.command.create_payment_intent_use_case import (
    CreatePaymentIntentUseCase,
)
from src.service.ticketing.domain.entity.user_entity import UserEntity
from src.service.ticketing.driving_adapter.http_controller.auth.role_auth import (
    get_current_user,
)
from src.service.ticketing.driving_adapter.http_controller.schema.payment_schema import (
    PaymentIntentRequest,
    PaymentIntentResponse,
    PaymentWebhookRequest,
    PaymentWebhookResponse,
)


router = APIRouter()

WEBHOOK_SECRET_HEADER = 'X-Payment-Webhook-Secret'


async def verify_webhook_secret(
    webhook_secret: Optional[str] = Header(None, alias=WEBHOOK_SECRET_HEADER),
) -> None:
    expected = settings.PAYMENT_WEBHOOK_SECRET.get_secret_value()
    if not webhook_secret or not hmac.compare_digest(
        webhook_secret.encode(), expected.encode()
    ):
        raise AuthenticationError('Invalid webhook signature')


@router.post('/intent')
@Logger.io
async def create_payment_intent(
    request: PaymentIntentRequest,
    current_user: UserEntity = Depends(get_current_user),
    use_case: CreatePaymentIntentUseCase = Depends(CreatePaymentIntentUseCase.depends),
) -> PaymentIntentResponse:
    result = await use_case.execute(user_id=current_user.id, ticket_ids=request.ticket_ids)
    return PaymentIntentResponse(
        payment_reference=result.payment_reference,
        amount=result.amount,
        ticket_ids=result.ticket_ids,
    )


@router.post('/webhook', dependencies=[Depends(verify_webhook_secret)])
@Logger.io
async def payment_webhook(
    request: PaymentWebhookRequest,
    use_case: ConfirmPaymentUseCase = Depends(ConfirmPaymentUseCase.depends),
) -> PaymentWebhookResponse:
    result = await use_case.execute(
        payment_reference=request.payment_reference,
        ticket_ids=request.ticket_ids,
        success=request.success,
        payment_method=request.payment_method,
    )
    return PaymentWebhookResponse(confirmed_count=result.confirmed_count)
