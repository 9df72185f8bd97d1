from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List

from fastapi.testclient import TestClient

from src.platform.config.core_setting import settings
from src.service.ticketing.domain.entity.user_entity import UserEntity
from src.service.ticketing.driving_adapter.http_controller.auth.jwt_auth import JwtAuth
from src.service.ticketing.driving_adapter.http_controller.payment_controller import (
    WEBHOOK_SECRET_HEADER,
)
from test.route_constant import EVENT_BASE, PAYMENT_WEBHOOK, TICKET_BASE
from test.util_constant import DEFAULT_TICKET_PRICE, DEFAULT_TOTAL_TICKETS


def auth_headers(user: UserEntity) -> Dict[str, str]:
    return {'Authorization': f'Bearer {JwtAuth().create_jwt_token(user)}'}


def webhook_headers(secret: str | None = None) -> Dict[str, str]:
    return {
        WEBHOOK_SECRET_HEADER: secret or settings.PAYMENT_WEBHOOK_SECRET.get_secret_value()
    }


def assert_response_status(response, expected_status: int, message: str | None = None):
    response_text = getattr(response, 'text', getattr(response, 'content', 'N/A'))
    assert response.status_code == expected_status, (
        message or f'Expected {expected_status}, got {response.status_code}: {response_text}'
    )


def event_payload(**overrides: Any) -> Dict[str, Any]:
    start_at = datetime.now(timezone.utc) + timedelta(days=30)
    payload: Dict[str, Any] = {
        'title': 'Summer Jazz Night',
        'description': 'An evening of live jazz',
        'venue': 'Riverside Hall',
        'start_at': start_at.isoformat(),
        'end_at': (start_at + timedelta(hours=4)).isoformat(),
        'total_tickets': DEFAULT_TOTAL_TICKETS,
        'ticket_price': DEFAULT_TICKET_PRICE,
        'category': 'concert',
    }
    payload.update(overrides)
    return payload


def create_event(
    client: TestClient, headers: Dict[str, str], **overrides: Any
) -> Dict[str, Any]:
    response = client.post(EVENT_BASE, json=event_payload(**overrides), headers=headers)
    assert_response_status(response, 201, 'Failed to create event')
    return response.json()


def book_tickets(
    client: TestClient, headers: Dict[str, str], *, event_id: int, quantity: int
) -> Dict[str, Any]:
    response = client.post(
        TICKET_BASE, json={'event_id': event_id, 'quantity': quantity}, headers=headers
    )
    assert_response_status(response, 201, 'Failed to book tickets')
    return response.json()


def confirm_payment(
    client: TestClient, *, ticket_ids: List[str], payment_reference: str = 'PAY_MOCK_TEST0001'
) -> Dict[str, Any]:
    response = client.post(
        PAYMENT_WEBHOOK,
        json={'payment_reference': payment_reference, 'ticket_ids': ticket_ids},
        headers=webhook_headers(),
    )
    assert_response_status(response, 200, 'Failed to confirm payment')
    return response.json()
