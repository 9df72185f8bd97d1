"""
Wire Modules Configuration

Defines the modules that need dependency injection wiring.
Shared between production and test environments.
"""

from types import ModuleType

from src.service.ticketing.app.command import (
    book_tickets_use_case,
    cancel_event_use_case,
    cancel_ticket_use_case,
    confirm_payment_use_case,
    create_event_use_case,
    create_payment_intent_use_case,
    mark_ticket_used_use_case,
    refund_transaction_use_case,
)
from src.service.ticketing.app.query import (
    get_event_use_case,
    get_inventory_snapshot_use_case,
    get_ticket_use_case,
    list_tickets_use_case,
    transaction_query_use_case,
)
from src.service.ticketing.driving_adapter.http_controller.auth import role_auth


WIRE_MODULES: list[ModuleType] = [
    book_tickets_use_case,
    cancel_event_use_case,
    cancel_ticket_use_case,
    confirm_payment_use_case,
    create_event_use_case,
    create_payment_intent_use_case,
    mark_ticket_used_use_case,
    refund_transaction_use_case,
    get_event_use_case,
    get_inventory_snapshot_use_case,
    get_ticket_use_case,
    list_tickets_use_case,
    transaction_query_use_case,
    role_auth,
]
