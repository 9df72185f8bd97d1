"""ORM row <-> domain entity conversion shared by the command and query repositories"""

from decimal import Decimal

from src.platform.types.utc_datetime import utc_now
from src.service.ticketing.domain.entity.event_entity import PRICE_QUANTUM, EventEntity
from src.service.ticketing.domain.entity.ticket_entity import TicketEntity
from src.service.ticketing.domain.entity.transaction_entity import TransactionEntity
from src.service.ticketing.domain.enum.event_category import EventCategory
from src.service.ticketing.domain.enum.event_status import EventStatus
from src.service.ticketing.domain.enum.ticket_status import TicketStatus
from src.service.ticketing.domain.enum.transaction_status import PaymentMethod, TransactionStatus
from src.service.ticketing.driven_adapter.model.event_model import EventModel
from src.service.ticketing.driven_adapter.model.ticket_model import TicketModel
from src.service.ticketing.driven_adapter.model.transaction_model import TransactionModel


def to_money(value: object) -> Decimal:
    # SQLite returns floats for NUMERIC aggregates
    return Decimal(str(value if value is not None else 0)).quantize(PRICE_QUANTUM)


def event_to_entity(row: EventModel) -> EventEntity:
    return EventEntity(
        id=row.id,
        title=row.title,
        description=row.description,
        venue=row.venue,
        organizer_id=row.organizer_id,
        start_at=row.start_at,
        end_at=row.end_at,
        total_tickets=row.total_tickets,
        tickets_remaining=row.tickets_remaining,
        ticket_price=to_money(row.ticket_price),
        category=EventCategory(row.category),
        status=EventStatus(row.status),
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def event_to_model(entity: EventEntity) -> EventModel:
    return EventModel(
        title=entity.title,
        description=entity.description,
        venue=entity.venue,
        organizer_id=entity.organizer_id,
        start_at=entity.start_at,
        end_at=entity.end_at,
        total_tickets=entity.total_tickets,
        tickets_remaining=entity.tickets_remaining,
        ticket_price=entity.ticket_price,
        category=entity.category.value,
        status=entity.status.value,
        created_at=entity.created_at or utc_now(),
        updated_at=entity.updated_at or utc_now(),
    )


def ticket_to_entity(row: TicketModel) -> TicketEntity:
    return TicketEntity(
        id=row.id,
        ticket_number=row.ticket_number,
        event_id=row.event_id,
        user_id=row.user_id,
        price=to_money(row.price),
        status=TicketStatus(row.status),
        reservation_expiry=row.reservation_expiry,
        checked=row.checked,
        purchased_at=row.purchased_at,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def ticket_to_model(entity: TicketEntity) -> TicketModel:
    return TicketModel(
        id=entity.id,
        ticket_number=entity.ticket_number,
        event_id=entity.event_id,
        user_id=entity.user_id,
        price=entity.price,
        status=entity.status.value,
        reservation_expiry=entity.reservation_expiry,
        checked=entity.checked,
        purchased_at=entity.purchased_at or utc_now(),
        created_at=entity.created_at or utc_now(),
        updated_at=entity.updated_at or utc_now(),
    )


def transaction_to_entity(row: TransactionModel) -> TransactionEntity:
    return TransactionEntity(
        id=row.id,
        user_id=row.user_id,
        event_id=row.event_id,
        ticket_id=row.ticket_id,
        amount=to_money(row.amount),
        payment_method=PaymentMethod(row.payment_method),
        payment_id=row.payment_id,
        status=TransactionStatus(row.status),
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def transaction_to_model(entity: TransactionEntity) -> TransactionModel:
    return TransactionModel(
        id=entity.id,
        user_id=entity.user_id,
        event_id=entity.event_id,
        ticket_id=entity.ticket_id,
        amount=entity.amount,
        payment_method=entity.payment_method.value,
        payment_id=entity.payment_id,
        status=entity.status.value,
        created_at=entity.created_at or utc_now(),
        updated_at=entity.updated_at or utc_now(),
    )
