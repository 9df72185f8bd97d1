"""
Database Models

Import all models here to ensure they are registered with SQLAlchemy
"""

from src.service.ticketing.driven_adapter.model.event_model import EventModel
from src.service.ticketing.driven_adapter.model.ticket_model import TicketModel
from src.service.ticketing.driven_adapter.model.transaction_model import TransactionModel

__all__ = [
    'EventModel',
    'TicketModel',
    'TransactionModel',
]
