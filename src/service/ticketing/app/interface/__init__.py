"""Application layer interfaces (Ports)"""

from src.service.ticketing.app.interface.i_event_command_repo import IEventCommandRepo
from src.service.ticketing.app.interface.i_event_query_repo import IEventQueryRepo
from src.service.ticketing.app.interface.i_payment_gateway import IPaymentGateway
from src.service.ticketing.app.interface.i_ticket_command_repo import ITicketCommandRepo
from src.service.ticketing.app.interface.i_ticket_query_repo import ITicketQueryRepo
from src.service.ticketing.app.interface.i_transaction_command_repo import (
    ITransactionCommandRepo,
)
from src.service.ticketing.app.interface.i_transaction_query_repo import ITransactionQueryRepo

__all__ = [
    'IEventCommandRepo',
    'IEventQueryRepo',
    'IPaymentGateway',
    'ITicketCommandRepo',
    'ITicketQueryRepo',
    'ITransactionCommandRepo',
    'ITransactionQueryRepo',
]
