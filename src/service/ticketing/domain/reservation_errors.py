"""
Reservation lifecycle failures.

Each precondition of a command has its own error type so callers (and the
HTTP layer) can tell them apart; all of them render as {"detail": message}.
"""

from src.platform.exception.exceptions import (
    ConflictError,
    DomainError,
    InternalError,
)


class EventInactiveError(DomainError):
    def __init__(self, message: str = 'Event is not active') -> None:
        super().__init__(message, 400)


class EventEndedError(DomainError):
    def __init__(self, message: str = 'Event has already ended') -> None:
        super().__init__(message, 400)


class InsufficientInventoryError(ConflictError):
    def __init__(self, *, remaining: int) -> None:
        self.remaining = remaining
        super().__init__(f'Only {remaining} tickets remaining')


class InvalidTransitionError(ConflictError):
    def __init__(self, *, from_status: str, to_status: str, message: str | None = None) -> None:
        self.from_status = from_status
        self.to_status = to_status
        super().__init__(message or f'Cannot change ticket from {from_status} to {to_status}')


class DuplicateTicketNumberError(InternalError):
    def __init__(self, *, attempts: int) -> None:
        self.attempts = attempts
        super().__init__(f'Could not generate a unique ticket number after {attempts} attempts')
