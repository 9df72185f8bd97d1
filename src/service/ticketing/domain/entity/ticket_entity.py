from datetime import datetime, timedelta
from decimal import Decimal
from typing import Optional
from uuid import UUID

import attrs
from uuid_utils.compat import uuid7

from src.service.ticketing.domain.enum.ticket_status import TicketStatus
from src.service.ticketing.domain.ticket_state_machine import TicketTransition, plan_transition


@attrs.define
class TicketEntity:
    ticket_number: str
    event_id: int
    user_id: int
    price: Decimal
    status: TicketStatus
    id: UUID = attrs.field(factory=uuid7)
    reservation_expiry: Optional[datetime] = None
    checked: bool = False
    purchased_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def reserve(
        cls,
        *,
        ticket_number: str,
        event_id: int,
        user_id: int,
        price: Decimal,
        now: datetime,
        hold: timedelta,
    ) -> 'TicketEntity':
        return cls(
            ticket_number=ticket_number,
            event_id=event_id,
            user_id=user_id,
            price=price,
            status=TicketStatus.RESERVED,
            reservation_expiry=now + hold,
            purchased_at=now,
            created_at=now,
            updated_at=now,
        )

    def is_hold_expired(self, *, now: datetime) -> bool:
        return (
            self.status == TicketStatus.RESERVED
            and self.reservation_expiry is not None
            and self.reservation_expiry < now
        )

    def is_owned_by(self, user_id: int) -> bool:
        return self.user_id == user_id

    def apply(self, transition: TicketTransition) -> 'TicketEntity':
        return attrs.evolve(
            self,
            status=transition.to_status,
            reservation_expiry=None
            if transition.clears_reservation_expiry
            else self.reservation_expiry,
            checked=self.checked or transition.marks_checked,
            updated_at=transition.occurred_at,
        )

    def transition_to(
        self, to_status: TicketStatus, *, now: datetime
    ) -> tuple['TicketEntity', TicketTransition]:
        transition = plan_transition(from_status=self.status, to_status=to_status, now=now)
        return self.apply(transition), transition
