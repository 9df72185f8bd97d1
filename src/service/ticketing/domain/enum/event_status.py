from enum import StrEnum


class EventStatus(StrEnum):
    """Only active events accept bookings; a cancelled event never comes back"""

    ACTIVE = 'active'
    CANCELLED = 'cancelled'
