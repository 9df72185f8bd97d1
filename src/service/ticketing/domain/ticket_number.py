"""
Human-facing ticket numbers: EVTEZ-<6 random digits>-<last 6 digits of epoch ms>.

The format alone does not guarantee uniqueness; callers check candidates
against storage (and the rest of their batch) and draw again on collision.
"""

import re
import secrets
import time
from typing import Callable, Optional


TICKET_NUMBER_PREFIX = 'EVTEZ'
TICKET_NUMBER_PATTERN = re.compile(rf'^{TICKET_NUMBER_PREFIX}-\d{{6}}-\d{{6}}$')


def _epoch_millis() -> int:
    return time.time_ns() // 1_000_000


def generate_ticket_number(
    *,
    clock_ms: Callable[[], int] = _epoch_millis,
    random_part: Optional[int] = None,
) -> str:
    random_digits = random_part if random_part is not None else 100000 + secrets.randbelow(900000)
    timestamp_digits = str(clock_ms())[-6:].rjust(6, '0')
    return f'{TICKET_NUMBER_PREFIX}-{random_digits:06d}-{timestamp_digits}'


def is_valid_ticket_number(value: str) -> bool:
    return bool(TICKET_NUMBER_PATTERN.match(value))
