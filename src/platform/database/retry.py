"""
Bounded retry for transient storage contention.

Each attempt must run a whole unit of work: a retried guarded update is only
safe when the transaction around it is rebuilt from scratch.
"""

from typing import Awaitable, Callable, TypeVar

import anyio
from sqlalchemy.exc import DBAPIError, IntegrityError, OperationalError

from src.platform.config.core_setting import settings
from src.platform.exception.exceptions import InternalError
from src.platform.logging.loguru_io import Logger


_T = TypeVar('_T')

# asyncpg exception class names raised for lock conflicts
_TRANSIENT_DRIVER_ERRORS = frozenset(
    {'DeadlockDetectedError', 'SerializationError', 'LockNotAvailableError'}
)


def is_transient_storage_error(exc: BaseException) -> bool:
    if isinstance(exc, IntegrityError):
        return False
    if isinstance(exc, OperationalError):
        return True
    if isinstance(exc, DBAPIError):
        if exc.connection_invalidated:
            return True
        return type(exc.orig).__name__ in _TRANSIENT_DRIVER_ERRORS
    return False


async def run_with_storage_retry(
    operation: Callable[[], Awaitable[_T]],
    *,
    description: str,
    max_retries: int | None = None,
    base_delay: float | None = None,
) -> _T:
    max_retries = settings.STORAGE_MAX_RETRIES if max_retries is None else max_retries
    delay = settings.STORAGE_RETRY_BASE_DELAY if base_delay is None else base_delay

    for attempt in range(1, max_retries + 1):
        try:
            return await operation()
        except DBAPIError as e:
            if not is_transient_storage_error(e):
                raise
            if attempt == max_retries:
                Logger.base.error(
                    f'❌ [STORAGE] {description} failed after {attempt} attempts: {e}'
                )
                raise InternalError(f'Storage unavailable while trying to {description}') from e
            Logger.base.warning(
                f'⏳ [STORAGE] {description} contention, attempt {attempt}/{max_retries}, '
                f'retry in {delay:.3f}s | {type(e).__name__}'
            )
            await anyio.sleep(delay)
            delay *= 2

    raise InternalError(f'Storage unavailable while trying to {description}')
