"""
Periodic expiry sweeper.

Runs inside the application's anyio task group and is stopped by cancelling
that group. A failed pass is logged and the loop keeps going.
"""

import time

import anyio

from src.platform.logging.loguru_io import Logger
from src.platform.metrics.reservation_metrics import metrics
from src.service.ticketing.app.command.sweep_expired_reservations_use_case import (
    SweepExpiredReservationsUseCase,
)
from src.service.ticketing.app.dto.reservation_results import SweepResult


async def run_sweep_pass(*, use_case: SweepExpiredReservationsUseCase) -> SweepResult | None:
    start_time = time.perf_counter()
    try:
        result = await use_case.execute()
    except Exception as e:
        metrics.record_sweep(
            result='error', reclaimed=0, duration=time.perf_counter() - start_time
        )
        Logger.base.exception(f'❌ [SWEEPER] Sweep pass failed: {e}')
        return None

    metrics.record_sweep(
        result='success',
        reclaimed=result.reclaimed_count,
        duration=time.perf_counter() - start_time,
    )
    return result


async def run_reservation_sweeper(
    *, use_case: SweepExpiredReservationsUseCase, interval_seconds: float
) -> None:
    Logger.base.info(f'🧹 [SWEEPER] Started, interval {interval_seconds}s')
    while True:
        await run_sweep_pass(use_case=use_case)
        await anyio.sleep(interval_seconds)
