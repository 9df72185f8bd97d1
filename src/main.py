"""
Production FastAPI Application

Reservation API plus the periodic expiry sweeper.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import anyio
from fastapi import FastAPI
from fastapi.responses import RedirectResponse

from src.platform.app_factory import create_app
from src.platform.config.core_setting import settings
from src.platform.config.di import container
from src.platform.config.wire_modules import WIRE_MODULES
from src.platform.database.orm_db_setting import dispose_engine, get_engine
from src.platform.logging.loguru_io import Logger
from src.platform.observability.tracing import TracingConfig
from src.service.ticketing.driving_adapter.scheduler.reservation_sweeper import (
    run_reservation_sweeper,
)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    Logger.base.info('🚀 [Reservation Service] Starting up...')

    tracing = TracingConfig(service_name='reservation-service')
    tracing.setup()
    Logger.base.info('📊 [Reservation Service] OpenTelemetry tracing configured')

    container.wire(modules=WIRE_MODULES)
    Logger.base.info('🔌 [Reservation Service] Dependency injection wired')

    tracing.instrument_sqlalchemy(engine=get_engine())
    Logger.base.info('🗄️  [Reservation Service] Database engine ready + instrumented')

    async with anyio.create_task_group() as tg:
        if settings.RESERVATION_SWEEPER_ENABLED:
            tg.start_soon(
                lambda: run_reservation_sweeper(
                    use_case=container.sweep_expired_reservations_use_case(),
                    interval_seconds=settings.RESERVATION_SWEEP_INTERVAL_SECONDS,
                )
            )
        else:
            Logger.base.warning('⚠️ [Reservation Service] Expiry sweeper disabled')

        Logger.base.info('✅ [Reservation Service] Ready to serve requests')
        yield

        Logger.base.info('🛑 [Reservation Service] Shutting down...')
        tg.cancel_scope.cancel()

    await dispose_engine()
    Logger.base.info('🗄️  [Reservation Service] Database engine disposed')

    tracing.shutdown()
    container.unwire()
    Logger.base.info('👋 [Reservation Service] Shutdown complete')


app = create_app(lifespan=lifespan)


@app.get('/')
async def root() -> RedirectResponse:
    """Root endpoint - redirect to docs."""
    return RedirectResponse(url='/docs')
