"""
Test Configuration and Fixtures

This module provides:
- A throwaway SQLite database for the whole session (DATABASE_URL override)
- Table cleanup between integration tests
- The session-scoped TestClient and JWT helpers for users of every role

Architecture:
- Unit tests (test/**/unit/): Override fixtures with mocks in their own conftest.py
- Integration tests: Use the real database with cleanup after every test
"""

# =============================================================================
# CRITICAL: Environment setup MUST happen before any other imports
# Settings are read once at import time (src.platform.config.core_setting)
# =============================================================================
import os
from pathlib import Path
import tempfile


def _early_setup_test_environment() -> None:
    """Set test environment variables before any module imports."""
    worker_id = os.environ.get('PYTEST_XDIST_WORKER', 'master')
    db_dir = Path(tempfile.gettempdir()) / 'eventease_test'
    db_dir.mkdir(exist_ok=True)
    os.environ['DATABASE_URL'] = f'sqlite+aiosqlite:///{db_dir / f"test_{worker_id}.db"}'

    # Create test log directory
    test_log_dir = Path(__file__).parent / 'test_log'
    test_log_dir.mkdir(exist_ok=True)
    os.environ['TEST_LOG_DIR'] = str(test_log_dir)

    # Tests drive the sweeper explicitly with a chosen clock
    os.environ['RESERVATION_SWEEPER_ENABLED'] = 'false'
    os.environ.setdefault('STORAGE_RETRY_BASE_DELAY', '0.01')


# Call immediately to set env vars before any imports
_early_setup_test_environment()

import asyncio  # noqa: E402
from collections.abc import AsyncGenerator, Generator  # noqa: E402
from typing import Any  # noqa: E402

from fastapi.testclient import TestClient  # noqa: E402
import pytest  # noqa: E402
from sqlalchemy import text  # noqa: E402
from sqlalchemy.ext.asyncio import create_async_engine  # noqa: E402
from sqlalchemy.pool import NullPool  # noqa: E402

from src.platform.config.core_setting import settings  # noqa: E402
from src.service.ticketing.domain.entity.user_entity import UserEntity, UserRole  # noqa: E402
from test.shared.utils import auth_headers  # noqa: E402
from test.util_constant import (  # noqa: E402
    ADMIN_ID,
    ANOTHER_BUYER_ID,
    BUYER_ID,
    ORGANIZER_ID,
)

# Register Gherkin steps for every feature file
from test.bdd_steps_loader import *  # noqa: E402, F403


# =============================================================================
# Pytest Hooks: Detect test type and setup accordingly
# =============================================================================
def _is_unit_test_only_run(config: pytest.Config) -> bool:
    markexpr = config.getoption('markexpr', default='')
    if markexpr and 'unit' in str(markexpr) and 'not unit' not in str(markexpr):
        return True

    args = config.args or []
    test_paths = [arg for arg in args if arg and not arg.startswith('-')]
    return bool(test_paths and all('/unit/' in path or '\\unit\\' in path for path in test_paths))


def pytest_sessionstart(session: pytest.Session) -> None:
    if _is_unit_test_only_run(session.config):
        return

    asyncio.run(_setup_test_database())


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        markers = [m.name for m in item.iter_markers()]
        if 'unit' not in markers:
            item.fixturenames.append('clean_database')


# =============================================================================
# Database Setup and Cleanup
# =============================================================================
# Children first so foreign keys never block the cleanup
_TABLES_IN_DELETE_ORDER = ('payment_transaction', 'ticket', 'event')


def _create_test_engine() -> Any:
    return create_async_engine(settings.DATABASE_URL_ASYNC, poolclass=NullPool)


async def _setup_test_database() -> None:
    from src.platform.database.orm_db_setting import Base
    import src.service.ticketing.driven_adapter.model  # noqa: F401

    engine = _create_test_engine()
    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
            await conn.run_sync(Base.metadata.create_all)
    finally:
        await engine.dispose()


async def _clean_all_tables() -> None:
    engine = _create_test_engine()
    try:
        async with engine.begin() as conn:
            for table in _TABLES_IN_DELETE_ORDER:
                await conn.execute(text(f'DELETE FROM {table}'))
    finally:
        await engine.dispose()


# =============================================================================
# Integration Test Fixtures
# =============================================================================
@pytest.fixture(scope='function')
async def clean_database() -> AsyncGenerator[None, None]:
    await _clean_all_tables()
    yield

    from src.platform.database.orm_db_setting import _engine_manager

    # Drop the engine only if it belongs to this test's loop
    current_loop = asyncio.get_running_loop()
    if _engine_manager._loop is current_loop:
        await _engine_manager.dispose()


# =============================================================================
# Session-scoped Fixtures
# =============================================================================
@pytest.fixture(scope='session')
def client() -> Generator[Any, None, None]:
    from test.test_main import app

    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client


@pytest.fixture(autouse=True)
def clear_client_cookies(request: pytest.FixtureRequest) -> Generator[None, None, None]:
    # Skip for unit tests - they don't use the HTTP client
    if 'unit' in [m.name for m in request.node.iter_markers()]:
        yield
        return
    client = request.getfixturevalue('client')
    client.cookies.clear()
    yield
    client.cookies.clear()


@pytest.fixture(scope='session')
def organizer_user() -> UserEntity:
    return UserEntity(
        id=ORGANIZER_ID, role=UserRole.ORGANIZER, email='organizer@test.com', name='Organizer'
    )


@pytest.fixture(scope='session')
def buyer_user() -> UserEntity:
    return UserEntity(id=BUYER_ID, role=UserRole.USER, email='buyer@test.com', name='Buyer')


@pytest.fixture(scope='session')
def another_buyer_user() -> UserEntity:
    return UserEntity(
        id=ANOTHER_BUYER_ID, role=UserRole.USER, email='another@test.com', name='Another Buyer'
    )


@pytest.fixture(scope='session')
def admin_user() -> UserEntity:
    return UserEntity(id=ADMIN_ID, role=UserRole.ADMIN, email='admin@test.com', name='Admin')


@pytest.fixture
def organizer_headers(organizer_user: UserEntity) -> dict[str, str]:
    return auth_headers(organizer_user)


@pytest.fixture
def buyer_headers(buyer_user: UserEntity) -> dict[str, str]:
    return auth_headers(buyer_user)


@pytest.fixture
def another_buyer_headers(another_buyer_user: UserEntity) -> dict[str, str]:
    return auth_headers(another_buyer_user)


@pytest.fixture
def admin_headers(admin_user: UserEntity) -> dict[str, str]:
    return auth_headers(admin_user)
