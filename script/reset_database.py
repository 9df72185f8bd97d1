#!/usr/bin/env python3
"""
Database Reset Script
Reset the reservation database structure

Features:
1. Drop & Recreate Database - completely wipe the database (PostgreSQL) or
   delete the database file (SQLite)
2. Run Alembic Migrations - create the latest schema

Notes:
- This script only resets database structure, does not seed data
- To seed demo data, run `python -m script.seed_data`
"""

import asyncio
from pathlib import Path
import subprocess

from sqlalchemy import make_url, text
from sqlalchemy.engine import URL
from sqlalchemy.ext.asyncio import create_async_engine

from src.platform.config.core_setting import settings
from src.platform.constant.path import BASE_DIR


async def _terminate_connections(conn, db_name: str) -> None:
    """Terminate all connections to the specified database"""
    await conn.execute(
        text(
            'SELECT pg_terminate_backend(pid) FROM pg_stat_activity '
            'WHERE datname = :db_name AND pid <> pg_backend_pid()'
        ),
        {'db_name': db_name},
    )


async def _drop_and_create_postgres(url: URL) -> None:
    """Drop and recreate the database from the `postgres` maintenance database"""
    db_name = url.database
    admin_engine = create_async_engine(
        url.set(database='postgres'), isolation_level='AUTOCOMMIT'
    )

    try:
        async with admin_engine.connect() as conn:
            await _terminate_connections(conn, db_name)

            await conn.execute(text(f'DROP DATABASE IF EXISTS "{db_name}"'))
            print(f"   ✅ Database '{db_name}' dropped")

            await conn.execute(text(f'CREATE DATABASE "{db_name}"'))
            print(f"   ✅ Database '{db_name}' created")
    finally:
        await admin_engine.dispose()


def _delete_sqlite_file(url: URL) -> None:
    if not url.database or url.database == ':memory:':
        return
    db_file = Path(url.database)
    if db_file.exists():
        db_file.unlink()
        print(f"   ✅ Database file '{db_file}' deleted")


def _run_alembic_migrations() -> None:
    """Run Alembic migrations"""
    print("   🔄 Running 'alembic upgrade head'...")

    result = subprocess.run(
        ['alembic', 'upgrade', 'head'],
        cwd=BASE_DIR,
        capture_output=True,
        text=True,
    )

    if result.returncode != 0:
        print(f'   ❌ Migration failed (return code: {result.returncode})')
        if result.stdout:
            print(f'   📋 STDOUT: {result.stdout}')
        if result.stderr:
            print(f'   📋 STDERR: {result.stderr}')
        raise RuntimeError(f'Alembic migration failed with return code {result.returncode}')

    print('   ✅ Database migrations completed')


async def drop_and_recreate_database() -> None:
    url = make_url(settings.DATABASE_URL_ASYNC)
    print(f'Database: {url.render_as_string(hide_password=True)}')

    print('🗑️ Dropping database...')
    if settings.IS_SQLITE:
        _delete_sqlite_file(url)
    else:
        await _drop_and_create_postgres(url)

    print('🏗️ Running database migrations...')
    _run_alembic_migrations()


async def main() -> None:
    print('🔄 Starting database reset...')
    print('=' * 50)

    try:
        await drop_and_recreate_database()
    except Exception as e:
        print(f'❌ Reset failed: {e}')
        raise SystemExit(1) from e

    print('=' * 50)
    print('✅ Database reset completed!')


if __name__ == '__main__':
    asyncio.run(main())
