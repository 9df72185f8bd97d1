#!/usr/bin/env python3
"""
Database Seed Script
Populate demo data into the database

Features:
1. Create Events - one upcoming event per demo configuration
2. Issue Tokens - print a Bearer token for each demo user

Notes:
- Accounts live in the identity provider; the service only trusts JWT claims,
  so demo users exist solely as signed tokens
- Run `python -m script.reset_database` first for an empty schema
"""

import asyncio
from dataclasses import dataclass
from datetime import timedelta
from decimal import Decimal

from sqlalchemy import func, select

from src.platform.database.orm_db_setting import dispose_engine, get_session_maker
from src.platform.database.unit_of_work import SqlAlchemyUnitOfWork
from src.platform.types.utc_datetime import utc_now
from src.service.ticketing.app.command.create_event_use_case import CreateEventUseCase
from src.service.ticketing.domain.entity.user_entity import UserEntity, UserRole
from src.service.ticketing.domain.enum.event_category import EventCategory
from src.service.ticketing.driven_adapter.model.event_model import EventModel
from src.service.ticketing.driving_adapter.http_controller.auth.jwt_auth import JwtAuth


@dataclass
class EventConfig:
    """Event seed configuration"""

    title: str
    venue: str
    category: EventCategory
    total_tickets: int
    ticket_price: Decimal
    days_ahead: int
    hours: int


DEMO_USERS = [
    UserEntity(id=1, role=UserRole.ORGANIZER, email='o@t.com', name='init organizer'),
    UserEntity(id=2, role=UserRole.USER, email='b@t.com', name='init buyer'),
    UserEntity(id=3, role=UserRole.ADMIN, email='a@t.com', name='init admin'),
]

DEMO_EVENTS = [
    EventConfig(
        title='Summer Jazz Night',
        venue='Riverside Hall',
        category=EventCategory.CONCERT,
        total_tickets=200,
        ticket_price=Decimal('20.00'),
        days_ahead=30,
        hours=4,
    ),
    EventConfig(
        title='PyData Meetup',
        venue='Innovation Hub',
        category=EventCategory.CONFERENCE,
        total_tickets=50,
        ticket_price=Decimal('0.00'),
        days_ahead=7,
        hours=3,
    ),
]


async def create_events(organizer: UserEntity) -> int:
    use_case = CreateEventUseCase(uow_factory=SqlAlchemyUnitOfWork)
    now = utc_now()

    for config in DEMO_EVENTS:
        start_at = now + timedelta(days=config.days_ahead)
        event = await use_case.execute(
            organizer=organizer,
            title=config.title,
            description=f'{config.title} at {config.venue}',
            venue=config.venue,
            start_at=start_at,
            end_at=start_at + timedelta(hours=config.hours),
            total_tickets=config.total_tickets,
            ticket_price=config.ticket_price,
            category=config.category,
        )
        print(f'   ✅ Event {event.id}: {event.title} ({event.total_tickets} tickets)')

    return len(DEMO_EVENTS)


async def verify_data() -> None:
    async with get_session_maker()() as session:
        count = await session.scalar(select(func.count()).select_from(EventModel))
    print(f'   📊 Events in database: {count}')


def print_tokens() -> None:
    jwt_auth = JwtAuth()
    for user in DEMO_USERS:
        print(f'   🔑 {user.role.value:<9} id={user.id}  {jwt_auth.create_jwt_token(user)}')


async def main() -> None:
    print('🌱 Starting data seeding...')
    print('=' * 50)

    try:
        print('🎪 Creating events...')
        await create_events(DEMO_USERS[0])
        await verify_data()

        print('👤 Demo user tokens (send as "Authorization: Bearer <token>"):')
        print_tokens()
    except Exception as e:
        print(f'❌ Seeding failed: {e}')
        raise SystemExit(1) from e
    finally:
        await dispose_engine()

    print('=' * 50)
    print('✅ Data seeding completed!')


if __name__ == '__main__':
    asyncio.run(main())
