#!/usr/bin/env python3
"""
Database Seed Script
Populate sample events into the catalog

Events go through CreateOrUpdateEventUseCase, so seeded data obeys the
same validation and seat-category reconciliation as the admin endpoint.
Tables are created first if missing.
"""

import asyncio
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from src.platform.config.di import container
from src.platform.database.orm_db_setting import create_db_and_tables, dispose_engines
from src.service.catalog.app.command.create_or_update_event_use_case import (
    CreateOrUpdateEventUseCase,
)
from src.service.catalog.app.dto.event_update_command import (
    EventUpdateCommand,
    SeatCategoryRequest,
)


def _sample_events() -> list[EventUpdateCommand]:
    first_night = datetime.now(timezone.utc).replace(
        hour=20, minute=0, second=0, microsecond=0
    ) + timedelta(days=30)

    return [
        EventUpdateCommand(
            name='Jazz Night',
            description='Late set at the club',
            start_time=first_night,
            venue='Blue Room',
            seat_categories=[
                SeatCategoryRequest(name='GA', price=Decimal('25.00'), available_count=100),
            ],
        ),
        EventUpdateCommand(
            name='Symphony No. 9',
            description='Full orchestra and choir',
            start_time=first_night + timedelta(days=7),
            venue='Concert Hall',
            seat_categories=[
                SeatCategoryRequest(name='Stalls', price=Decimal('80.00'), available_count=400),
                SeatCategoryRequest(name='Balcony', price=Decimal('45.00'), available_count=250),
                SeatCategoryRequest(name='Box', price=Decimal('150.00'), available_count=24),
            ],
        ),
        EventUpdateCommand(
            name='Indie Showcase',
            start_time=first_night + timedelta(days=14),
            venue='Warehouse 5',
            seat_categories=[
                SeatCategoryRequest(name='Floor', price=Decimal('30.00'), available_count=600),
                SeatCategoryRequest(name='Mezzanine', price=Decimal('42.50'), available_count=120),
            ],
        ),
    ]


def _build_use_case() -> CreateOrUpdateEventUseCase:
    return CreateOrUpdateEventUseCase(
        event_query_repo=container.event_query_repo(),
        event_command_repo=container.event_command_repo(),
        blob_store=container.blob_store(),
        seat_category_reconciler=container.seat_category_reconciler(),
    )


async def main() -> None:
    print('🌱 Starting catalog seed...')
    print('=' * 50)

    try:
        await create_db_and_tables()
        use_case = _build_use_case()

        for command in _sample_events():
            event = await use_case.create_or_update(command)
            print(
                f'   ✅ {event.name} @ {event.venue} -> {event.id} '
                f'({len(command.seat_categories)} seat categories)'
            )

        print('=' * 50)
        print('✅ Seed completed!')
    except Exception as e:
        print(f'❌ Seed failed: {e}')
        raise SystemExit(1) from e
    finally:
        await dispose_engines()


if __name__ == '__main__':
    asyncio.run(main())
