#!/usr/bin/env python3
"""
Database Reset Script
Reset the catalog schema

Features:
1. Drop all catalog tables (seat_categories, events)
2. Recreate them from the SQLAlchemy models

Notes:
- This script only resets database structure, does not seed data
- To seed sample events, run `python -m script.seed_data`
"""

import asyncio

from src.platform.config.core_setting import settings
from src.platform.database.orm_db_setting import Base, dispose_engines, get_engine
import src.service.catalog.driven_adapter.model  # noqa: F401


async def drop_and_recreate_tables() -> None:
    print(f'Database URL: {settings.DATABASE_URL_ASYNC.split("@")[-1]}')

    async with get_engine().begin() as conn:
        print('🗑️ Dropping catalog tables...')
        await conn.run_sync(Base.metadata.drop_all)
        print('🏗️ Creating catalog tables...')
        await conn.run_sync(Base.metadata.create_all)

    print(f'   ✅ Tables ready: {", ".join(sorted(Base.metadata.tables))}')


async def main() -> None:
    print('🔄 Starting database reset...')
    print('=' * 50)

    try:
        await drop_and_recreate_tables()
        print('=' * 50)
        print('✅ Database reset completed!')
        print('💡 To seed sample events, run: python -m script.seed_data')
    except Exception as e:
        print(f'❌ Reset failed: {e}')
        raise SystemExit(1) from e
    finally:
        await dispose_engines()


if __name__ == '__main__':
    asyncio.run(main())
