"""
Integration tests for the SQLAlchemy catalog repositories (SQLite via aiosqlite)

Test Coverage:
1. Event upsert/get/delete round trip
2. Paging ordered by event id, with total count
3. Seat category upsert/delete and per-event listing
4. Replace-all reconciliation against a real database
5. Driver failures mapped to TransientStoreError
"""

from datetime import datetime
from decimal import Decimal

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

from src.platform.database.orm_db_setting import Base
from src.platform.exception.exceptions import TransientStoreError
from src.service.catalog.app.dto.event_update_command import SeatCategoryRequest
from src.service.catalog.app.service.seat_category_reconciler import SeatCategoryReconciler
import src.service.catalog.driven_adapter.model  # noqa: F401
from src.service.catalog.driven_adapter.repo.event_command_repo_impl import EventCommandRepoImpl
from src.service.catalog.driven_adapter.repo.event_query_repo_impl import EventQueryRepoImpl


pytestmark = pytest.mark.integration


class TestEventRepoIntegration:
    @pytest_asyncio.fixture(autouse=True)
    async def setup_database(self, tmp_path):
        engine = create_async_engine(f'sqlite+aiosqlite:///{tmp_path / "catalog.db"}')
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

        session_factory = async_sessionmaker(engine, expire_on_commit=False)
        self.query_repo = EventQueryRepoImpl(session_factory=session_factory)
        self.command_repo = EventCommandRepoImpl(session_factory=session_factory)

        yield

        await engine.dispose()

    # ==================== Events ====================

    @pytest.mark.asyncio
    async def test_upsert_then_get_round_trip(self, make_event):
        event = make_event('E1', image_url='gs://bucket/poster.png')

        await self.command_repo.upsert_event(event=event)

        assert await self.query_repo.get_by_id(event_id='E1') == event

    @pytest.mark.asyncio
    async def test_upsert_existing_event_replaces_fields(self, make_event):
        await self.command_repo.upsert_event(event=make_event('E1'))

        await self.command_repo.upsert_event(
            event=make_event('E1', name='Jazz Night II', start_time=datetime(2031, 1, 1, 19, 0))
        )

        stored = await self.query_repo.get_by_id(event_id='E1')
        assert stored is not None
        assert stored.name == 'Jazz Night II'
        assert stored.start_time == datetime(2031, 1, 1, 19, 0)

    @pytest.mark.asyncio
    async def test_get_missing_event_returns_none(self):
        assert await self.query_repo.get_by_id(event_id='missing') is None

    @pytest.mark.asyncio
    async def test_delete_event(self, make_event):
        await self.command_repo.upsert_event(event=make_event('E1'))

        await self.command_repo.delete_event(event_id='E1')

        assert await self.query_repo.get_by_id(event_id='E1') is None

    @pytest.mark.asyncio
    async def test_list_page_orders_by_id(self, make_event):
        for event_id in ('e3', 'e1', 'e5', 'e2', 'e4'):
            await self.command_repo.upsert_event(event=make_event(event_id))

        page = await self.query_repo.list_page(page=1, size=2)

        assert [event.id for event in page.items] == ['e3', 'e4']
        assert page.total == 5
        assert page.total_pages == 3

    @pytest.mark.asyncio
    async def test_list_page_past_the_end_is_empty(self, make_event):
        await self.command_repo.upsert_event(event=make_event('e1'))

        page = await self.query_repo.list_page(page=4, size=10)

        assert page.items == []
        assert page.total == 1

    # ==================== Seat categories ====================

    @pytest.mark.asyncio
    async def test_categories_are_scoped_to_their_event(self, make_event, make_category):
        await self.command_repo.upsert_event(event=make_event('E1'))
        await self.command_repo.upsert_event(event=make_event('E2'))
        await self.command_repo.upsert_categories(
            categories=[
                make_category('E1', 'C2', name='VIP', price='99.50'),
                make_category('E1', 'C1', name='GA'),
                make_category('E2', 'C1', name='Other'),
            ]
        )

        categories = await self.query_repo.get_categories_by_event(event_id='E1')

        assert [(c.id, c.name) for c in categories] == [('C1', 'GA'), ('C2', 'VIP')]
        assert categories[1].price == Decimal('99.50')

    @pytest.mark.asyncio
    async def test_delete_categories_only_removes_given_ids(self, make_event, make_category):
        await self.command_repo.upsert_event(event=make_event('E1'))
        keep = make_category('E1', 'C1')
        drop = make_category('E1', 'C2')
        await self.command_repo.upsert_categories(categories=[keep, drop])

        await self.command_repo.delete_categories(categories=[drop])

        assert await self.query_repo.get_categories_by_event(event_id='E1') == [keep]

    @pytest.mark.asyncio
    async def test_reconcile_replaces_categories(self, make_event, make_category):
        # Given: E1 with category C1 "Old"
        await self.command_repo.upsert_event(event=make_event('E1'))
        await self.command_repo.upsert_categories(categories=[make_category('E1', 'C1')])
        reconciler = SeatCategoryReconciler(event_command_repo=self.command_repo)

        # When: Requested set is a single "New" without id
        await reconciler.reconcile(
            event_id='E1',
            previous=await self.query_repo.get_categories_by_event(event_id='E1'),
            requested=[SeatCategoryRequest(name='New', price=Decimal('40'), available_count=20)],
        )

        # Then: Exactly one category, "New", with a generated id
        categories = await self.query_repo.get_categories_by_event(event_id='E1')
        assert [c.name for c in categories] == ['New']
        assert categories[0].id != 'C1'

    # ==================== Failures ====================

    @pytest.mark.asyncio
    async def test_unreachable_database_is_transient(self, tmp_path):
        engine = create_async_engine(
            f'sqlite+aiosqlite:///{tmp_path / "missing_dir" / "catalog.db"}'
        )
        repo = EventQueryRepoImpl(session_factory=async_sessionmaker(engine))

        try:
            with pytest.raises(TransientStoreError, match='get_by_id failed'):
                await repo.get_by_id(event_id='E1')
        finally:
            await engine.dispose()
