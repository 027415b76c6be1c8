"""
Unit tests for ListEventsUseCase / GetEventUseCase

Test Coverage:
1. Paging parameter validation and defaults
2. Event detail: event plus its seat categories, None when missing
"""

import pytest

from src.platform.config.core_setting import settings
from src.platform.exception.exceptions import ValidationError
from src.service.catalog.app.query.get_event_use_case import GetEventUseCase
from src.service.catalog.app.query.list_events_use_case import ListEventsUseCase


pytestmark = pytest.mark.unit


class TestListEventsUseCase:
    @pytest.fixture(autouse=True)
    def _setup(self, catalog_store, make_event):
        for event_id in ('e1', 'e2', 'e3'):
            catalog_store.events[event_id] = make_event(event_id)
        self.use_case = ListEventsUseCase(event_query_repo=catalog_store)

    @pytest.mark.asyncio
    async def test_default_page_size(self):
        page = await self.use_case.list_events()

        assert page.page == 0
        assert page.size == settings.DEFAULT_PAGE_SIZE
        assert [event.id for event in page.items] == ['e1', 'e2', 'e3']

    @pytest.mark.asyncio
    async def test_second_page(self):
        page = await self.use_case.list_events(page=1, size=2)

        assert [event.id for event in page.items] == ['e3']
        assert page.total == 3

    @pytest.mark.parametrize(
        'page, size',
        [(-1, 10), (0, 0), (0, settings.MAX_PAGE_SIZE + 1)],
    )
    @pytest.mark.asyncio
    async def test_invalid_paging_is_rejected(self, page, size):
        with pytest.raises(ValidationError):
            await self.use_case.list_events(page=page, size=size)


class TestGetEventUseCase:
    @pytest.fixture(autouse=True)
    def _setup(self, catalog_store, make_event, make_category):
        catalog_store.events['E1'] = make_event('E1')
        catalog_store.categories[('E1', 'C1')] = make_category('E1', 'C1', name='GA')
        catalog_store.categories[('E2', 'C9')] = make_category('E2', 'C9', name='Other')
        self.use_case = GetEventUseCase(event_query_repo=catalog_store)

    @pytest.mark.asyncio
    async def test_detail_includes_only_own_categories(self):
        detail = await self.use_case.get_event_detail(event_id='E1')

        assert detail is not None
        assert detail.event.id == 'E1'
        assert [c.name for c in detail.seat_categories] == ['GA']

    @pytest.mark.asyncio
    async def test_detail_of_missing_event_is_none(self):
        assert await self.use_case.get_event_detail(event_id='missing') is None

    @pytest.mark.asyncio
    async def test_get_event(self):
        event = await self.use_case.get_event(event_id='E1')

        assert event is not None
        assert event.name == 'Jazz Night'
