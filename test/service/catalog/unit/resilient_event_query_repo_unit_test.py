"""
Unit tests for ResilientEventQueryRepo

Test Coverage:
1. list_page degrades to an empty page (total 0) when retries are spent or the circuit is open
2. get_by_id: absence is a normal result; unavailability raises 503
3. get_categories_by_event degrades to an empty list
4. Breakers are isolated per operation
"""

from unittest.mock import AsyncMock

import pytest

from src.platform.exception.exceptions import StoreUnavailableError, TransientStoreError
from src.platform.resilience.circuit_breaker import (
    CircuitBreakerConfig,
    CircuitBreakerRegistry,
    CircuitState,
)
from src.platform.resilience.retry_policy import RetryConfig, RetryPolicy
from src.service.catalog.domain.value_object.event_page import EventPage
from src.service.catalog.driven_adapter.repo.resilient_event_query_repo import (
    GET_EVENT,
    LIST_EVENTS,
    ResilientEventQueryRepo,
)


pytestmark = pytest.mark.unit


class TestResilientEventQueryRepo:
    @pytest.fixture(autouse=True)
    def _setup(self, catalog_store):
        self.store = catalog_store
        self.delegate = AsyncMock(wraps=catalog_store)
        self.registry = CircuitBreakerRegistry(
            config=CircuitBreakerConfig(minimum_number_of_calls=5, sliding_window_size=10)
        )
        self.sleep = AsyncMock()
        self.repo = ResilientEventQueryRepo(
            delegate=self.delegate,
            retry_policy=RetryPolicy(
                config=RetryConfig(max_attempts=3, wait_seconds=0.1),
                breaker_registry=self.registry,
                sleep=self.sleep,
            ),
        )

    def _open_circuit(self, operation: str) -> None:
        breaker = self.registry.get(operation)
        for _ in range(5):
            breaker.record_failure()
        assert breaker.state == CircuitState.OPEN

    # ==================== list_page ====================

    @pytest.mark.asyncio
    async def test_list_passes_through_when_store_healthy(self, make_event):
        self.store.events['E1'] = make_event('E1')
        self.store.events['E2'] = make_event('E2', name='Blues Night')

        page = await self.repo.list_page(page=0, size=20)

        assert [e.id for e in page.items] == ['E1', 'E2']
        assert page.total == 2

    @pytest.mark.asyncio
    async def test_list_with_circuit_open_returns_empty_page(self, make_event):
        # Given: Store has events, but the list_events circuit is open
        self.store.events['E1'] = make_event('E1')
        self._open_circuit(LIST_EVENTS)

        # When
        page = await self.repo.list_page(page=2, size=20)

        # Then: Degraded empty page, store not touched
        assert page == EventPage(items=[], page=2, size=20, total=0)
        assert page.total_pages == 0
        self.delegate.list_page.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_list_after_exhausted_retries_returns_empty_page(self):
        self.delegate.list_page.side_effect = TransientStoreError('connection refused')

        page = await self.repo.list_page(page=0, size=10)

        assert page.items == []
        assert page.total == 0
        assert self.delegate.list_page.await_count == 3

    # ==================== get_by_id ====================

    @pytest.mark.asyncio
    async def test_get_unknown_id_returns_none(self):
        assert await self.repo.get_by_id(event_id='missing') is None
        # Absence is a successful call, not a breaker failure
        assert self.registry.get(GET_EVENT).failure_rate == 0.0

    @pytest.mark.asyncio
    async def test_get_with_store_down_raises_unavailable(self):
        self.delegate.get_by_id.side_effect = TransientStoreError('timeout')

        with pytest.raises(StoreUnavailableError):
            await self.repo.get_by_id(event_id='E1')

        assert self.delegate.get_by_id.await_count == 3

    @pytest.mark.asyncio
    async def test_get_is_unaffected_by_open_list_circuit(self, make_event):
        self.store.events['E1'] = make_event('E1')
        self._open_circuit(LIST_EVENTS)

        event = await self.repo.get_by_id(event_id='E1')

        assert event is not None
        assert event.id == 'E1'

    # ==================== get_categories_by_event ====================

    @pytest.mark.asyncio
    async def test_categories_degrade_to_empty_list(self):
        self.delegate.get_categories_by_event.side_effect = TransientStoreError('reset')

        assert await self.repo.get_categories_by_event(event_id='E1') == []
