"""
Catalog test fixtures

InMemoryCatalogStore implements both store ports over dicts and records
every mutation, so tests can assert "nothing was written".
"""

from datetime import datetime
from decimal import Decimal
from typing import Callable, Dict, List, Optional, Tuple

import pytest

from src.platform.exception.exceptions import PersistentStoreError
from src.service.catalog.app.interface.i_event_command_repo import IEventCommandRepo
from src.service.catalog.app.interface.i_event_query_repo import IEventQueryRepo
from src.service.catalog.domain.entity.event_entity import EventEntity
from src.service.catalog.domain.entity.seat_category_entity import SeatCategoryEntity
from src.service.catalog.domain.value_object.event_page import EventPage


class InMemoryCatalogStore(IEventQueryRepo, IEventCommandRepo):
    def __init__(self) -> None:
        self.events: Dict[str, EventEntity] = {}
        self.categories: Dict[Tuple[str, str], SeatCategoryEntity] = {}
        self.mutations: List[str] = []

    # ---- query side ----

    async def get_by_id(self, *, event_id: str) -> Optional[EventEntity]:
        return self.events.get(event_id)

    async def list_page(self, *, page: int, size: int) -> EventPage:
        ids = sorted(self.events)
        items = [self.events[event_id] for event_id in ids[page * size : (page + 1) * size]]
        return EventPage(items=items, page=page, size=size, total=len(ids))

    async def get_categories_by_event(self, *, event_id: str) -> List[SeatCategoryEntity]:
        return sorted(
            (c for (owner, _), c in self.categories.items() if owner == event_id),
            key=lambda c: c.id,
        )

    # ---- command side ----

    async def upsert_event(self, *, event: EventEntity) -> EventEntity:
        self.mutations.append(f'upsert_event:{event.id}')
        self.events[event.id] = event
        return event

    async def delete_event(self, *, event_id: str) -> None:
        self.mutations.append(f'delete_event:{event_id}')
        self.events.pop(event_id, None)

    async def upsert_categories(
        self, *, categories: List[SeatCategoryEntity]
    ) -> List[SeatCategoryEntity]:
        for category in categories:
            if category.event_id not in self.events:
                raise PersistentStoreError(f'event {category.event_id} does not exist')
            self.mutations.append(f'upsert_category:{category.event_id}/{category.id}')
            self.categories[(category.event_id, category.id)] = category
        return list(categories)

    async def delete_categories(self, *, categories: List[SeatCategoryEntity]) -> None:
        for category in categories:
            self.mutations.append(f'delete_category:{category.event_id}/{category.id}')
            self.categories.pop((category.event_id, category.id), None)


@pytest.fixture
def catalog_store() -> InMemoryCatalogStore:
    return InMemoryCatalogStore()


@pytest.fixture
def make_event() -> Callable[..., EventEntity]:
    def _make_event(event_id: str = 'E1', **overrides: object) -> EventEntity:
        fields: Dict[str, object] = {
            'id': event_id,
            'name': 'Jazz Night',
            'description': 'Late set',
            'start_time': datetime(2030, 6, 1, 20, 0),
            'venue': 'Blue Room',
            'image_url': None,
        }
        fields.update(overrides)
        return EventEntity(**fields)  # type: ignore[arg-type]

    return _make_event


@pytest.fixture
def make_category() -> Callable[..., SeatCategoryEntity]:
    def _make_category(
        event_id: str = 'E1',
        category_id: str = 'C1',
        name: str = 'Old',
        price: str = '10.00',
        available_count: int = 50,
    ) -> SeatCategoryEntity:
        return SeatCategoryEntity(
            event_id=event_id,
            id=category_id,
            name=name,
            price=Decimal(price),
            available_count=available_count,
        )

    return _make_category
