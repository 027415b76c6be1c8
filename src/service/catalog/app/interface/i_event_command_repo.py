"""
Event Command Repository Interface

Catalog store write side - CQRS Write Side. Each call commits on its own;
there is no transaction spanning calls.
"""

from abc import ABC, abstractmethod
from typing import List

from src.service.catalog.domain.entity.event_entity import EventEntity
from src.service.catalog.domain.entity.seat_category_entity import SeatCategoryEntity


class IEventCommandRepo(ABC):
    """Event Command Repository Interface - CQRS Write Side"""

    @abstractmethod
    async def upsert_event(self, *, event: EventEntity) -> EventEntity:
        """Insert or replace the event row keyed by its id."""
        pass

    @abstractmethod
    async def delete_event(self, *, event_id: str) -> None:
        pass

    @abstractmethod
    async def upsert_categories(
        self, *, categories: List[SeatCategoryEntity]
    ) -> List[SeatCategoryEntity]:
        """Insert or replace seat categories keyed by (event_id, id)."""
        pass

    @abstractmethod
    async def delete_categories(self, *, categories: List[SeatCategoryEntity]) -> None:
        pass
