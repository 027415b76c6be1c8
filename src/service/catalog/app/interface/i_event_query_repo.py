"""
Event Query Repository Interface

Catalog store read side - CQRS Read Side
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from src.service.catalog.domain.entity.event_entity import EventEntity
from src.service.catalog.domain.entity.seat_category_entity import SeatCategoryEntity
from src.service.catalog.domain.value_object.event_page import EventPage


class IEventQueryRepo(ABC):
    """Event Query Repository Interface - CQRS Read Side"""

    @abstractmethod
    async def get_by_id(self, *, event_id: str) -> Optional[EventEntity]:
        """Get event by ID; None when it does not exist."""
        pass

    @abstractmethod
    async def list_page(self, *, page: int, size: int) -> EventPage:
        """Get one zero-based page of events in primary key order, with the total count."""
        pass

    @abstractmethod
    async def get_categories_by_event(self, *, event_id: str) -> List[SeatCategoryEntity]:
        """Get all seat categories of an event (empty when none)."""
        pass
