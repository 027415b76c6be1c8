import math
from typing import List

import attrs

from src.service.catalog.domain.entity.event_entity import EventEntity


@attrs.frozen
class EventPage:
    items: List[EventEntity]
    page: int  # zero-based
    size: int
    total: int

    @property
    def total_pages(self) -> int:
        if self.size <= 0:
            return 0
        return math.ceil(self.total / self.size)

    @classmethod
    def empty(cls, *, page: int, size: int) -> 'EventPage':
        return cls(items=[], page=page, size=size, total=0)
