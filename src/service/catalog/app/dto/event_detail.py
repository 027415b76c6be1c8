from typing import List

import attrs

from src.service.catalog.domain.entity.event_entity import EventEntity
from src.service.catalog.domain.entity.seat_category_entity import SeatCategoryEntity


@attrs.frozen
class EventDetail:
    event: EventEntity
    seat_categories: List[SeatCategoryEntity]
