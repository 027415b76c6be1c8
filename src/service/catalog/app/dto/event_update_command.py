from datetime import datetime
from decimal import Decimal
from typing import List, Optional

import attrs


@attrs.frozen
class SeatCategoryRequest:
    name: str
    price: Decimal = attrs.field(converter=Decimal)
    available_count: int
    id: Optional[str] = None


@attrs.frozen
class ImageUpload:
    content: bytes
    content_type: str
    filename: str


@attrs.frozen
class EventUpdateCommand:
    """Create-or-update request: a blank or missing id means create."""

    name: str
    start_time: Optional[datetime]
    venue: str
    seat_categories: List[SeatCategoryRequest] = attrs.field(factory=list)
    description: Optional[str] = None
    id: Optional[str] = None
    image: Optional[ImageUpload] = None

    @property
    def is_update(self) -> bool:
        return bool(self.id and self.id.strip())
