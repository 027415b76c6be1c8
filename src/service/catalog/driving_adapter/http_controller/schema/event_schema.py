from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from src.service.catalog.app.dto.event_update_command import (
    EventUpdateCommand,
    ImageUpload,
    SeatCategoryRequest,
)
from src.service.catalog.domain.entity.event_entity import EventEntity
from src.service.catalog.domain.entity.seat_category_entity import SeatCategoryEntity
from src.service.catalog.domain.value_object.event_page import EventPage


# ============================ Requests ============================


class _EventDataModel(BaseModel):
    # eventData arrives as camelCase JSON; snake_case is accepted too
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SeatCategoryRequestSchema(_EventDataModel):
    id: Optional[str] = None
    name: str = ''
    price: Decimal
    available_count: int


class EventAdminRequest(_EventDataModel):
    """Multipart `eventData` part."""

    id: Optional[str] = None
    name: str = ''
    description: Optional[str] = None
    start_time: Optional[datetime] = None
    venue: str = ''
    seat_categories: List[SeatCategoryRequestSchema] = []

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            'example': {
                'name': 'Jazz Night',
                'description': 'Late set at the club',
                'startTime': '2030-06-01T20:00:00',
                'venue': 'Blue Room',
                'seatCategories': [{'name': 'GA', 'price': '25.00', 'availableCount': 100}],
            }
        },
    )

    def to_command(self, *, image: Optional[ImageUpload] = None) -> EventUpdateCommand:
        return EventUpdateCommand(
            id=self.id,
            name=self.name,
            description=self.description,
            start_time=self.start_time,
            venue=self.venue,
            seat_categories=[
                SeatCategoryRequest(
                    id=category.id,
                    name=category.name,
                    price=category.price,
                    available_count=category.available_count,
                )
                for category in self.seat_categories
            ],
            image=image,
        )


# ============================ Responses ============================


class EventResponse(BaseModel):
    id: str
    name: str
    description: Optional[str]
    start_time: datetime
    venue: str
    image_url: Optional[str]

    @classmethod
    def from_entity(cls, event: EventEntity) -> 'EventResponse':
        return cls(
            id=event.id,
            name=event.name,
            description=event.description,
            start_time=event.start_time,
            venue=event.venue,
            image_url=event.image_url,
        )


class SeatCategoryResponse(BaseModel):
    id: str
    event_id: str
    name: str
    price: Decimal
    available_count: int

    @classmethod
    def from_entity(cls, category: SeatCategoryEntity) -> 'SeatCategoryResponse':
        return cls(
            id=category.id,
            event_id=category.event_id,
            name=category.name,
            price=category.price,
            available_count=category.available_count,
        )


class EventDetailResponse(BaseModel):
    event: EventResponse
    seat_categories: List[SeatCategoryResponse]

    @classmethod
    def build(
        cls, *, event: EventEntity, seat_categories: List[SeatCategoryEntity]
    ) -> 'EventDetailResponse':
        return cls(
            event=EventResponse.from_entity(event),
            seat_categories=[SeatCategoryResponse.from_entity(c) for c in seat_categories],
        )


class EventPageResponse(BaseModel):
    content: List[EventResponse]
    page: int
    size: int
    total_elements: int
    total_pages: int

    @classmethod
    def from_page(cls, event_page: EventPage) -> 'EventPageResponse':
        return cls(
            content=[EventResponse.from_entity(event) for event in event_page.items],
            page=event_page.page,
            size=event_page.size,
            total_elements=event_page.total,
            total_pages=event_page.total_pages,
        )
