"""
Resilient Event Query Repository

Decorates a plain IEventQueryRepo with retry, a per-operation circuit
breaker and fallbacks:

- list_page               -> empty page (total 0) when the store is unavailable
- get_categories_by_event -> empty list
- get_by_id               -> no fallback; StoreUnavailableError (503), so a live
                             event is never reported as missing
"""

from typing import List, Optional

from opentelemetry import trace

from src.platform.logging.loguru_io import Logger
from src.platform.resilience.retry_policy import RetryPolicy
from src.service.catalog.app.interface.i_event_query_repo import IEventQueryRepo
from src.service.catalog.domain.entity.event_entity import EventEntity
from src.service.catalog.domain.entity.seat_category_entity import SeatCategoryEntity
from src.service.catalog.domain.value_object.event_page import EventPage


LIST_EVENTS = 'catalog.list_events'
GET_EVENT = 'catalog.get_event'
GET_CATEGORIES = 'catalog.get_categories_by_event'


class ResilientEventQueryRepo(IEventQueryRepo):
    def __init__(self, *, delegate: IEventQueryRepo, retry_policy: RetryPolicy) -> None:
        self.delegate = delegate
        self.retry_policy = retry_policy
        self.tracer = trace.get_tracer(__name__)

    @Logger.io
    async def get_by_id(self, *, event_id: str) -> Optional[EventEntity]:
        with self.tracer.start_as_current_span(
            'catalog_read.get_event', attributes={'event.id': event_id}
        ):
            return await self.retry_policy.execute(
                operation=GET_EVENT,
                call=lambda: self.delegate.get_by_id(event_id=event_id),
            )

    @Logger.io
    async def list_page(self, *, page: int, size: int) -> EventPage:
        with self.tracer.start_as_current_span(
            'catalog_read.list_events', attributes={'page': page, 'size': size}
        ):
            return await self.retry_policy.execute(
                operation=LIST_EVENTS,
                call=lambda: self.delegate.list_page(page=page, size=size),
                fallback=lambda _error: EventPage.empty(page=page, size=size),
            )

    @Logger.io
    async def get_categories_by_event(self, *, event_id: str) -> List[SeatCategoryEntity]:
        with self.tracer.start_as_current_span(
            'catalog_read.get_categories', attributes={'event.id': event_id}
        ):
            return await self.retry_policy.execute(
                operation=GET_CATEGORIES,
                call=lambda: self.delegate.get_categories_by_event(event_id=event_id),
                fallback=lambda _error: [],
            )
