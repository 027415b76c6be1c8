"""
Event Query Repository Implementation - CQRS Read Side
"""

from contextlib import asynccontextmanager
from typing import AsyncContextManager, AsyncIterator, Callable, List, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.logging.loguru_io import Logger
from src.service.catalog.app.interface.i_event_query_repo import IEventQueryRepo
from src.service.catalog.domain.entity.event_entity import EventEntity
from src.service.catalog.domain.entity.seat_category_entity import SeatCategoryEntity
from src.service.catalog.domain.value_object.event_page import EventPage
from src.service.catalog.driven_adapter.model.event_model import EventModel
from src.service.catalog.driven_adapter.model.seat_category_model import SeatCategoryModel
from src.service.catalog.driven_adapter.repo.store_error_translator import (
    translate_store_errors,
)


class EventQueryRepoImpl(IEventQueryRepo):
    """Event Query Repository Implementation - CQRS Read Side"""

    def __init__(self, session_factory: Callable[..., AsyncContextManager[AsyncSession]]) -> None:
        self.session_factory = session_factory

    @asynccontextmanager
    async def _get_session(self, operation: str) -> AsyncIterator[AsyncSession]:
        async with translate_store_errors(operation):
            async with self.session_factory() as session:
                yield session

    @staticmethod
    def _model_to_event(event_model: EventModel) -> EventEntity:
        return EventEntity(
            id=event_model.event_id,
            name=event_model.name,
            description=event_model.description,
            start_time=event_model.start_time,
            venue=event_model.venue,
            image_url=event_model.image_url,
        )

    @staticmethod
    def _model_to_category(category_model: SeatCategoryModel) -> SeatCategoryEntity:
        return SeatCategoryEntity(
            event_id=category_model.event_id,
            id=category_model.category_id,
            name=category_model.name,
            price=category_model.price,
            available_count=category_model.available_count,
        )

    @Logger.io
    async def get_by_id(self, *, event_id: str) -> Optional[EventEntity]:
        async with self._get_session('get_by_id') as session:
            event_model = await session.get(EventModel, event_id)
            if event_model is None:
                return None
            return self._model_to_event(event_model)

    @Logger.io
    async def list_page(self, *, page: int, size: int) -> EventPage:
        async with self._get_session('list_page') as session:
            total = await session.scalar(select(func.count()).select_from(EventModel))
            result = await session.execute(
                select(EventModel)
                .order_by(EventModel.event_id)
                .offset(page * size)
                .limit(size)
            )
            items = [self._model_to_event(model) for model in result.scalars().all()]

        return EventPage(items=items, page=page, size=size, total=total or 0)

    @Logger.io
    async def get_categories_by_event(self, *, event_id: str) -> List[SeatCategoryEntity]:
        async with self._get_session('get_categories_by_event') as session:
            result = await session.execute(
                select(SeatCategoryModel)
                .where(SeatCategoryModel.event_id == event_id)
                .order_by(SeatCategoryModel.category_id)
            )
            return [self._model_to_category(model) for model in result.scalars().all()]
