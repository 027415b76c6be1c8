"""
Event Command Repository Implementation - CQRS Write Side

Every method runs in its own session and commits before returning.
Upserts go through Session.merge so they behave the same on PostgreSQL and SQLite.
"""

from collections import defaultdict
from contextlib import asynccontextmanager
from typing import AsyncContextManager, AsyncIterator, Callable, List

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.logging.loguru_io import Logger
from src.service.catalog.app.interface.i_event_command_repo import IEventCommandRepo
from src.service.catalog.domain.entity.event_entity import EventEntity
from src.service.catalog.domain.entity.seat_category_entity import SeatCategoryEntity
from src.service.catalog.driven_adapter.model.event_model import EventModel
from src.service.catalog.driven_adapter.model.seat_category_model import SeatCategoryModel
from src.service.catalog.driven_adapter.repo.store_error_translator import (
    translate_store_errors,
)


class EventCommandRepoImpl(IEventCommandRepo):
    """Event Command Repository Implementation - CQRS Write Side"""

    def __init__(self, session_factory: Callable[..., AsyncContextManager[AsyncSession]]) -> None:
        self.session_factory = session_factory

    @asynccontextmanager
    async def _get_session(self, operation: str) -> AsyncIterator[AsyncSession]:
        async with translate_store_errors(operation):
            async with self.session_factory() as session:
                yield session

    @Logger.io
    async def upsert_event(self, *, event: EventEntity) -> EventEntity:
        async with self._get_session('upsert_event') as session:
            await session.merge(
                EventModel(
                    event_id=event.id,
                    name=event.name,
                    description=event.description,
                    start_time=event.start_time,
                    venue=event.venue,
                    image_url=event.image_url,
                )
            )
            await session.commit()

        Logger.base.info(f'💾 [UPSERT_EVENT] Event {event.id} persisted')
        return event

    @Logger.io
    async def delete_event(self, *, event_id: str) -> None:
        async with self._get_session('delete_event') as session:
            await session.execute(delete(EventModel).where(EventModel.event_id == event_id))
            await session.commit()

    @Logger.io
    async def upsert_categories(
        self, *, categories: List[SeatCategoryEntity]
    ) -> List[SeatCategoryEntity]:
        if not categories:
            return []

        async with self._get_session('upsert_categories') as session:
            for category in categories:
                await session.merge(
                    SeatCategoryModel(
                        event_id=category.event_id,
                        category_id=category.id,
                        name=category.name,
                        price=category.price,
                        available_count=category.available_count,
                    )
                )
            await session.commit()

        return list(categories)

    @Logger.io
    async def delete_categories(self, *, categories: List[SeatCategoryEntity]) -> None:
        if not categories:
            return

        ids_by_event: defaultdict[str, List[str]] = defaultdict(list)
        for category in categories:
            ids_by_event[category.event_id].append(category.id)

        async with self._get_session('delete_categories') as session:
            for event_id, category_ids in ids_by_event.items():
                await session.execute(
                    delete(SeatCategoryModel).where(
                        SeatCategoryModel.event_id == event_id,
                        SeatCategoryModel.category_id.in_(category_ids),
                    )
                )
            await session.commit()
