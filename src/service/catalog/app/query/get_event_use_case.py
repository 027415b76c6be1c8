from typing import Optional, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.logging.loguru_io import Logger
from src.service.catalog.app.dto.event_detail import EventDetail
from src.service.catalog.app.interface.i_event_query_repo import IEventQueryRepo
from src.service.catalog.domain.entity.event_entity import EventEntity


class GetEventUseCase:
    def __init__(self, event_query_repo: IEventQueryRepo) -> None:
        self.event_query_repo = event_query_repo

    @classmethod
    @inject
    def depends(
        cls,
        event_query_repo: IEventQueryRepo = Depends(
            Provide[Container.resilient_event_query_repo]
        ),
    ) -> Self:
        return cls(event_query_repo=event_query_repo)

    @Logger.io
    async def get_event(self, *, event_id: str) -> Optional[EventEntity]:
        return await self.event_query_repo.get_by_id(event_id=event_id)

    @Logger.io
    async def get_event_detail(self, *, event_id: str) -> Optional[EventDetail]:
        """Event with its seat categories; None when the event does not exist."""
        event = await self.event_query_repo.get_by_id(event_id=event_id)
        if event is None:
            Logger.base.info(f'🔍 [GET_EVENT] Event {event_id} not found')
            return None

        seat_categories = await self.event_query_repo.get_categories_by_event(event_id=event_id)
        return EventDetail(event=event, seat_categories=seat_categories)
