from typing import Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.core_setting import settings
from src.platform.config.di import Container
from src.platform.exception.exceptions import ValidationError
from src.platform.logging.loguru_io import Logger
from src.service.catalog.app.interface.i_event_query_repo import IEventQueryRepo
from src.service.catalog.domain.value_object.event_page import EventPage


class ListEventsUseCase:
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
    async def list_events(self, *, page: int = 0, size: int | None = None) -> EventPage:
        """Zero-based page; degrades to an empty page when the catalog store is unavailable."""
        size = settings.DEFAULT_PAGE_SIZE if size is None else size
        if page < 0:
            raise ValidationError('page must be >= 0')
        if not 1 <= size <= settings.MAX_PAGE_SIZE:
            raise ValidationError(f'size must be between 1 and {settings.MAX_PAGE_SIZE}')

        Logger.base.info(f'📋 [LIST_EVENTS] Loading page {page} (size {size})')
        event_page = await self.event_query_repo.list_page(page=page, size=size)

        Logger.base.info(
            f'✅ [LIST_EVENTS] {len(event_page.items)} of {event_page.total} events on page {page}'
        )
        return event_page
