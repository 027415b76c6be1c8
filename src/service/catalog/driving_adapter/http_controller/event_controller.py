from fastapi import APIRouter, Depends, Query, status

from src.platform.config.core_setting import settings
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.catalog.app.query.get_event_use_case import GetEventUseCase
from src.service.catalog.app.query.list_events_use_case import ListEventsUseCase
from src.service.catalog.driving_adapter.http_controller.schema.event_schema import (
    EventDetailResponse,
    EventPageResponse,
)


router = APIRouter()


@router.get('', status_code=status.HTTP_200_OK)
@Logger.io
async def list_events(
    page: int = Query(0, ge=0),
    size: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    use_case: ListEventsUseCase = Depends(ListEventsUseCase.depends),
) -> EventPageResponse:
    event_page = await use_case.list_events(page=page, size=size)
    return EventPageResponse.from_page(event_page)


@router.get('/{event_id}', status_code=status.HTTP_200_OK)
@Logger.io
async def get_event(
    event_id: str,
    use_case: GetEventUseCase = Depends(GetEventUseCase.depends),
) -> EventDetailResponse:
    detail = await use_case.get_event_detail(event_id=event_id)
    if detail is None:
        raise NotFoundError(f'Event not found: {event_id}')

    return EventDetailResponse.build(event=detail.event, seat_categories=detail.seat_categories)
