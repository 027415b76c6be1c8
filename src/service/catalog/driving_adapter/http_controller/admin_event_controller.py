from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from pydantic import ValidationError as PydanticValidationError

from src.platform.exception.exceptions import ValidationError
from src.platform.logging.loguru_io import Logger
from src.service.catalog.app.command.create_or_update_event_use_case import (
    CreateOrUpdateEventUseCase,
)
from src.service.catalog.app.dto.event_update_command import ImageUpload
from src.service.catalog.driving_adapter.http_controller.auth.jwt_auth import Principal
from src.service.catalog.driving_adapter.http_controller.auth.role_auth import require_admin
from src.service.catalog.driving_adapter.http_controller.schema.event_schema import (
    EventAdminRequest,
    EventDetailResponse,
)


router = APIRouter()


def parse_event_data(event_data: str) -> EventAdminRequest:
    try:
        return EventAdminRequest.model_validate_json(event_data)
    except PydanticValidationError as e:
        details = '; '.join(
            f'{".".join(str(part) for part in error["loc"]) or "eventData"}: {error["msg"]}'
            for error in e.errors()
        )
        raise ValidationError(f'Invalid eventData: {details}') from e


async def read_image(image_file: Optional[UploadFile]) -> Optional[ImageUpload]:
    if image_file is None:
        return None
    content = await image_file.read()
    if not content:
        return None
    return ImageUpload(
        content=content,
        content_type=image_file.content_type or 'application/octet-stream',
        filename=image_file.filename or 'image',
    )


@router.post('/events', status_code=status.HTTP_201_CREATED)
@Logger.io
async def create_or_update_event(
    event_data: str = Form(..., alias='eventData'),
    image_file: Optional[UploadFile] = File(None, alias='imageFile'),
    principal: Principal = Depends(require_admin),
    use_case: CreateOrUpdateEventUseCase = Depends(CreateOrUpdateEventUseCase.depends),
) -> EventDetailResponse:
    request = parse_event_data(event_data)
    image = await read_image(image_file)
    Logger.base.info(
        f'🛠️ [ADMIN_EVENT] {principal.subject} submitted '
        f'{"update of " + request.id if request.id else "new event"} '
        f'(image: {image is not None})'
    )

    event = await use_case.create_or_update(request.to_command(image=image))
    seat_categories = await use_case.get_saved_seat_categories(event_id=event.id)

    return EventDetailResponse.build(event=event, seat_categories=seat_categories)
