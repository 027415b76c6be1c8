from datetime import datetime
from typing import Optional

import attrs
import uuid_utils


def _validate_non_empty_string(instance: object, attribute: attrs.Attribute, value: str) -> None:
    if not value or not value.strip():
        raise ValueError(f'Event {attribute.name} cannot be empty')


def new_entity_id() -> str:
    return str(uuid_utils.uuid7())


@attrs.define
class EventEntity:
    id: str = attrs.field(validator=_validate_non_empty_string)
    name: str = attrs.field(validator=_validate_non_empty_string)
    start_time: datetime = attrs.field(validator=attrs.validators.instance_of(datetime))
    venue: str = attrs.field(validator=_validate_non_empty_string)
    description: Optional[str] = None
    image_url: Optional[str] = None

    @classmethod
    def create(
        cls,
        *,
        name: str,
        start_time: datetime,
        venue: str,
        description: Optional[str] = None,
    ) -> 'EventEntity':
        """New event with a freshly generated UUIDv7 id and no image."""
        return cls(
            id=new_entity_id(),
            name=name,
            start_time=start_time,
            venue=venue,
            description=description,
        )
