from decimal import Decimal

import attrs


def _validate_non_empty_string(instance: object, attribute: attrs.Attribute, value: str) -> None:
    if not value or not value.strip():
        raise ValueError(f'Seat category {attribute.name} cannot be empty')


def _validate_non_negative(instance: object, attribute: attrs.Attribute, value: Decimal | int) -> None:
    if value < 0:
        raise ValueError(f'Seat category {attribute.name} cannot be negative')


@attrs.define
class SeatCategoryEntity:
    """Identified by (event_id, id); owned by its event."""

    event_id: str = attrs.field(validator=_validate_non_empty_string)
    id: str = attrs.field(validator=_validate_non_empty_string)
    name: str = attrs.field(validator=_validate_non_empty_string)
    price: Decimal = attrs.field(converter=Decimal, validator=_validate_non_negative)
    available_count: int = attrs.field(validator=_validate_non_negative)
