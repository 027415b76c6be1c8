from datetime import datetime
from decimal import Decimal

import pytest

from src.service.catalog.domain.entity.event_entity import EventEntity
from src.service.catalog.domain.entity.seat_category_entity import SeatCategoryEntity
from src.service.catalog.domain.value_object.event_page import EventPage


pytestmark = pytest.mark.unit


class TestEventEntity:
    def test_create_generates_unique_ids_and_no_image(self):
        first = EventEntity.create(
            name='Jazz Night', start_time=datetime(2030, 6, 1, 20, 0), venue='Blue Room'
        )
        second = EventEntity.create(
            name='Jazz Night', start_time=datetime(2030, 6, 1, 20, 0), venue='Blue Room'
        )

        assert first.id and second.id
        assert first.id != second.id
        assert first.image_url is None

    @pytest.mark.parametrize('field', ['id', 'name', 'venue'])
    def test_blank_required_field_is_rejected(self, field):
        fields = {
            'id': 'E1',
            'name': 'Jazz Night',
            'start_time': datetime(2030, 6, 1, 20, 0),
            'venue': 'Blue Room',
        }
        fields[field] = '  '

        with pytest.raises(ValueError, match=f'Event {field} cannot be empty'):
            EventEntity(**fields)  # type: ignore[arg-type]


class TestSeatCategoryEntity:
    def test_price_is_converted_to_decimal(self):
        category = SeatCategoryEntity(
            event_id='E1', id='C1', name='GA', price='25.50', available_count=10
        )

        assert category.price == Decimal('25.50')

    @pytest.mark.parametrize('overrides', [{'price': '-0.01'}, {'available_count': -1}])
    def test_negative_values_are_rejected(self, overrides):
        fields = {'event_id': 'E1', 'id': 'C1', 'name': 'GA', 'price': '1', 'available_count': 1}
        fields.update(overrides)

        with pytest.raises(ValueError, match='cannot be negative'):
            SeatCategoryEntity(**fields)  # type: ignore[arg-type]


class TestEventPage:
    @pytest.mark.parametrize(
        'total, size, expected',
        [(0, 10, 0), (5, 2, 3), (4, 2, 2), (1, 100, 1), (5, 0, 0)],
    )
    def test_total_pages(self, total, size, expected):
        assert EventPage(items=[], page=0, size=size, total=total).total_pages == expected

    def test_empty_page_keeps_requested_paging(self):
        page = EventPage.empty(page=3, size=20)

        assert (page.items, page.page, page.size, page.total) == ([], 3, 20, 0)
