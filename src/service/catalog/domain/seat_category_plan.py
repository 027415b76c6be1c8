"""
Seat Category Plan

Pure replace-all planning: every stored category of the event is deleted
and every desired category inserted, so the final set always equals the
desired set regardless of what was stored before.
"""

from typing import List, Sequence

import attrs

from src.service.catalog.domain.entity.seat_category_entity import SeatCategoryEntity


@attrs.frozen
class SeatCategoryPlan:
    to_delete: List[SeatCategoryEntity]
    to_insert: List[SeatCategoryEntity]

    @property
    def is_empty(self) -> bool:
        return not self.to_delete and not self.to_insert

    @classmethod
    def replace_all(
        cls,
        *,
        event_id: str,
        previous: Sequence[SeatCategoryEntity],
        desired: Sequence[SeatCategoryEntity],
    ) -> 'SeatCategoryPlan':
        foreign = [c for c in (*previous, *desired) if c.event_id != event_id]
        if foreign:
            raise ValueError(
                f'Seat categories {[c.id for c in foreign]} do not belong to event {event_id}'
            )
        return cls(to_delete=list(previous), to_insert=list(desired))
