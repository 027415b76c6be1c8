from typing import List, Sequence

from src.platform.logging.loguru_io import Logger
from src.service.catalog.app.dto.event_update_command import SeatCategoryRequest
from src.service.catalog.app.interface.i_event_command_repo import IEventCommandRepo
from src.service.catalog.domain.entity.event_entity import new_entity_id
from src.service.catalog.domain.entity.seat_category_entity import SeatCategoryEntity
from src.service.catalog.domain.seat_category_plan import SeatCategoryPlan


class SeatCategoryReconciler:
    """
    Replace-all reconciliation of an event's seat categories.

    Must run only after the owning event has been upserted. Store failures
    propagate unchanged and nothing is retried here.
    """

    def __init__(self, *, event_command_repo: IEventCommandRepo) -> None:
        self.event_command_repo = event_command_repo

    @staticmethod
    def build_desired(
        *, event_id: str, requested: Sequence[SeatCategoryRequest]
    ) -> List[SeatCategoryEntity]:
        """Caller-supplied ids are kept; missing ones get a fresh UUIDv7."""
        return [
            SeatCategoryEntity(
                event_id=event_id,
                id=request.id if request.id and request.id.strip() else new_entity_id(),
                name=request.name,
                price=request.price,
                available_count=request.available_count,
            )
            for request in requested
        ]

    @Logger.io
    async def reconcile(
        self,
        *,
        event_id: str,
        previous: Sequence[SeatCategoryEntity],
        requested: Sequence[SeatCategoryRequest],
    ) -> List[SeatCategoryEntity]:
        plan = SeatCategoryPlan.replace_all(
            event_id=event_id,
            previous=previous,
            desired=self.build_desired(event_id=event_id, requested=requested),
        )

        if plan.to_delete:
            await self.event_command_repo.delete_categories(categories=plan.to_delete)
        if plan.to_insert:
            await self.event_command_repo.upsert_categories(categories=plan.to_insert)

        Logger.base.info(
            f'🪑 [RECONCILE] Event {event_id}: removed {len(plan.to_delete)}, '
            f'inserted {len(plan.to_insert)} seat categories'
        )
        return plan.to_insert
