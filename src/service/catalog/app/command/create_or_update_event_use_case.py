"""
Create Or Update Event Use Case

Admin write path. No transaction spans the steps; consistency comes from
their order:

1. Validate the request (no store access)
2. Resolve the target event (update) or synthesise a new one (create)
3. Apply field updates in memory
4. Upload the image, if any, and point image_url at it
5. Upsert the event  <- commit point
6. Replace the event's seat categories with the requested set
7. Return the persisted event

A failure before step 5 leaves the stored state untouched.
"""

from pathlib import PurePosixPath
import time
from typing import Awaitable, Callable, List, Optional, Self, TypeVar

import anyio
import attrs
from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from opentelemetry import trace

from src.platform.config.core_setting import settings
from src.platform.config.di import Container
from src.platform.exception.exceptions import (
    DeadlineExceededError,
    NotFoundError,
    PersistentStoreError,
    StoreError,
    ValidationError,
)
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.catalog_metrics import metrics
from src.service.catalog.app.dto.event_update_command import EventUpdateCommand, ImageUpload
from src.service.catalog.app.interface.i_blob_store import IBlobStore
from src.service.catalog.app.interface.i_event_command_repo import IEventCommandRepo
from src.service.catalog.app.interface.i_event_query_repo import IEventQueryRepo
from src.service.catalog.app.service.seat_category_reconciler import SeatCategoryReconciler
from src.service.catalog.domain.entity.event_entity import EventEntity
from src.service.catalog.domain.entity.seat_category_entity import SeatCategoryEntity


T = TypeVar('T')

STEP_RESOLVE = 'resolve_target'
STEP_PERSIST = 'persist_event'
STEP_RECONCILE = 'reconcile_seat_categories'
STEP_READ_BACK = 'load_saved_seat_categories'


@attrs.define
class _Progress:
    uploaded_image_url: Optional[str] = None
    committed: bool = False


class CreateOrUpdateEventUseCase:
    def __init__(
        self,
        *,
        event_query_repo: IEventQueryRepo,
        event_command_repo: IEventCommandRepo,
        blob_store: IBlobStore,
        seat_category_reconciler: SeatCategoryReconciler,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.event_query_repo = event_query_repo
        self.event_command_repo = event_command_repo
        self.blob_store = blob_store
        self.seat_category_reconciler = seat_category_reconciler
        self.clock = clock
        self.tracer = trace.get_tracer(__name__)

    @classmethod
    @inject
    def depends(
        cls,
        event_query_repo: IEventQueryRepo = Depends(Provide[Container.event_query_repo]),
        event_command_repo: IEventCommandRepo = Depends(Provide[Container.event_command_repo]),
        blob_store: IBlobStore = Depends(Provide[Container.blob_store]),
        seat_category_reconciler: SeatCategoryReconciler = Depends(
            Provide[Container.seat_category_reconciler]
        ),
    ) -> Self:
        return cls(
            event_query_repo=event_query_repo,
            event_command_repo=event_command_repo,
            blob_store=blob_store,
            seat_category_reconciler=seat_category_reconciler,
        )

    @Logger.io
    async def create_or_update(
        self, command: EventUpdateCommand, *, deadline_seconds: Optional[float] = None
    ) -> EventEntity:
        """
        Raises:
            ValidationError: Request is incomplete (nothing touched)
            NotFoundError: Update target does not exist (nothing touched)
            BlobUploadError: Image upload failed (nothing persisted)
            PersistentStoreError: Catalog store failed at the named step
            DeadlineExceededError: The whole run exceeded its deadline
        """
        deadline = (
            settings.WRITE_DEADLINE_SECONDS if deadline_seconds is None else deadline_seconds
        )
        progress = _Progress()

        with self.tracer.start_as_current_span(
            'use_case.create_or_update_event',
            attributes={'event.id': command.id or '', 'event.is_update': command.is_update},
        ):
            try:
                with anyio.fail_after(deadline):
                    event = await self._run(command, progress)
            except TimeoutError:
                metrics.record_write(outcome='failed')
                if progress.uploaded_image_url and not progress.committed:
                    Logger.base.warning(
                        f'⏰ [CREATE_OR_UPDATE] Deadline hit after upload; '
                        f'orphaned blob left at {progress.uploaded_image_url}'
                    )
                raise DeadlineExceededError(
                    f'Event write did not finish within {deadline:g}s'
                ) from None
            except Exception:
                metrics.record_write(outcome='failed')
                raise

        metrics.record_write(outcome='updated' if command.is_update else 'created')
        return event

    async def _run(self, command: EventUpdateCommand, progress: _Progress) -> EventEntity:
        # Step 1: Validate
        self.validate(command)

        # Step 2 + 3: Resolve target, apply field updates
        if command.is_update:
            assert command.id is not None
            existing = await self._store_step(
                STEP_RESOLVE, self.event_query_repo.get_by_id(event_id=command.id)
            )
            if existing is None:
                Logger.base.warning(f'⚠️ [CREATE_OR_UPDATE] Update target not found: {command.id}')
                raise NotFoundError(f'Update target not found: {command.id}')
            event = attrs.evolve(
                existing,
                name=command.name,
                description=command.description,
                start_time=command.start_time,
                venue=command.venue,
            )
            Logger.base.info(f'✏️ [CREATE_OR_UPDATE] Updating event {event.id}')
        else:
            assert command.start_time is not None
            event = EventEntity.create(
                name=command.name,
                description=command.description,
                start_time=command.start_time,
                venue=command.venue,
            )
            Logger.base.info(f'🆕 [CREATE_OR_UPDATE] Creating event {event.id} ({event.name})')

        # Step 4: Optional image upload (previous image_url kept otherwise)
        if command.image is not None and command.image.content:
            image_url = await self.blob_store.put(
                key=self.image_key(event_id=event.id, image=command.image),
                data=command.image.content,
                content_type=command.image.content_type,
            )
            progress.uploaded_image_url = image_url
            event = attrs.evolve(event, image_url=image_url)

        # Step 5: Persist (commit point)
        saved_event = await self._store_step(
            STEP_PERSIST, self.event_command_repo.upsert_event(event=event)
        )
        progress.committed = True

        # Step 6: Reconcile seat categories (replace-all)
        previous = await self._store_step(
            STEP_RECONCILE,
            self.event_query_repo.get_categories_by_event(event_id=saved_event.id),
        )
        await self._store_step(
            STEP_RECONCILE,
            self.seat_category_reconciler.reconcile(
                event_id=saved_event.id,
                previous=previous,
                requested=command.seat_categories,
            ),
        )

        Logger.base.info(f'✅ [CREATE_OR_UPDATE] Event {saved_event.id} saved')
        return saved_event

    @Logger.io
    async def get_saved_seat_categories(self, *, event_id: str) -> List[SeatCategoryEntity]:
        """Categories as just written, read from the primary store (no fallback)."""
        return await self._store_step(
            STEP_READ_BACK, self.event_query_repo.get_categories_by_event(event_id=event_id)
        )

    @staticmethod
    async def _store_step(step: str, awaitable: Awaitable[T]) -> T:
        try:
            return await awaitable
        except StoreError as e:
            raise PersistentStoreError(e.message, step=step) from e

    def image_key(self, *, event_id: str, image: ImageUpload) -> str:
        filename = PurePosixPath(image.filename.replace('\\', '/')).name or 'image'
        epoch_millis = int(self.clock() * 1000)
        return f'event_images/{event_id}/{epoch_millis}_{filename}'

    @staticmethod
    def validate(command: EventUpdateCommand) -> None:
        if not command.name or not command.name.strip():
            raise ValidationError('Event name is required')
        if command.start_time is None:
            raise ValidationError('Event start time is required')
        if not command.venue or not command.venue.strip():
            raise ValidationError('Event venue is required')
        if not command.seat_categories:
            raise ValidationError('At least one seat category is required')

        seen_ids: set[str] = set()
        for index, category in enumerate(command.seat_categories):
            if not category.name or not category.name.strip():
                raise ValidationError(f'Seat category #{index + 1} name is required')
            if category.price < 0:
                raise ValidationError(f'Seat category "{category.name}" price cannot be negative')
            if category.available_count < 0:
                raise ValidationError(
                    f'Seat category "{category.name}" available count cannot be negative'
                )
            if category.id and category.id.strip():
                if category.id in seen_ids:
                    raise ValidationError(f'Duplicate seat category id "{category.id}"')
                seen_ids.add(category.id)
