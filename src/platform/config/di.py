"""
https://python-dependency-injector.ets-labs.org/index.html
https://python-dependency-injector.ets-labs.org/examples/fastapi-sqlalchemy.html
"""

from typing import Optional

from dependency_injector import containers, providers

from src.platform.config.core_setting import settings
from src.platform.database.orm_db_setting import Database
from src.platform.metrics.catalog_metrics import metrics
from src.platform.resilience.circuit_breaker import CircuitBreakerConfig, CircuitBreakerRegistry
from src.platform.resilience.retry_policy import RetryConfig, RetryPolicy
from src.service.catalog.app.service.seat_category_reconciler import SeatCategoryReconciler
from src.service.catalog.driven_adapter.blob.gcs_blob_store_impl import GcsBlobStoreImpl
from src.service.catalog.driven_adapter.blob.local_blob_store_impl import LocalBlobStoreImpl
from src.service.catalog.driven_adapter.repo.event_command_repo_impl import EventCommandRepoImpl
from src.service.catalog.driven_adapter.repo.event_query_repo_impl import EventQueryRepoImpl
from src.service.catalog.driven_adapter.repo.resilient_event_query_repo import (
    ResilientEventQueryRepo,
)
from src.service.catalog.driving_adapter.http_controller.auth.jwt_auth import JwtAuth


def _gcs_access_token() -> Optional[str]:
    token = settings.GCS_ACCESS_TOKEN
    return token.get_secret_value() if token else None


class Container(containers.DeclarativeContainer):
    # Configuration (read once at startup)
    config_service = providers.Object(settings)

    # Database (primary for writes, replica if configured for public reads)
    database = providers.Singleton(Database, read_only=False)
    read_database = providers.Singleton(Database, read_only=True)

    # Repositories (stateless - use session_factory per-call)
    # Write path resolves its target on the primary to avoid replica lag
    event_query_repo = providers.Singleton(
        EventQueryRepoImpl, session_factory=database.provided.session
    )
    replica_event_query_repo = providers.Singleton(
        EventQueryRepoImpl, session_factory=read_database.provided.session
    )
    event_command_repo = providers.Singleton(
        EventCommandRepoImpl, session_factory=database.provided.session
    )

    # Resilient read path: retry -> circuit breaker (per operation) -> fallback
    retry_config = providers.Singleton(
        RetryConfig,
        max_attempts=config_service.provided.READ_RETRY_MAX_ATTEMPTS,
        wait_seconds=config_service.provided.READ_RETRY_WAIT_SECONDS,
        backoff_multiplier=config_service.provided.READ_RETRY_BACKOFF_MULTIPLIER,
        max_wait_seconds=config_service.provided.READ_RETRY_MAX_WAIT_SECONDS,
        attempt_timeout_seconds=config_service.provided.READ_TIMEOUT_SECONDS,
    )
    circuit_breaker_config = providers.Singleton(
        CircuitBreakerConfig,
        failure_rate_threshold=config_service.provided.CB_FAILURE_RATE_THRESHOLD,
        sliding_window_size=config_service.provided.CB_SLIDING_WINDOW_SIZE,
        minimum_number_of_calls=config_service.provided.CB_MINIMUM_CALLS,
        wait_duration_in_open_state=config_service.provided.CB_WAIT_DURATION_OPEN_SECONDS,
        permitted_calls_in_half_open_state=config_service.provided.CB_PERMITTED_CALLS_HALF_OPEN,
    )
    circuit_breaker_registry = providers.Singleton(
        CircuitBreakerRegistry,
        config=circuit_breaker_config,
        on_state_change=providers.Object(metrics.record_circuit_transition),
    )
    retry_policy = providers.Singleton(
        RetryPolicy,
        config=retry_config,
        breaker_registry=circuit_breaker_registry,
    )
    resilient_event_query_repo = providers.Singleton(
        ResilientEventQueryRepo,
        delegate=replica_event_query_repo,
        retry_policy=retry_policy,
    )

    # Blob store (event images), selected by BLOB_STORE_BACKEND
    blob_store = providers.Selector(
        config_service.provided.BLOB_STORE_BACKEND,
        gcs=providers.Singleton(
            GcsBlobStoreImpl,
            bucket=config_service.provided.GCP_STORAGE_BUCKET_NAME,
            endpoint=config_service.provided.GCS_ENDPOINT,
            access_token=providers.Callable(_gcs_access_token),
            timeout_seconds=config_service.provided.BLOB_UPLOAD_TIMEOUT_SECONDS,
        ),
        local=providers.Singleton(
            LocalBlobStoreImpl,
            root_dir=config_service.provided.BLOB_LOCAL_DIR,
        ),
    )

    # Write path collaborators
    seat_category_reconciler = providers.Singleton(
        SeatCategoryReconciler, event_command_repo=event_command_repo
    )

    # Auth service
    jwt_auth = providers.Singleton(JwtAuth)


container = Container()


def cleanup() -> None:
    container.reset_singletons()
