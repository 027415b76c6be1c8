"""
Unit tests for the DI Container

Test Coverage:
1. A fresh Container resolves its providers without any overrides
2. Breaker state changes reach the Prometheus gauges through the container
"""

from prometheus_client import REGISTRY
import pytest

from src.platform.config.di import Container
from src.platform.metrics.catalog_metrics import CatalogMetrics
from src.platform.resilience.circuit_breaker import CircuitBreakerRegistry, CircuitState
from src.platform.resilience.retry_policy import RetryPolicy
from src.service.catalog.driven_adapter.blob.local_blob_store_impl import LocalBlobStoreImpl
from src.service.catalog.driven_adapter.repo.resilient_event_query_repo import (
    ResilientEventQueryRepo,
)
from src.service.catalog.driving_adapter.http_controller.auth.jwt_auth import JwtAuth


pytestmark = pytest.mark.unit


class TestContainer:
    def setup_method(self):
        self.container = Container()

    def teardown_method(self):
        self.container.reset_singletons()

    def test_resolves_providers_without_overrides(self):
        registry = self.container.circuit_breaker_registry()
        retry_policy = self.container.retry_policy()

        assert isinstance(registry, CircuitBreakerRegistry)
        assert isinstance(retry_policy, RetryPolicy)
        assert retry_policy.breaker_registry is registry
        assert isinstance(self.container.resilient_event_query_repo(), ResilientEventQueryRepo)
        assert isinstance(self.container.blob_store(), LocalBlobStoreImpl)
        assert isinstance(self.container.jwt_auth(), JwtAuth)

    def test_singletons_are_shared(self):
        assert (
            self.container.circuit_breaker_registry()
            is self.container.circuit_breaker_registry()
        )

    def test_breaker_transitions_update_state_gauge(self):
        breaker = self.container.circuit_breaker_registry().get('catalog.di_wiring')

        # When: Enough failures to open the circuit
        for _ in range(breaker.config.minimum_number_of_calls):
            breaker.record_failure()

        # Then: Gauge reports OPEN for this breaker
        assert breaker.state == CircuitState.OPEN
        assert REGISTRY.get_sample_value(
            'circuit_breaker_state', {'name': 'catalog.di_wiring'}
        ) == CatalogMetrics.CIRCUIT_STATE_VALUES['open']
