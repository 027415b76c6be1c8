from prometheus_client import Counter, Gauge


class CatalogMetrics:
    """
    Event Catalog Core Metrics Collector

    Tracks the resilient read path (retries, fallbacks, breaker state)
    and the outcome of admin event writes.
    """

    CIRCUIT_STATE_VALUES = {'closed': 0, 'half_open': 1, 'open': 2}

    def __init__(self) -> None:
        # ========== Read Path Metrics ==========
        self.catalog_read_calls = Counter(
            'catalog_read_calls_total',
            'Catalog read calls by final outcome',
            ['operation', 'outcome'],  # outcome: success/fallback/error
        )

        self.catalog_read_retries = Counter(
            'catalog_read_retries_total',
            'Retried catalog read attempts',
            ['operation'],
        )

        # ========== Circuit Breaker Metrics ==========
        self.circuit_breaker_state = Gauge(
            'circuit_breaker_state',
            'Circuit breaker state (0=closed, 1=half_open, 2=open)',
            ['name'],
        )

        self.circuit_breaker_transitions = Counter(
            'circuit_breaker_transitions_total',
            'Circuit breaker state transitions',
            ['name', 'to_state'],
        )

        # ========== Write Path Metrics ==========
        self.event_writes = Counter(
            'event_writes_total',
            'Admin create-or-update event runs',
            ['outcome'],  # outcome: created/updated/failed
        )

    def record_read(self, *, operation: str, outcome: str) -> None:
        self.catalog_read_calls.labels(operation=operation, outcome=outcome).inc()

    def record_retry(self, *, operation: str) -> None:
        self.catalog_read_retries.labels(operation=operation).inc()

    def record_circuit_transition(self, name: str, from_state: str, to_state: str) -> None:
        self.circuit_breaker_state.labels(name=name).set(
            self.CIRCUIT_STATE_VALUES.get(to_state, 0)
        )
        self.circuit_breaker_transitions.labels(name=name, to_state=to_state).inc()

    def record_write(self, *, outcome: str) -> None:
        self.event_writes.labels(outcome=outcome).inc()


# Global metrics instance
metrics = CatalogMetrics()
