"""
Circuit Breaker

Count-based sliding-window breaker, one instance per logical operation name.

    CLOSED ──(failure rate >= threshold over window)──> OPEN
    OPEN ──(wait duration elapsed)──> HALF_OPEN
    HALF_OPEN ──(trial failure rate < threshold)──> CLOSED
    HALF_OPEN ──(trial failure rate >= threshold)──> OPEN

State is guarded by a plain lock: critical sections never await, and
handlers running on the event loop or in worker threads may share a breaker.
"""

from collections import deque
from enum import StrEnum
import threading
import time
from typing import Callable, Deque, Dict, List, Optional, Tuple

import attrs

from src.platform.logging.loguru_io import Logger


class CircuitState(StrEnum):
    CLOSED = 'closed'
    OPEN = 'open'
    HALF_OPEN = 'half_open'


StateChangeListener = Callable[[str, str, str], None]


def _positive(instance: object, attribute: attrs.Attribute, value: float) -> None:
    if value <= 0:
        raise ValueError(f'{attribute.name} must be positive')


@attrs.frozen
class CircuitBreakerConfig:
    failure_rate_threshold: float = attrs.field(default=50.0, validator=_positive)  # percent
    sliding_window_size: int = attrs.field(default=10, validator=_positive)
    minimum_number_of_calls: int = attrs.field(default=5, validator=_positive)
    wait_duration_in_open_state: float = attrs.field(default=10.0, validator=_positive)  # seconds
    permitted_calls_in_half_open_state: int = attrs.field(default=3, validator=_positive)

    @failure_rate_threshold.validator
    def _check_threshold(self, attribute: attrs.Attribute, value: float) -> None:
        if value > 100:
            raise ValueError('failure_rate_threshold must be a percentage (0, 100]')


class CircuitBreaker:
    def __init__(
        self,
        *,
        name: str,
        config: CircuitBreakerConfig,
        clock: Callable[[], float] = time.monotonic,
        on_state_change: Optional[StateChangeListener] = None,
    ) -> None:
        self.name = name
        self.config = config
        self._clock = clock
        self._on_state_change = on_state_change
        self._lock = threading.Lock()

        self._state = CircuitState.CLOSED
        self._window: Deque[bool] = deque(maxlen=config.sliding_window_size)  # True == failed
        self._opened_at = 0.0
        self._half_open_permits_used = 0
        self._half_open_outcomes: List[bool] = []

    @property
    def state(self) -> CircuitState:
        with self._lock:
            transition = self._refresh_state()
            state = self._state
        self._notify(transition)
        return state

    @property
    def failure_rate(self) -> float:
        """Failure percentage over the current closed-state window (0 when empty)."""
        with self._lock:
            return self._rate(list(self._window))

    def try_acquire(self) -> bool:
        """Ask permission for one call. False means short-circuit to the fallback."""
        with self._lock:
            transition = self._refresh_state()
            if self._state == CircuitState.CLOSED:
                permitted = True
            elif self._state == CircuitState.OPEN:
                permitted = False
            elif self._half_open_permits_used < self.config.permitted_calls_in_half_open_state:
                self._half_open_permits_used += 1
                permitted = True
            else:
                permitted = False
        self._notify(transition)
        return permitted

    def record_success(self) -> None:
        self._record(failed=False)

    def record_failure(self) -> None:
        self._record(failed=True)

    def release(self) -> None:
        """Hand back a permit whose call ended without an outcome (cancelled)."""
        with self._lock:
            if (
                self._state == CircuitState.HALF_OPEN
                and self._half_open_permits_used > len(self._half_open_outcomes)
            ):
                self._half_open_permits_used -= 1

    def reset(self) -> None:
        with self._lock:
            transition = self._transition(CircuitState.CLOSED)
        self._notify(transition)

    # ------------------------------------------------------------------

    def _record(self, *, failed: bool) -> None:
        with self._lock:
            transition = None
            if self._state == CircuitState.CLOSED:
                self._window.append(failed)
                if (
                    len(self._window) >= self.config.minimum_number_of_calls
                    and self._rate(list(self._window)) >= self.config.failure_rate_threshold
                ):
                    transition = self._transition(CircuitState.OPEN)
            elif self._state == CircuitState.HALF_OPEN:
                self._half_open_outcomes.append(failed)
                if len(self._half_open_outcomes) >= self.config.permitted_calls_in_half_open_state:
                    rate = self._rate(self._half_open_outcomes)
                    transition = self._transition(
                        CircuitState.OPEN
                        if rate >= self.config.failure_rate_threshold
                        else CircuitState.CLOSED
                    )
            # OPEN: late outcome of a call admitted before the circuit opened; dropped
        self._notify(transition)

    def _refresh_state(self) -> Optional[Tuple[str, str]]:
        if (
            self._state == CircuitState.OPEN
            and self._clock() - self._opened_at >= self.config.wait_duration_in_open_state
        ):
            return self._transition(CircuitState.HALF_OPEN)
        return None

    def _transition(self, new_state: CircuitState) -> Optional[Tuple[str, str]]:
        old_state = self._state
        if old_state == new_state:
            return None
        self._state = new_state
        self._half_open_permits_used = 0
        self._half_open_outcomes = []
        if new_state == CircuitState.OPEN:
            self._opened_at = self._clock()
        if new_state == CircuitState.CLOSED:
            self._window.clear()
        return old_state.value, new_state.value

    def _notify(self, transition: Optional[Tuple[str, str]]) -> None:
        if transition is None:
            return
        old_state, new_state = transition
        log = Logger.base.warning if new_state == CircuitState.OPEN else Logger.base.info
        log(f'🔌 [CIRCUIT] {self.name}: {old_state} -> {new_state}')
        if self._on_state_change is not None:
            self._on_state_change(self.name, old_state, new_state)

    @staticmethod
    def _rate(outcomes: List[bool]) -> float:
        if not outcomes:
            return 0.0
        return 100.0 * sum(outcomes) / len(outcomes)


class CircuitBreakerRegistry:
    """Lazily creates one breaker per operation name, all sharing one config."""

    def __init__(
        self,
        *,
        config: CircuitBreakerConfig,
        clock: Callable[[], float] = time.monotonic,
        on_state_change: Optional[StateChangeListener] = None,
    ) -> None:
        self.config = config
        self._clock = clock
        self._on_state_change = on_state_change
        self._lock = threading.Lock()
        self._breakers: Dict[str, CircuitBreaker] = {}

    def get(self, name: str) -> CircuitBreaker:
        with self._lock:
            breaker = self._breakers.get(name)
            if breaker is None:
                breaker = CircuitBreaker(
                    name=name,
                    config=self.config,
                    clock=self._clock,
                    on_state_change=self._on_state_change,
                )
                self._breakers[name] = breaker
            return breaker

    def snapshot(self) -> Dict[str, str]:
        with self._lock:
            breakers = list(self._breakers.values())
        return {breaker.name: breaker.state.value for breaker in breakers}
