"""
Retry + Circuit Breaker + Fallback

RetryPolicy runs one logical read through the breaker registered for its
operation name:

- every attempt is gated by the breaker and its outcome recorded,
- each attempt is bounded by a per-attempt timeout (anyio.fail_after),
- only transient failures are retried, with capped exponential backoff,
- a refused attempt (circuit open) stops retrying at once,
- a cancelled attempt hands its breaker permit back,
- once the attempts are spent the fallback (if any) supplies the result.
"""

from typing import Any, Awaitable, Callable, Optional, Tuple, Type, TypeVar

import anyio
import attrs

from src.platform.exception.exceptions import (
    CustomBaseError,
    StoreUnavailableError,
    TransientStoreError,
)
from src.platform.logging.loguru_io import Logger
from src.platform.metrics.catalog_metrics import metrics
from src.platform.resilience.circuit_breaker import CircuitBreakerRegistry


T = TypeVar('T')

Fallback = Callable[[Exception], T]


class CallNotPermittedError(TransientStoreError):
    """The breaker refused the call; carries no store error of its own."""

    def __init__(self, operation: str) -> None:
        super().__init__(f'circuit open for {operation}')
        self.operation = operation


def _at_least_one(instance: object, attribute: attrs.Attribute, value: int) -> None:
    if value < 1:
        raise ValueError(f'{attribute.name} must be >= 1')


@attrs.frozen
class RetryConfig:
    max_attempts: int = attrs.field(default=3, validator=_at_least_one)
    wait_seconds: float = 0.5
    backoff_multiplier: float = 2.0
    max_wait_seconds: float = 5.0
    attempt_timeout_seconds: Optional[float] = 5.0

    def backoff(self, attempt: int) -> float:
        """Wait before the attempt following `attempt` (1-based)."""
        wait = self.wait_seconds * (self.backoff_multiplier ** (attempt - 1))
        return min(wait, self.max_wait_seconds)


class RetryPolicy:
    def __init__(
        self,
        *,
        config: RetryConfig,
        breaker_registry: CircuitBreakerRegistry,
        retry_on: Tuple[Type[Exception], ...] = (TransientStoreError, TimeoutError),
        sleep: Callable[[float], Awaitable[Any]] = anyio.sleep,
    ) -> None:
        self.config = config
        self.breaker_registry = breaker_registry
        self.retry_on = retry_on
        self._sleep = sleep

    async def execute(
        self,
        *,
        operation: str,
        call: Callable[[], Awaitable[T]],
        fallback: Optional[Fallback[T]] = None,
    ) -> T:
        breaker = self.breaker_registry.get(operation)
        last_error: Exception = StoreUnavailableError(f'{operation} was never attempted')

        for attempt in range(1, self.config.max_attempts + 1):
            if not breaker.try_acquire():
                last_error = CallNotPermittedError(operation)
                break

            try:
                with anyio.fail_after(self.config.attempt_timeout_seconds):
                    result = await call()
            except self.retry_on as e:
                breaker.record_failure()
                last_error = e
                if attempt == self.config.max_attempts:
                    break
                wait = self.config.backoff(attempt)
                Logger.base.warning(
                    f'🔁 [RETRY] {operation} attempt {attempt}/{self.config.max_attempts} '
                    f'failed ({type(e).__name__}: {e}); retrying in {wait:.2f}s'
                )
                metrics.record_retry(operation=operation)
                await self._sleep(wait)
            except Exception as e:
                # Not retryable: counts against the breaker, stops the loop
                breaker.record_failure()
                last_error = e
                break
            except BaseException:
                # Cancelled mid-call: no outcome to record
                breaker.release()
                raise
            else:
                breaker.record_success()
                metrics.record_read(operation=operation, outcome='success')
                return result

        return self._give_up(operation=operation, error=last_error, fallback=fallback)

    def _give_up(
        self, *, operation: str, error: Exception, fallback: Optional[Fallback[T]]
    ) -> T:
        if fallback is not None:
            Logger.base.error(
                f'🪂 [FALLBACK] {operation} degraded after {type(error).__name__}: {error}'
            )
            metrics.record_read(operation=operation, outcome='fallback')
            return fallback(error)

        metrics.record_read(operation=operation, outcome='error')
        if isinstance(error, CustomBaseError) and not isinstance(error, TransientStoreError):
            raise error
        raise StoreUnavailableError(f'{operation} unavailable: {error}') from error
