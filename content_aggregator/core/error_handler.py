"""Retry and circuit breaking for upstream requests."""

import asyncio
import logging
import time
from enum import Enum
from functools import wraps
from typing import Any, Awaitable, Callable, Optional, TypeVar, cast

from content_aggregator.config.settings import CircuitBreakerConfig, RetryConfig
from content_aggregator.core.errors import (
    CircuitOpenError,
    PermanentUpstreamError,
    TransientUpstreamError,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")
AsyncFunc = Callable[..., Awaitable[T]]
RateLimitHook = Callable[[TransientUpstreamError], Awaitable[None]]


class CircuitState(str, Enum):
    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half_open"


class CircuitBreaker:
    """
    Consecutive-failure circuit breaker.

    After ``failure_threshold`` consecutive failures the circuit opens and
    every request fails fast for ``break_duration_sec``. With a
    ``failure_window_sec`` set, only failures within that many seconds of the
    first one in the streak count together. The first request
    after the break is let through as a trial: success closes the circuit,
    failure opens it again.
    """

    def __init__(self, config: Optional[CircuitBreakerConfig] = None):
        """
        Initialize the breaker.

        Args:
            config: Threshold and break duration
        """
        self.config = config or CircuitBreakerConfig()
        self.consecutive_failures = 0
        self.state = CircuitState.CLOSED
        self.opened_at: Optional[float] = None
        self.first_failure_at: Optional[float] = None
        self._trial_in_flight = False

    def before_request(self) -> None:
        """
        Gate a dispatch.

        Raises:
            CircuitOpenError: If the circuit is open, or a half-open trial is already running
        """
        if self.state == CircuitState.OPEN:
            remaining = (self.opened_at or 0.0) + self.config.break_duration_sec - time.time()
            if remaining > 0:
                raise CircuitOpenError(
                    f"Circuit open, upstream calls suspended for another {remaining:.1f}s",
                    retry_after=remaining,
                )
            logger.info("Circuit half-open, allowing a trial request")
            self.state = CircuitState.HALF_OPEN
            self._trial_in_flight = False

        if self.state == CircuitState.HALF_OPEN:
            if self._trial_in_flight:
                raise CircuitOpenError("Circuit half-open, trial request already in flight")
            self._trial_in_flight = True

    def record_success(self) -> None:
        """Record a successful request, closing the circuit and resetting the counter."""
        if self.state != CircuitState.CLOSED:
            logger.info(f"Circuit closed after successful trial (was {self.state.value})")
        elif self.consecutive_failures > 0:
            logger.info(f"Resetting consecutive failure counter (was {self.consecutive_failures})")
        self.consecutive_failures = 0
        self.state = CircuitState.CLOSED
        self.opened_at = None
        self.first_failure_at = None
        self._trial_in_flight = False

    def record_failure(self) -> None:
        """Record a handled failure and open the circuit when the threshold is reached."""
        now = time.time()
        window = self.config.failure_window_sec
        if (
            window is not None
            and self.state == CircuitState.CLOSED
            and self.first_failure_at is not None
            and now - self.first_failure_at > window
        ):
            logger.info(f"Failure window of {window:.0f}s elapsed, restarting failure count")
            self.consecutive_failures = 0
        if self.consecutive_failures == 0:
            self.first_failure_at = now
        self.consecutive_failures += 1
        logger.warning(
            f"Consecutive upstream failures: {self.consecutive_failures}/{self.config.failure_threshold}"
        )
        if self.state == CircuitState.HALF_OPEN or self.consecutive_failures >= self.config.failure_threshold:
            self._open()

    def abandon_trial(self) -> None:
        """Let another request act as the half-open trial."""
        self._trial_in_flight = False

    def _open(self) -> None:
        self.state = CircuitState.OPEN
        self.opened_at = time.time()
        self._trial_in_flight = False
        logger.warning(
            f"Circuit opened for {self.config.break_duration_sec:.0f}s after "
            f"{self.consecutive_failures} consecutive failures"
        )

    @property
    def is_open(self) -> bool:
        return self.state == CircuitState.OPEN


def with_retry(
    config: Optional[RetryConfig] = None,
    breaker: Optional[CircuitBreaker] = None,
    on_rate_limited: Optional[RateLimitHook] = None,
) -> Callable[[AsyncFunc[T]], AsyncFunc[T]]:
    """
    Decorator for retrying an async transport call with exponential backoff.

    Only ``TransientUpstreamError`` is retried. ``PermanentUpstreamError``
    propagates immediately. When a breaker is given, every attempt is gated
    by it and every transient failure (429 included) is counted against it.

    Args:
        config: Retry policy (max retries, backoff base and factor)
        breaker: Optional circuit breaker shared by all calls of one client
        on_rate_limited: Optional hook awaited after a 429, before the backoff sleep

    Returns:
        Decorator function
    """
    config = config or RetryConfig()

    def decorator(func: AsyncFunc[T]) -> AsyncFunc[T]:
        @wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> T:
            retries = 0
            backoff = config.backoff_base_sec

            while True:
                if breaker:
                    breaker.before_request()

                try:
                    result = await func(*args, **kwargs)

                except PermanentUpstreamError as e:
                    # The upstream answered, so it counts as reachable.
                    if breaker:
                        breaker.record_success()
                    logger.warning(f"Client error {e.status_code}: {e}")
                    raise

                except TransientUpstreamError as e:
                    if breaker:
                        breaker.record_failure()

                    if retries >= config.max_retries:
                        logger.error(f"Max retries ({config.max_retries}) exceeded: {e}")
                        raise

                    if e.is_rate_limited and on_rate_limited:
                        await on_rate_limited(e)

                    logger.warning(
                        f"Transient upstream error: {e}. "
                        f"Retrying in {backoff:.2f}s ({retries + 1}/{config.max_retries})"
                    )
                    await asyncio.sleep(backoff)
                    retries += 1
                    backoff *= config.backoff_factor
                    continue

                except BaseException:
                    # Cancellation or an unexpected error; a half-open trial must not stay claimed.
                    if breaker:
                        breaker.abandon_trial()
                    raise

                if breaker:
                    breaker.record_success()
                return result

        return cast(AsyncFunc[T], wrapper)
    return decorator
