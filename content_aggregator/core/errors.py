"""Exception hierarchy for upstream access and content aggregation."""

from typing import Optional


class UpstreamError(Exception):
    """Base class for failures talking to the upstream JSON API."""

    def __init__(self, message: str, url: Optional[str] = None, status_code: Optional[int] = None):
        self.message = message
        self.url = url
        self.status_code = status_code
        super().__init__(self.message)


class TransientUpstreamError(UpstreamError):
    """Network failure, 5xx or 429. Retried automatically."""

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        status_code: Optional[int] = None,
        retry_after: Optional[str] = None,
    ):
        super().__init__(message, url=url, status_code=status_code)
        self.retry_after = retry_after

    @property
    def is_rate_limited(self) -> bool:
        return self.status_code == 429


class PermanentUpstreamError(UpstreamError):
    """4xx other than 429. Never retried."""


class CircuitOpenError(UpstreamError):
    """Raised without dispatching while the circuit breaker is open."""

    def __init__(self, message: str, retry_after: float = 0.0):
        super().__init__(message)
        self.retry_after = retry_after


class MalformedResponseError(Exception):
    """The upstream body could not be interpreted by either parsing path."""


class InputValidationError(ValueError):
    """An input rejected at the facade boundary."""


class ContentFetchError(Exception):
    """
    A fetch-level failure wrapped with the operation and target it affected.

    The original exception is available as ``__cause__``.
    """

    def __init__(self, operation: str, target: str, cause: Exception):
        self.operation = operation
        self.target = target
        self.cause = cause
        super().__init__(f"{operation} failed for '{target}': {cause}")

    @property
    def is_unavailable(self) -> bool:
        """True when the upstream is temporarily unavailable (retries exhausted or circuit open)."""
        return isinstance(self.cause, (TransientUpstreamError, CircuitOpenError))

    @property
    def status_code(self) -> Optional[int]:
        return getattr(self.cause, "status_code", None)
