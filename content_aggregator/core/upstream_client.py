"""
Async HTTP client for the upstream JSON API.

All requests from one client instance share a single throttle and a single
circuit breaker. The retry policy wraps the raw transport call, so the
resilience logic never sees httpx types.
"""

import asyncio
import logging
from typing import Any, Dict, Optional
from urllib.parse import urljoin

import httpx

from content_aggregator.config.settings import (
    CircuitBreakerConfig,
    RetryConfig,
    Settings,
    ThrottleConfig,
)
from content_aggregator.core.error_handler import CircuitBreaker, with_retry
from content_aggregator.core.errors import (
    PermanentUpstreamError,
    TransientUpstreamError,
)
from content_aggregator.core.rate_limiter import RequestThrottle, build_request_headers

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://www.reddit.com"


class UpstreamClient:
    """
    Rate-limited, retrying GET client returning raw response bodies.

    ``fetch`` fails with ``TransientUpstreamError`` once retries are exhausted,
    ``PermanentUpstreamError`` for non-retryable 4xx responses and
    ``CircuitOpenError`` while the breaker is open.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 30.0,
        throttle_config: Optional[ThrottleConfig] = None,
        retry_config: Optional[RetryConfig] = None,
        breaker_config: Optional[CircuitBreakerConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the upstream client.

        Args:
            base_url: Upstream origin that relative paths are resolved against
            timeout: Request timeout in seconds
            throttle_config: Request spacing window
            retry_config: Retry and 429 handling policy
            breaker_config: Circuit breaker thresholds
            transport: Optional httpx transport (used by tests)
        """
        self.base_url = base_url.rstrip("/") + "/"
        self.retry_config = retry_config or RetryConfig()
        self.throttle = RequestThrottle(throttle_config)
        self.breaker = CircuitBreaker(breaker_config)

        self.client = httpx.AsyncClient(
            timeout=httpx.Timeout(timeout),
            follow_redirects=True,
            transport=transport,
        )

        self._fetch = with_retry(
            self.retry_config,
            breaker=self.breaker,
            on_rate_limited=self._handle_rate_limited,
        )(self._dispatch)

        logger.info(f"Initialized UpstreamClient with base_url: {self.base_url}")

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs: Any) -> "UpstreamClient":
        return cls(
            base_url=settings.UPSTREAM_BASE_URL,
            timeout=settings.UPSTREAM_TIMEOUT_SECONDS,
            throttle_config=settings.throttle_config(),
            retry_config=settings.retry_config(),
            breaker_config=settings.circuit_breaker_config(),
            **kwargs,
        )

    async def __aenter__(self) -> "UpstreamClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self.client.aclose()
        logger.info("UpstreamClient closed")

    def resolve_url(self, path_or_url: str) -> str:
        return urljoin(self.base_url, path_or_url.lstrip("/")) if "://" not in path_or_url else path_or_url

    async def fetch(self, path_or_url: str, params: Optional[Dict[str, Any]] = None) -> str:
        """
        GET a resource and return its body as text.

        Args:
            path_or_url: Absolute URL or a path relative to the base URL
            params: Query parameters

        Returns:
            str: Raw response body
        """
        return await self._fetch(self.resolve_url(path_or_url), params)

    async def _dispatch(self, url: str, params: Optional[Dict[str, Any]]) -> str:
        await self.throttle.pre_request()

        # Fresh headers on every call; nothing is accumulated on the client.
        headers = build_request_headers()
        logger.debug(f"GET {url} params={params}")

        try:
            response = await self.client.get(url, params=params, headers=headers)
        except httpx.RequestError as e:
            # Transport failures, redirect loops and undecodable bodies alike.
            raise TransientUpstreamError(f"Request error fetching {url}: {e!r}", url=url) from e

        status = response.status_code
        if status == 429:
            raise TransientUpstreamError(
                f"HTTP 429 Too Many Requests for {url}",
                url=url,
                status_code=status,
                retry_after=response.headers.get("Retry-After"),
            )
        if status >= 500:
            raise TransientUpstreamError(f"HTTP {status} for {url}", url=url, status_code=status)
        if status >= 400:
            raise PermanentUpstreamError(f"HTTP {status} for {url}", url=url, status_code=status)

        return response.text

    async def _handle_rate_limited(self, error: TransientUpstreamError) -> None:
        penalty = self.retry_config.rate_limit_penalty_sec
        logger.warning(
            f"Rate limited (429) on {error.url} (Retry-After: {error.retry_after}). "
            f"Waiting {penalty:.2f}s and refreshing request identity before retrying."
        )
        await asyncio.sleep(penalty)
        self.throttle.refresh()
