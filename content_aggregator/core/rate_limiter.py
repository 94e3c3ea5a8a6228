"""Client-side throttling and header rotation for upstream requests."""

import asyncio
import logging
import random
import time
from typing import Dict, Optional, Sequence

from content_aggregator.config.settings import ThrottleConfig

logger = logging.getLogger(__name__)

USER_AGENTS = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 14_4_1) AppleWebKit/605.1.15 "
    "(KHTML, like Gecko) Version/17.4.1 Safari/605.1.15",
    "Mozilla/5.0 (X11; Linux x86_64; rv:125.0) Gecko/20100101 Firefox/125.0",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:125.0) Gecko/20100101 Firefox/125.0",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36 Edg/124.0.2478.80",
    "web:pentyflix:v1.0 (by /u/pentyflix_app)",
)

BASE_HEADERS = {
    "Accept": "application/json, text/javascript, */*; q=0.01",
    "Accept-Language": "en-US,en;q=0.8",
    "Connection": "keep-alive",
}


def build_request_headers(user_agents: Sequence[str] = USER_AGENTS) -> Dict[str, str]:
    """
    Build a fresh header set with a randomly chosen User-Agent.

    A new dict is returned on every call so headers never accumulate
    across requests.
    """
    headers = dict(BASE_HEADERS)
    headers["User-Agent"] = random.choice(user_agents)
    return headers


class RequestThrottle:
    """
    Serializes outbound requests of one client and spaces them apart.

    Each dispatch waits until a randomized floor, drawn uniformly from the
    configured window, has elapsed since the previous dispatch.
    """

    def __init__(self, config: Optional[ThrottleConfig] = None):
        """
        Initialize the throttle with configuration.

        Args:
            config: Interval window configuration
        """
        self.config = config or ThrottleConfig()
        self.last_request_time = 0.0
        self._lock = asyncio.Lock()

    def next_interval(self) -> float:
        return random.uniform(self.config.min_interval_sec, self.config.max_interval_sec)

    async def pre_request(self) -> None:
        """
        Wait for this client's turn to dispatch and record the dispatch time.

        Cancelling the caller while it waits skips the pending delay and
        releases the lock without recording a dispatch.
        """
        async with self._lock:
            floor = self.next_interval()
            elapsed = time.time() - self.last_request_time
            if elapsed < floor:
                wait_time = floor - elapsed
                logger.debug(f"Throttling upstream request for {wait_time:.2f}s")
                await asyncio.sleep(wait_time)
            self.last_request_time = time.time()

    def refresh(self) -> None:
        """Restart the spacing window as if a request had just been sent."""
        self.last_request_time = time.time()
