"""
In-memory cache with absolute, lazily-checked expiry.

Known limitation: ``get_or_compute`` is not single-flight. Two concurrent
misses for the same key both run the compute function and the last write
wins. Entries are plain values, so either result is valid.
"""

import logging
import threading
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class CacheEntry:
    key: str
    value: Any
    expires_at: float

    def is_expired(self, now: float) -> bool:
        return now >= self.expires_at


def build_cache_key(operation: str, *params: Any) -> str:
    """Build a deterministic key from the operation name and every output-affecting parameter."""
    parts = [operation]
    parts.extend("" if param is None else str(param) for param in params)
    return ":".join(parts)


class ExpiringCache:
    """
    Key/value store where each entry carries its own wall-clock expiry.

    Expired entries are ignored and dropped when they are next looked up;
    there is no background sweep.
    """

    def __init__(self, clock: Callable[[], float] = time.time):
        self._entries: Dict[str, CacheEntry] = {}
        self._lock = threading.Lock()
        self._clock = clock
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def get(self, key: str) -> Optional[Any]:
        """Return the live value for ``key`` or ``None``."""
        now = self._clock()
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self.misses += 1
                return None
            if entry.is_expired(now):
                del self._entries[key]
                self.misses += 1
                return None
            self.hits += 1
            return entry.value

    def set(self, key: str, value: Any, ttl: float) -> None:
        entry = CacheEntry(key=key, value=value, expires_at=self._clock() + ttl)
        with self._lock:
            self._entries[key] = entry

    def invalidate(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    async def get_or_compute(
        self,
        key: str,
        ttl: Optional[float],
        compute: Callable[[], Awaitable[T]],
    ) -> T:
        """
        Return the cached value for ``key``, computing and storing it on a miss.

        A ``ttl`` of ``None`` or ``<= 0`` bypasses the cache entirely. Failures
        from ``compute`` propagate and nothing is stored.
        """
        if ttl is None or ttl <= 0:
            return await compute()

        cached = self.get(key)
        if cached is not None:
            logger.info(f"Cache hit for {key}")
            return cached

        logger.debug(f"Cache miss for {key}")
        value = await compute()
        self.set(key, value, ttl)
        return value
