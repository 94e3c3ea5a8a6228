"""
Aggregation facade for media posts of a subreddit.

Flow: canonicalize name -> cache lookup -> upstream fetch -> normalize and
resolve media -> cache store.
"""

import logging
from typing import Iterable, List, Optional, Union
from urllib.parse import quote

from content_aggregator.config.settings import CacheTTLConfig
from content_aggregator.core.cache import ExpiringCache, build_cache_key
from content_aggregator.core.errors import (
    ContentFetchError,
    InputValidationError,
    MalformedResponseError,
    UpstreamError,
)
from content_aggregator.core.normalizer import canonicalize_name, normalize_media_listing
from content_aggregator.core.params import DEFAULT_LIMIT, MAX_LIMIT, clamp_limit
from content_aggregator.core.upstream_client import UpstreamClient
from content_aggregator.models.dtos import (
    DEFAULT_TIME_WINDOW,
    MEDIA_FILTER_ALL,
    MediaPostRecord,
    MediaType,
)

logger = logging.getLogger(__name__)


def filter_media_posts(
    posts: Iterable[MediaPostRecord],
    media_type: Union[MediaType, str],
) -> List[MediaPostRecord]:
    """
    Keep only posts of the given media type; ``"all"`` keeps everything.

    Upstream order is preserved.
    """
    wanted = media_type.value if isinstance(media_type, MediaType) else str(media_type).lower()
    if wanted == MEDIA_FILTER_ALL:
        return list(posts)
    return [post for post in posts if post.media_type.value == wanted]


class RedditMediaService:
    """Lists media posts of a subreddit with caching."""

    OPERATION = "media_posts"

    def __init__(
        self,
        client: UpstreamClient,
        cache: ExpiringCache,
        ttl_config: Optional[CacheTTLConfig] = None,
        default_limit: int = DEFAULT_LIMIT,
        max_limit: int = MAX_LIMIT,
    ):
        self.client = client
        self.cache = cache
        self.ttl_config = ttl_config or CacheTTLConfig()
        self.default_limit = default_limit
        self.max_limit = max_limit

    async def list_media_posts(
        self,
        subreddit_name: str,
        limit: int = DEFAULT_LIMIT,
        time_window: str = DEFAULT_TIME_WINDOW,
    ) -> List[MediaPostRecord]:
        """
        Fetch the top posts of a subreddit and keep those with resolvable media.

        Args:
            subreddit_name: Subreddit name, with or without a leading ``r/``
            limit: Number of upstream posts to inspect, clamped to (0, max]
            time_window: Upstream top-listing window (hour/day/week/month/year/all)

        Returns:
            List[MediaPostRecord]: Media posts in upstream order, possibly empty

        Raises:
            InputValidationError: If the name is empty after canonicalization
            ContentFetchError: If the upstream fetch or parse fails
        """
        name = canonicalize_name(subreddit_name)
        if not name:
            raise InputValidationError("Subreddit name is required")
        limit = clamp_limit(limit, self.default_limit, self.max_limit)

        key = build_cache_key(self.OPERATION, name, limit, time_window)
        return await self.cache.get_or_compute(
            key,
            self.ttl_config.media_posts,
            lambda: self._fetch_media_posts(name, limit, time_window),
        )

    async def _fetch_media_posts(self, name: str, limit: int, time_window: str) -> List[MediaPostRecord]:
        logger.info(f"Fetching media posts from r/{name}")
        try:
            body = await self.client.fetch(
                f"/r/{quote(name, safe='')}/top.json",
                params={"limit": limit, "t": time_window, "raw_json": 1},
            )
            posts = normalize_media_listing(body)
        except (UpstreamError, MalformedResponseError) as e:
            logger.error(f"Error fetching media posts for subreddit r/{name}: {e}")
            raise ContentFetchError("list_media_posts", f"r/{name}", e) from e

        logger.info(f"Found {len(posts)} media posts in r/{name}")
        return posts
