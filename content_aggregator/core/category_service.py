"""Aggregation facade for subreddit ("category") listings, search and details."""

import logging
from typing import Any, Dict, List, Optional
from urllib.parse import quote

from content_aggregator.config.settings import CacheTTLConfig
from content_aggregator.core.cache import ExpiringCache, build_cache_key
from content_aggregator.core.errors import (
    ContentFetchError,
    InputValidationError,
    MalformedResponseError,
    UpstreamError,
)
from content_aggregator.core.normalizer import (
    canonicalize_name,
    normalize_category_listing,
    normalize_entity_about,
)
from content_aggregator.core.params import DEFAULT_LIMIT, MAX_LIMIT, clamp_limit
from content_aggregator.core.upstream_client import UpstreamClient
from content_aggregator.models.dtos import CategoryRecord

logger = logging.getLogger(__name__)


class RedditCategoryService:
    """
    Popular categories, category search and category details.

    Popular listings and details are cached; search results never are.
    """

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

    def _limit(self, limit: int) -> int:
        return clamp_limit(limit, self.default_limit, self.max_limit)

    async def list_popular_categories(self, limit: int = DEFAULT_LIMIT) -> List[CategoryRecord]:
        """
        List popular categories.

        Raises:
            ContentFetchError: If the upstream fetch or parse fails
        """
        limit = self._limit(limit)
        key = build_cache_key("popular_categories", limit)

        async def compute() -> List[CategoryRecord]:
            logger.info(f"Fetching popular categories, limit: {limit}")
            return await self._fetch_listing(
                "list_popular_categories",
                "popular",
                "/subreddits/popular.json",
                {"limit": limit, "raw_json": 1},
            )

        return await self.cache.get_or_compute(key, self.ttl_config.popular_categories, compute)

    async def search_categories(self, query: str, limit: int = DEFAULT_LIMIT) -> List[CategoryRecord]:
        """
        Search categories by free text. A blank query returns no results.

        Raises:
            ContentFetchError: If the upstream fetch or parse fails
        """
        if not query or not query.strip():
            return []
        limit = self._limit(limit)
        key = build_cache_key("search_categories", query, limit)

        async def compute() -> List[CategoryRecord]:
            logger.info(f"Searching categories with query: '{query}', limit: {limit}")
            return await self._fetch_listing(
                "search_categories",
                query,
                "/subreddits/search.json",
                {"q": query, "limit": limit, "raw_json": 1},
            )

        return await self.cache.get_or_compute(key, self.ttl_config.search_results, compute)

    async def get_category_detail(self, name: str) -> CategoryRecord:
        """
        Fetch details for one category.

        Args:
            name: Category name, with or without a leading ``r/``

        Raises:
            InputValidationError: If the name is empty after canonicalization
            ContentFetchError: If the upstream fetch or parse fails
        """
        category_name = canonicalize_name(name)
        if not category_name:
            raise InputValidationError("Category name is required")

        key = build_cache_key("category_detail", category_name)

        async def compute() -> CategoryRecord:
            logger.info(f"Fetching details for category r/{category_name}")
            try:
                body = await self.client.fetch(
                    f"/r/{quote(category_name, safe='')}/about.json",
                    params={"raw_json": 1},
                )
                return normalize_entity_about(body)
            except (UpstreamError, MalformedResponseError) as e:
                logger.error(f"Error fetching details for category r/{category_name}: {e}")
                raise ContentFetchError("get_category_detail", f"r/{category_name}", e) from e

        return await self.cache.get_or_compute(key, self.ttl_config.category_detail, compute)

    async def _fetch_listing(
        self,
        operation: str,
        target: str,
        path: str,
        params: Dict[str, Any],
    ) -> List[CategoryRecord]:
        try:
            body = await self.client.fetch(path, params=params)
            categories = normalize_category_listing(body)
        except (UpstreamError, MalformedResponseError) as e:
            logger.error(f"Error in {operation} for '{target}': {e}")
            raise ContentFetchError(operation, target, e) from e

        if not categories:
            logger.warning(f"No categories found for {operation} '{target}'")
        return categories
