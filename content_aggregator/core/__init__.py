"""
Core components for the content aggregator service.
"""

from .cache import ExpiringCache, build_cache_key
from .category_service import RedditCategoryService
from .error_handler import CircuitBreaker, CircuitState, with_retry
from .keyword_service import KeywordService
from .media_resolver import RedditPost, classify, resolve_media_url
from .media_service import RedditMediaService, filter_media_posts
from .normalizer import (
    ListingSchema,
    canonicalize_name,
    normalize_entity_about,
    normalize_listing,
)
from .rate_limiter import RequestThrottle
from .upstream_client import UpstreamClient

__all__ = [
    "CircuitBreaker",
    "CircuitState",
    "ExpiringCache",
    "KeywordService",
    "ListingSchema",
    "RedditCategoryService",
    "RedditMediaService",
    "RedditPost",
    "RequestThrottle",
    "UpstreamClient",
    "build_cache_key",
    "canonicalize_name",
    "classify",
    "filter_media_posts",
    "normalize_entity_about",
    "normalize_listing",
    "resolve_media_url",
    "with_retry",
]
