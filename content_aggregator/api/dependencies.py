"""FastAPI dependency providers for the shared service instances."""

from fastapi import Request

from content_aggregator.core.cache import ExpiringCache
from content_aggregator.core.category_service import RedditCategoryService
from content_aggregator.core.keyword_service import KeywordService
from content_aggregator.core.media_service import RedditMediaService
from content_aggregator.core.upstream_client import UpstreamClient


def get_media_service(request: Request) -> RedditMediaService:
    return request.app.state.media_service


def get_category_service(request: Request) -> RedditCategoryService:
    return request.app.state.category_service


def get_upstream_client(request: Request) -> UpstreamClient:
    return request.app.state.upstream_client


def get_cache(request: Request) -> ExpiringCache:
    return request.app.state.cache


async def get_keyword_service() -> KeywordService:
    """Get keyword service instance."""
    return KeywordService()
