"""
FastAPI application for the Content Aggregator service.

This module initializes and configures the FastAPI application that serves
the media, category and moderation keyword endpoints.
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncGenerator

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.trustedhost import TrustedHostMiddleware

from content_aggregator.api.dependencies import get_cache, get_upstream_client
from content_aggregator.api.endpoints import categories, keywords, media
from content_aggregator.config.settings import settings
from content_aggregator.core.cache import ExpiringCache
from content_aggregator.core.category_service import RedditCategoryService
from content_aggregator.core.media_service import RedditMediaService
from content_aggregator.core.upstream_client import UpstreamClient
from content_aggregator.models.dtos import HealthStatus
from content_aggregator.utils.logging_utils import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan manager for startup and shutdown events.

    Builds the single upstream client, the shared cache and both facades on
    startup and closes the client on shutdown.
    """
    setup_logging()
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")

    upstream_client = UpstreamClient.from_settings(settings)
    cache = ExpiringCache()
    ttl_config = settings.cache_ttl_config()

    app.state.upstream_client = upstream_client
    app.state.cache = cache
    app.state.media_service = RedditMediaService(
        upstream_client,
        cache,
        ttl_config=ttl_config,
        default_limit=settings.DEFAULT_LIMIT,
        max_limit=settings.MAX_LIMIT,
    )
    app.state.category_service = RedditCategoryService(
        upstream_client,
        cache,
        ttl_config=ttl_config,
        default_limit=settings.DEFAULT_LIMIT,
        max_limit=settings.MAX_LIMIT,
    )

    yield

    logger.info("Shutting down application")
    await upstream_client.close()


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        FastAPI: Configured FastAPI application instance.
    """
    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="""Content aggregation API over the public Reddit JSON endpoints.

        This API provides endpoints for:
        - Media posts of a subreddit, optionally filtered by media type
        - Popular categories, category search and category details
        - The moderation keyword list
        - Health monitoring""",
        debug=settings.DEBUG,
        lifespan=lifespan,
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url="/redoc" if settings.DEBUG else None,
        openapi_tags=[
            {"name": "media", "description": "Subreddit media posts"},
            {"name": "categories", "description": "Subreddit listings, search and details"},
            {"name": "keywords", "description": "Moderation keywords"},
            {"name": "health", "description": "Health check and monitoring"},
        ],
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS if not settings.DEBUG else ["*"],
        allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
        allow_methods=settings.CORS_ALLOW_METHODS,
        allow_headers=settings.CORS_ALLOW_HEADERS,
    )

    app.add_middleware(
        TrustedHostMiddleware,
        allowed_hosts=settings.ALLOWED_HOSTS if not settings.DEBUG else ["*"],
    )

    app.include_router(media.router, prefix="/api/reddit", tags=["media"])
    app.include_router(categories.router, prefix="/api/reddit/category", tags=["categories"])
    app.include_router(keywords.router, prefix="/api/nsfwkeywords", tags=["keywords"])

    @app.get("/health", tags=["health"], response_model=HealthStatus, summary="Health Check")
    async def health_check(
        upstream_client: UpstreamClient = Depends(get_upstream_client),
        cache: ExpiringCache = Depends(get_cache),
    ) -> HealthStatus:
        """Report service status, circuit breaker state and cache size."""
        breaker = upstream_client.breaker

        return HealthStatus(
            status="degraded" if breaker.is_open else "healthy",
            service=settings.APP_NAME,
            version=settings.APP_VERSION,
            timestamp=datetime.now(timezone.utc),
            circuit_state=breaker.state.value,
            cache_entries=len(cache),
            debug_mode=settings.DEBUG,
        )

    return app


app = create_app()
