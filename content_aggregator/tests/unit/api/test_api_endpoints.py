"""
Unit tests for API endpoints.

The application lifespan is not started; services are replaced through
dependency overrides.
"""

from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from content_aggregator.api.dependencies import (
    get_cache,
    get_category_service,
    get_keyword_service,
    get_media_service,
    get_upstream_client,
)
from content_aggregator.api.main import app
from content_aggregator.config.settings import CircuitBreakerConfig
from content_aggregator.core.cache import ExpiringCache
from content_aggregator.core.error_handler import CircuitBreaker
from content_aggregator.core.errors import (
    CircuitOpenError,
    ContentFetchError,
    InputValidationError,
    PermanentUpstreamError,
    TransientUpstreamError,
)
from content_aggregator.models.dtos import CategoryRecord, MediaPostRecord, MediaType
from content_aggregator.utils.db_session import get_db_session


def make_media_post(title: str, media_type: MediaType) -> MediaPostRecord:
    return MediaPostRecord(
        title=title,
        author="someone",
        permalink=f"https://www.reddit.com/r/pics/comments/{title}/",
        url=f"https://i.redd.it/{title}.jpg",
        score=10,
        created_utc=datetime(2021, 1, 1, 12, 0, 0),
        is_video=media_type == MediaType.VIDEO,
        media_type=media_type,
    )


def make_category(display_name: str) -> CategoryRecord:
    return CategoryRecord(
        name=f"t5_{display_name}",
        display_name=display_name,
        title=display_name.title(),
        subscriber_count=100,
        created_utc=datetime(2021, 1, 1, tzinfo=timezone.utc),
    )


@pytest.fixture
def media_service():
    service = MagicMock()
    service.list_media_posts = AsyncMock(return_value=[
        make_media_post("photo", MediaType.IMAGE),
        make_media_post("clip", MediaType.VIDEO),
    ])
    return service


@pytest.fixture
def category_service():
    service = MagicMock()
    service.list_popular_categories = AsyncMock(return_value=[make_category("pics")])
    service.search_categories = AsyncMock(return_value=[make_category("cats")])
    service.get_category_detail = AsyncMock(return_value=make_category("funny"))
    return service


@pytest.fixture
def client(media_service, category_service):
    app.dependency_overrides[get_media_service] = lambda: media_service
    app.dependency_overrides[get_category_service] = lambda: category_service
    yield TestClient(app)
    app.dependency_overrides.clear()


def fetch_error(cause: Exception) -> ContentFetchError:
    return ContentFetchError("operation", "target", cause)


class TestMediaEndpoints:

    def test_get_media(self, client, media_service):
        response = client.get("/api/reddit/media/pics", params={"limit": 10, "timeFrame": "month"})

        assert response.status_code == 200
        body = response.json()
        assert [item["title"] for item in body] == ["photo", "clip"]
        assert body[0]["mediaType"] == "image"
        assert body[0]["isVideo"] is False
        assert "created_utc" in body[0]
        media_service.list_media_posts.assert_awaited_once_with("pics", 10, "month")

    def test_invalid_time_frame_falls_back_to_week(self, client, media_service):
        client.get("/api/reddit/media/pics", params={"timeFrame": "decade"})
        media_service.list_media_posts.assert_awaited_once_with("pics", 25, "week")

    def test_empty_result_is_not_found(self, client, media_service):
        media_service.list_media_posts.return_value = []
        response = client.get("/api/reddit/media/pics")
        assert response.status_code == 404

    def test_input_validation_is_bad_request(self, client, media_service):
        media_service.list_media_posts.side_effect = InputValidationError("Subreddit name is required")
        response = client.get("/api/reddit/media/pics")
        assert response.status_code == 400

    @pytest.mark.parametrize("cause, expected_status", [
        (TransientUpstreamError("HTTP 503", status_code=503), 503),
        (CircuitOpenError("open", retry_after=5.0), 503),
        (PermanentUpstreamError("HTTP 404", status_code=404), 404),
        (PermanentUpstreamError("HTTP 403", status_code=403), 404),
        (PermanentUpstreamError("HTTP 400", status_code=400), 502),
    ])
    def test_fetch_errors_mapped(self, client, media_service, cause, expected_status):
        media_service.list_media_posts.side_effect = fetch_error(cause)
        response = client.get("/api/reddit/media/pics")
        assert response.status_code == expected_status

    def test_filter_by_media_type(self, client):
        response = client.get("/api/reddit/media/pics/filter/video")

        assert response.status_code == 200
        assert [item["title"] for item in response.json()] == ["clip"]

    def test_filter_all(self, client):
        response = client.get("/api/reddit/media/pics/filter/all")
        assert len(response.json()) == 2

    def test_filter_invalid_type(self, client, media_service):
        response = client.get("/api/reddit/media/pics/filter/audio")

        assert response.status_code == 400
        media_service.list_media_posts.assert_not_awaited()

    def test_filter_no_matches(self, client):
        response = client.get("/api/reddit/media/pics/filter/gif")
        assert response.status_code == 404


class TestCategoryEndpoints:

    def test_popular(self, client, category_service):
        response = client.get("/api/reddit/category/popular", params={"limit": 5})

        assert response.status_code == 200
        body = response.json()
        assert body[0]["displayName"] == "pics"
        assert body[0]["subscriberCount"] == 100
        category_service.list_popular_categories.assert_awaited_once_with(5)

    def test_popular_empty_is_not_found(self, client, category_service):
        category_service.list_popular_categories.return_value = []
        assert client.get("/api/reddit/category/popular").status_code == 404

    def test_search(self, client, category_service):
        response = client.get("/api/reddit/category/search", params={"query": "cats"})

        assert response.status_code == 200
        assert response.json()[0]["displayName"] == "cats"
        category_service.search_categories.assert_awaited_once_with("cats", 25)

    def test_search_requires_query(self, client, category_service):
        response = client.get("/api/reddit/category/search")

        assert response.status_code == 400
        category_service.search_categories.assert_not_awaited()

    def test_search_no_results(self, client, category_service):
        category_service.search_categories.return_value = []
        assert client.get("/api/reddit/category/search", params={"query": "zzz"}).status_code == 404

    def test_detail(self, client, category_service):
        response = client.get("/api/reddit/category/funny")

        assert response.status_code == 200
        assert response.json()["displayName"] == "funny"
        category_service.get_category_detail.assert_awaited_once_with("funny")

    def test_detail_not_found(self, client, category_service):
        category_service.get_category_detail.side_effect = fetch_error(
            PermanentUpstreamError("HTTP 404", status_code=404)
        )
        response = client.get("/api/reddit/category/doesnotexist")

        assert response.status_code == 404
        assert "details" in response.json()["detail"]

    def test_detail_upstream_unavailable(self, client, category_service):
        category_service.get_category_detail.side_effect = fetch_error(
            TransientUpstreamError("HTTP 500", status_code=500)
        )
        assert client.get("/api/reddit/category/pics").status_code == 503


class TestKeywordEndpoint:

    def test_list_keywords(self, client):
        keyword_service = MagicMock()
        keyword_service.list_all_keywords = AsyncMock(return_value=["nsfw", "explicit"])
        session = MagicMock()

        async def override_session():
            yield session

        app.dependency_overrides[get_db_session] = override_session
        app.dependency_overrides[get_keyword_service] = lambda: keyword_service

        response = client.get("/api/nsfwkeywords")

        assert response.status_code == 200
        assert response.json() == ["nsfw", "explicit"]
        keyword_service.list_all_keywords.assert_awaited_once_with(session)


class TestHealthEndpoint:

    @pytest.fixture
    def upstream_client(self):
        upstream_client = MagicMock()
        upstream_client.breaker = CircuitBreaker(CircuitBreakerConfig(failure_threshold=1))
        return upstream_client

    @pytest.fixture
    def health_client(self, client, upstream_client):
        cache = ExpiringCache()
        cache.set("popular_categories:25", [], ttl=60)
        app.dependency_overrides[get_upstream_client] = lambda: upstream_client
        app.dependency_overrides[get_cache] = lambda: cache
        return client

    def test_health_reports_breaker_and_cache(self, health_client):
        response = health_client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["circuit_state"] == "closed"
        assert body["cache_entries"] == 1

    def test_health_degraded_while_circuit_open(self, health_client, upstream_client):
        upstream_client.breaker.record_failure()

        body = health_client.get("/health").json()

        assert body["status"] == "degraded"
        assert body["circuit_state"] == "open"
