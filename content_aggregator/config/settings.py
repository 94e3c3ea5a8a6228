from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional, Union

from pydantic import Field, PostgresDsn, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Root directory of the content_aggregator service
SERVICE_ROOT_DIR = Path(__file__).parent.parent.resolve()
# Repository root (one level above the package)
PROJECT_ROOT_DIR = SERVICE_ROOT_DIR.parent


@dataclass
class ThrottleConfig:
    """Client-side request spacing configuration."""

    min_interval_sec: float = 2.0
    max_interval_sec: float = 3.0


@dataclass
class RetryConfig:
    """Retry policy for transient upstream failures."""

    max_retries: int = 3
    backoff_base_sec: float = 2.0
    backoff_factor: float = 2.0
    rate_limit_penalty_sec: float = 5.0


@dataclass
class CircuitBreakerConfig:
    """Circuit breaker thresholds."""

    failure_threshold: int = 5
    break_duration_sec: float = 30.0
    # Failures further apart than this start a new streak; None counts any streak.
    failure_window_sec: Optional[float] = None


@dataclass
class CacheTTLConfig:
    """Per-operation cache lifetimes in seconds. ``None`` disables caching."""

    popular_categories: Optional[float] = 3600
    category_detail: Optional[float] = 1800
    media_posts: Optional[float] = 900
    search_results: Optional[float] = None


class Settings(BaseSettings):
    # Application settings
    APP_NAME: str = "ContentAggregatorService"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8000

    # Security settings
    ALLOWED_HOSTS: Union[str, list[str]] = "localhost,127.0.0.1,0.0.0.0,testserver"
    CORS_ORIGINS: Union[str, list[str]] = "http://localhost:3000,http://localhost:8080"
    CORS_ALLOW_CREDENTIALS: bool = True
    CORS_ALLOW_METHODS: Union[str, list[str]] = "GET"
    CORS_ALLOW_HEADERS: Union[str, list[str]] = "*"

    # Upstream API
    UPSTREAM_BASE_URL: str = "https://www.reddit.com"
    UPSTREAM_TIMEOUT_SECONDS: float = 30.0

    # Throttling, retry and circuit breaking
    THROTTLE_MIN_INTERVAL_SECONDS: float = 2.0
    THROTTLE_MAX_INTERVAL_SECONDS: float = 3.0
    RETRY_MAX_RETRIES: int = 3
    RETRY_BACKOFF_BASE_SECONDS: float = 2.0
    RATE_LIMIT_PENALTY_SECONDS: float = 5.0
    CIRCUIT_FAILURE_THRESHOLD: int = 5
    CIRCUIT_BREAK_SECONDS: float = 30.0
    CIRCUIT_FAILURE_WINDOW_SECONDS: Optional[float] = None

    # Cache lifetimes
    CACHE_TTL_POPULAR_SECONDS: int = 3600
    CACHE_TTL_DETAIL_SECONDS: int = 1800
    CACHE_TTL_MEDIA_SECONDS: int = 900

    # Listing limits
    DEFAULT_LIMIT: int = 25
    MAX_LIMIT: int = 100

    # Database settings (keyword lookup table)
    DB_HOST: str = "localhost"
    DB_PORT: int = 5432
    DB_USER: str = "user"
    DB_PASSWORD: str = "password"
    DB_NAME: str = "pentyflix"
    DATABASE_URL: Optional[str] = Field(default=None, validate_default=True)

    # Logging configuration path (can be overridden by env var)
    LOGGING_CONFIG_PATH: str = str(SERVICE_ROOT_DIR / "config" / "logging_config.yaml")

    model_config = SettingsConfigDict(
        env_file=str(PROJECT_ROOT_DIR / ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("DATABASE_URL", mode="before")
    @classmethod
    def assemble_db_connection(cls, v: Optional[str], values: Any) -> Any:
        if isinstance(v, str):
            return v
        data: Dict[str, Any] = values.data
        return str(PostgresDsn.build(
            scheme="postgresql+asyncpg",
            username=data.get("DB_USER"),
            password=data.get("DB_PASSWORD"),
            host=data.get("DB_HOST"),
            port=data.get("DB_PORT"),
            path=data.get("DB_NAME") or "",
        ))

    def model_post_init(self, __context) -> None:
        """Parse comma-separated strings into lists after model initialization."""
        if isinstance(self.ALLOWED_HOSTS, str):
            self.ALLOWED_HOSTS = [host.strip() for host in self.ALLOWED_HOSTS.split(",") if host.strip()]

        if isinstance(self.CORS_ORIGINS, str):
            self.CORS_ORIGINS = [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

        if isinstance(self.CORS_ALLOW_METHODS, str):
            self.CORS_ALLOW_METHODS = [method.strip() for method in self.CORS_ALLOW_METHODS.split(",") if method.strip()]

        if isinstance(self.CORS_ALLOW_HEADERS, str):
            if self.CORS_ALLOW_HEADERS == "*":
                self.CORS_ALLOW_HEADERS = ["*"]
            else:
                self.CORS_ALLOW_HEADERS = [header.strip() for header in self.CORS_ALLOW_HEADERS.split(",") if header.strip()]

    def throttle_config(self) -> ThrottleConfig:
        return ThrottleConfig(
            min_interval_sec=self.THROTTLE_MIN_INTERVAL_SECONDS,
            max_interval_sec=self.THROTTLE_MAX_INTERVAL_SECONDS,
        )

    def retry_config(self) -> RetryConfig:
        return RetryConfig(
            max_retries=self.RETRY_MAX_RETRIES,
            backoff_base_sec=self.RETRY_BACKOFF_BASE_SECONDS,
            rate_limit_penalty_sec=self.RATE_LIMIT_PENALTY_SECONDS,
        )

    def circuit_breaker_config(self) -> CircuitBreakerConfig:
        return CircuitBreakerConfig(
            failure_threshold=self.CIRCUIT_FAILURE_THRESHOLD,
            break_duration_sec=self.CIRCUIT_BREAK_SECONDS,
            failure_window_sec=self.CIRCUIT_FAILURE_WINDOW_SECONDS,
        )

    def cache_ttl_config(self) -> CacheTTLConfig:
        return CacheTTLConfig(
            popular_categories=self.CACHE_TTL_POPULAR_SECONDS,
            category_detail=self.CACHE_TTL_DETAIL_SECONDS,
            media_posts=self.CACHE_TTL_MEDIA_SECONDS,
        )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Settings: Configured settings instance
    """
    return Settings()


settings = get_settings()
