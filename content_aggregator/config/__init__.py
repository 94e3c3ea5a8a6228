"""Configuration package for the content aggregator service."""

from .settings import (
    CacheTTLConfig,
    CircuitBreakerConfig,
    RetryConfig,
    Settings,
    ThrottleConfig,
    get_settings,
    settings,
)

__all__ = [
    "CacheTTLConfig",
    "CircuitBreakerConfig",
    "RetryConfig",
    "Settings",
    "ThrottleConfig",
    "get_settings",
    "settings",
]
