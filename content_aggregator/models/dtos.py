"""
Pydantic Data Transfer Objects (DTOs) for the content aggregator service.

These records are the normalized, immutable shapes produced from upstream
listing and about responses and returned by the API.
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class MediaType(str, Enum):
    """Classification of a resolved media URL."""

    IMAGE = "image"
    VIDEO = "video"
    GIF = "gif"
    UNKNOWN = "unknown"


# Accepted by the filter operation in addition to the concrete media types.
MEDIA_FILTER_ALL = "all"
MEDIA_FILTER_CHOICES = ("image", "video", "gif", MEDIA_FILTER_ALL)

TIME_WINDOWS = ("hour", "day", "week", "month", "year", "all")
DEFAULT_TIME_WINDOW = "week"


class CategoryRecord(BaseModel):
    """
    A subreddit ("category") normalized from either a listing item or an
    about response.
    """
    name: str = ""
    display_name: str = ""
    title: str = ""
    description: str = ""
    url: str = ""
    subscriber_count: int = 0
    is_nsfw: bool = False
    icon_url: str = ""
    banner_url: str = ""
    created_utc: datetime

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class MediaPostRecord(BaseModel):
    """
    A post that resolved to a direct media URL.

    Posts without resolvable media never become records.
    """
    title: str = ""
    author: str = ""
    permalink: str
    url: str = Field(..., description="Resolved direct media URL.")
    thumbnail: str = ""
    score: int = 0
    created_utc: datetime = Field(..., alias="created_utc")
    is_video: bool = False
    media_type: MediaType = MediaType.UNKNOWN

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class HealthStatus(BaseModel):
    """Response body of the health endpoint."""
    status: str
    service: str
    version: str
    timestamp: datetime
    circuit_state: str
    cache_entries: int
    debug_mode: bool
