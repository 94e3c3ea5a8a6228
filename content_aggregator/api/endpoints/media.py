"""
Media API endpoints.

Lists the media posts of a subreddit, optionally filtered by media type.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Path, Query, status

from content_aggregator.api.dependencies import get_media_service
from content_aggregator.api.errors import http_error_for_fetch_failure
from content_aggregator.core.errors import ContentFetchError, InputValidationError
from content_aggregator.core.media_service import RedditMediaService, filter_media_posts
from content_aggregator.models.dtos import (
    DEFAULT_TIME_WINDOW,
    MEDIA_FILTER_CHOICES,
    TIME_WINDOWS,
    MediaPostRecord,
)

router = APIRouter()
logger = logging.getLogger(__name__)


def normalize_time_window(time_frame: str) -> str:
    """Unknown time windows fall back to the default rather than failing."""
    time_frame = (time_frame or "").lower()
    return time_frame if time_frame in TIME_WINDOWS else DEFAULT_TIME_WINDOW


async def _load_media_posts(
    service: RedditMediaService,
    subreddit: str,
    limit: int,
    time_frame: str,
) -> List[MediaPostRecord]:
    if not subreddit.strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Subreddit name is required")

    time_window = normalize_time_window(time_frame)
    logger.info(f"Processing request for r/{subreddit} media, limit: {limit}, time frame: {time_window}")
    try:
        return await service.list_media_posts(subreddit, limit, time_window)
    except InputValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except ContentFetchError as e:
        raise http_error_for_fetch_failure(e, "An error occurred while retrieving the media posts")


@router.get("/media/{subreddit}", response_model=List[MediaPostRecord])
async def get_subreddit_media(
    subreddit: str = Path(..., description="Subreddit name, with or without a leading r/"),
    limit: int = Query(25, description="Number of posts to inspect; out-of-range values fall back to 25"),
    time_frame: str = Query(DEFAULT_TIME_WINDOW, alias="timeFrame", description="hour, day, week, month, year or all"),
    service: RedditMediaService = Depends(get_media_service),
) -> List[MediaPostRecord]:
    """
    Retrieve the media posts of a subreddit's top listing.

    Raises:
        HTTPException: 400 for a blank name, 404 when no media is found,
            503 when the upstream is unavailable
    """
    media_posts = await _load_media_posts(service, subreddit, limit, time_frame)
    if not media_posts:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"No media posts found in r/{subreddit}")
    return media_posts


@router.get("/media/{subreddit}/filter/{media_type}", response_model=List[MediaPostRecord])
async def get_filtered_subreddit_media(
    subreddit: str = Path(..., description="Subreddit name, with or without a leading r/"),
    media_type: str = Path(..., description="image, video, gif or all"),
    limit: int = Query(25, description="Number of posts to inspect; out-of-range values fall back to 25"),
    time_frame: str = Query(DEFAULT_TIME_WINDOW, alias="timeFrame", description="hour, day, week, month, year or all"),
    service: RedditMediaService = Depends(get_media_service),
) -> List[MediaPostRecord]:
    """
    Retrieve the media posts of a subreddit filtered to one media type.
    """
    media_type = media_type.strip().lower()
    if media_type not in MEDIA_FILTER_CHOICES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid media type. Valid types are: {', '.join(MEDIA_FILTER_CHOICES)}",
        )

    media_posts = filter_media_posts(
        await _load_media_posts(service, subreddit, limit, time_frame),
        media_type,
    )
    if not media_posts:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"No {media_type} media posts found in r/{subreddit}",
        )
    return media_posts
