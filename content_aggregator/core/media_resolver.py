"""
Direct media URL resolution and media type classification for upstream posts.

Resolution rules are tried in order and the first match wins:

1. the post URL already ends in a direct image extension;
2. the post URL is on the upstream's own image host;
3. the post is a native video with a fallback playback URL;
4. the post URL is on a third-party image host without a direct extension
   (albums and galleries cannot be resolved, single images get ``.jpg``);
5. the post is a gallery whose first item has a known extension.

Anything else resolves to an empty string and the post is dropped.
"""

from dataclasses import dataclass
from typing import Optional

from content_aggregator.models.dtos import MediaType

DIRECT_IMAGE_EXTENSIONS = (".jpg", ".jpeg", ".png", ".gif")
UPSTREAM_IMAGE_HOST_MARKER = "i.redd.it"
UPSTREAM_IMAGE_ORIGIN = "https://i.redd.it"
IMGUR_MARKER = "imgur.com"
IMGUR_ALBUM_MARKERS = ("imgur.com/a/", "imgur.com/gallery/")
IMGUR_DIRECT_ORIGIN = "https://i.imgur.com"
# Approximation: the real asset may be a png or gif.
IMGUR_DEFAULT_EXTENSION = "jpg"

_EXTENSION_MEDIA_TYPES = {
    "jpg": MediaType.IMAGE,
    "jpeg": MediaType.IMAGE,
    "png": MediaType.IMAGE,
    "gif": MediaType.GIF,
}


@dataclass(frozen=True)
class RedditPost:
    """The subset of an upstream post needed to build a media record."""

    title: str = ""
    author: str = ""
    permalink: str = ""
    url: str = ""
    thumbnail: str = ""
    score: int = 0
    created_utc: Optional[float] = None
    is_video: bool = False
    fallback_url: str = ""
    is_gallery: bool = False
    gallery_item_count: int = 0
    first_gallery_media_id: str = ""
    first_gallery_extension: str = ""


def _extension_from_metadata(value: str) -> str:
    """Metadata may carry a MIME type (``image/jpg``) instead of a bare extension."""
    return value.rsplit("/", 1)[-1] if "/" in value else value


def resolve_media_url(post: RedditPost) -> str:
    """
    Determine the best direct media URL for a post.

    Args:
        post: Parsed upstream post

    Returns:
        str: Direct media URL, or an empty string when nothing resolves
    """
    url = post.url

    if url and url.endswith(DIRECT_IMAGE_EXTENSIONS):
        return url

    if UPSTREAM_IMAGE_HOST_MARKER in url:
        return url

    if post.is_video and post.fallback_url:
        return post.fallback_url

    if IMGUR_MARKER in url and not url.endswith((".jpg", ".png")):
        if any(marker in url for marker in IMGUR_ALBUM_MARKERS):
            return ""
        asset_id = url.rstrip("/").rsplit("/", 1)[-1]
        if not asset_id or IMGUR_MARKER in asset_id:
            return ""
        return f"{IMGUR_DIRECT_ORIGIN}/{asset_id}.{IMGUR_DEFAULT_EXTENSION}"

    if post.is_gallery and post.gallery_item_count > 0:
        media_id = post.first_gallery_media_id
        extension = _extension_from_metadata(post.first_gallery_extension)
        if media_id and extension:
            return f"{UPSTREAM_IMAGE_ORIGIN}/{media_id}.{extension}"

    return ""


def classify(url: str, is_video: bool) -> MediaType:
    """
    Classify a resolved media URL.

    The native video flag wins over the URL; otherwise the extension after
    the last dot decides.
    """
    if is_video:
        return MediaType.VIDEO
    if not url:
        return MediaType.UNKNOWN
    extension = url.rsplit(".", 1)[-1].lower()
    return _EXTENSION_MEDIA_TYPES.get(extension, MediaType.UNKNOWN)
