"""
Response normalizer for upstream listing and about payloads.

Listings are parsed twice over if needed: first through the strict pydantic
schemas, and when that fails through a tolerant traversal of the raw JSON
tree. Both paths end in the same node readers, so for well-formed input
they produce identical records.

Field defaults: strings become ``""``, numbers ``0``, booleans ``False`` and
a missing or unusable creation time becomes the current time.
"""

import json
import logging
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Type, TypeVar, Union

from pydantic import BaseModel, ValidationError

from content_aggregator.core.errors import MalformedResponseError
from content_aggregator.core.media_resolver import RedditPost, classify, resolve_media_url
from content_aggregator.models.dtos import CategoryRecord, MediaPostRecord
from content_aggregator.models.upstream import CategoryListing, PostListing

logger = logging.getLogger(__name__)

T = TypeVar("T")

PERMALINK_ORIGIN = "https://www.reddit.com"


class ListingSchema(str, Enum):
    CATEGORIES = "categories"
    MEDIA_POSTS = "media_posts"


Record = Union[CategoryRecord, MediaPostRecord]

_STRICT_MODELS: Dict[ListingSchema, Type[BaseModel]] = {
    ListingSchema.CATEGORIES: CategoryListing,
    ListingSchema.MEDIA_POSTS: PostListing,
}


def canonicalize_name(name: Optional[str]) -> str:
    """Trim, lowercase and drop a leading ``r/`` from a subreddit name."""
    name = (name or "").strip().lower()
    if name.startswith("r/"):
        name = name[2:]
    return name


def extract(node: Any, key: str, expected: Union[type, Tuple[type, ...]], default: T) -> T:
    """
    Read ``node[key]`` if it has the expected type, else return ``default``.

    Covers absent keys, explicit nulls, non-object nodes and mistyped values.
    ``bool`` is never accepted where a number is expected.
    """
    if not isinstance(node, dict):
        return default
    value = node.get(key)
    if value is None:
        return default
    expected_types = expected if isinstance(expected, tuple) else (expected,)
    if isinstance(value, bool) and bool not in expected_types:
        return default
    if isinstance(value, expected_types):
        return value
    return default


def _str(node: Any, key: str) -> str:
    return extract(node, key, str, "")


def _int(node: Any, key: str) -> int:
    return extract(node, key, int, 0)


def _bool(node: Any, key: str) -> bool:
    return extract(node, key, bool, False)


def _number(node: Any, key: str) -> Optional[float]:
    return extract(node, key, (int, float), None)


def _dict(node: Any, key: str) -> Dict[str, Any]:
    return extract(node, key, dict, {})


def _list(node: Any, key: str) -> List[Any]:
    return extract(node, key, list, [])


def epoch_to_datetime(value: Any, utc: bool = True) -> datetime:
    """
    Convert upstream epoch seconds to a datetime, truncating fractions.

    ``utc=True`` yields an aware UTC datetime; ``utc=False`` yields a naive
    datetime in the server's local time. Anything unusable becomes "now".
    """
    try:
        seconds = int(value)
        if utc:
            return datetime.fromtimestamp(seconds, tz=timezone.utc)
        return datetime.fromtimestamp(seconds)
    except (TypeError, ValueError, OverflowError, OSError):
        return datetime.now(timezone.utc) if utc else datetime.now()


def category_from_node(node: Dict[str, Any]) -> CategoryRecord:
    return CategoryRecord(
        name=_str(node, "name"),
        display_name=_str(node, "display_name"),
        title=_str(node, "title"),
        description=_str(node, "public_description"),
        url=_str(node, "url"),
        subscriber_count=_int(node, "subscribers"),
        is_nsfw=_bool(node, "over18"),
        icon_url=_str(node, "icon_img"),
        banner_url=_str(node, "banner_img"),
        created_utc=epoch_to_datetime(_number(node, "created_utc"), utc=True),
    )


def post_from_node(node: Dict[str, Any]) -> RedditPost:
    gallery_items = _list(_dict(node, "gallery_data"), "items")
    first_media_id = _str(gallery_items[0], "media_id") if gallery_items else ""
    first_extension = ""
    if first_media_id:
        first_extension = _str(_dict(_dict(node, "media_metadata"), first_media_id), "m")

    return RedditPost(
        title=_str(node, "title"),
        author=_str(node, "author"),
        permalink=_str(node, "permalink"),
        url=_str(node, "url"),
        thumbnail=_str(node, "thumbnail"),
        score=_int(node, "score"),
        created_utc=_number(node, "created_utc"),
        is_video=_bool(node, "is_video"),
        fallback_url=_str(_dict(_dict(node, "media"), "reddit_video"), "fallback_url"),
        is_gallery=_bool(node, "is_gallery"),
        gallery_item_count=len(gallery_items),
        first_gallery_media_id=first_media_id,
        first_gallery_extension=first_extension,
    )


def media_post_from_node(node: Dict[str, Any]) -> Optional[MediaPostRecord]:
    """Build a media record, or ``None`` when the post has no resolvable media."""
    post = post_from_node(node)
    media_url = resolve_media_url(post)
    if not media_url:
        return None

    return MediaPostRecord(
        title=post.title,
        author=post.author,
        permalink=f"{PERMALINK_ORIGIN}{post.permalink}",
        url=media_url,
        thumbnail=post.thumbnail,
        score=post.score,
        # Media timestamps are reported in server local time.
        created_utc=epoch_to_datetime(post.created_utc, utc=False),
        is_video=post.is_video,
        media_type=classify(media_url, post.is_video),
    )


def _records_from_tree(tree: Any, schema: ListingSchema) -> List[Record]:
    children = _list(_dict(tree, "data"), "children")
    records: List[Record] = []

    for index, child in enumerate(children):
        item = child.get("data") if isinstance(child, dict) else None
        if not isinstance(item, dict):
            continue
        try:
            if schema == ListingSchema.CATEGORIES:
                records.append(category_from_node(item))
            else:
                record = media_post_from_node(item)
                if record is not None:
                    records.append(record)
        except ValueError as e:
            logger.warning(f"Skipping malformed {schema.value} item at position {index}: {e}")

    return records


def parse_listing_strict(raw_body: Union[str, bytes], schema: ListingSchema) -> List[Record]:
    """
    Parse a listing through the strict schema.

    Raises:
        pydantic.ValidationError: If the body is not JSON or does not match the schema
    """
    listing = _STRICT_MODELS[schema].model_validate_json(raw_body)
    return _records_from_tree(listing.model_dump(), schema)


def parse_listing_tolerant(raw_body: Union[str, bytes], schema: ListingSchema) -> List[Record]:
    """
    Parse a listing by walking the raw JSON tree node by node.

    Raises:
        MalformedResponseError: If the body is not JSON at all
    """
    try:
        tree = json.loads(raw_body)
    except (TypeError, ValueError) as e:
        raise MalformedResponseError(f"Upstream {schema.value} listing is not valid JSON: {e}") from e
    return _records_from_tree(tree, schema)


def normalize_listing(raw_body: Union[str, bytes], schema: ListingSchema) -> List[Record]:
    """
    Normalize a listing body into records, preserving upstream order.

    Args:
        raw_body: Raw response body
        schema: Which record shape the listing holds

    Returns:
        List of CategoryRecord or MediaPostRecord
    """
    try:
        return parse_listing_strict(raw_body, schema)
    except ValidationError as e:
        logger.warning(
            f"Strict {schema.value} parse failed ({e.error_count()} errors), "
            f"falling back to tolerant traversal"
        )
        return parse_listing_tolerant(raw_body, schema)


def normalize_category_listing(raw_body: Union[str, bytes]) -> List[CategoryRecord]:
    return normalize_listing(raw_body, ListingSchema.CATEGORIES)  # type: ignore[return-value]


def normalize_media_listing(raw_body: Union[str, bytes]) -> List[MediaPostRecord]:
    return normalize_listing(raw_body, ListingSchema.MEDIA_POSTS)  # type: ignore[return-value]


def normalize_entity_about(raw_body: Union[str, bytes]) -> CategoryRecord:
    """
    Normalize a single-entity about response.

    Raises:
        MalformedResponseError: If the body is not JSON or has no ``data`` object
    """
    try:
        tree = json.loads(raw_body)
    except (TypeError, ValueError) as e:
        raise MalformedResponseError(f"Upstream about response is not valid JSON: {e}") from e

    data = tree.get("data") if isinstance(tree, dict) else None
    if not isinstance(data, dict):
        raise MalformedResponseError("Upstream about response has no data object")
    return category_from_node(data)
