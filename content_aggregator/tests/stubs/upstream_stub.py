"""Builders for upstream JSON bodies used across the tests."""

import json
from typing import Any, Dict, List, Optional

NEW_YEAR_2021_EPOCH = 1609459200


def make_listing(items: List[Dict[str, Any]], after: Optional[str] = None) -> str:
    """Serialize items into an upstream listing body."""
    return json.dumps({
        "kind": "Listing",
        "data": {
            "after": after,
            "before": None,
            "children": [{"kind": "t3", "data": item} for item in items],
        },
    })


def make_about(item: Dict[str, Any]) -> str:
    return json.dumps({"kind": "t5", "data": item})


def make_category_item(**overrides: Any) -> Dict[str, Any]:
    item = {
        "name": "t5_2qh0u",
        "display_name": "pics",
        "title": "Reddit Pics",
        "public_description": "A place for pictures",
        "url": "/r/pics/",
        "subscribers": 30000000,
        "over18": False,
        "icon_img": "https://example.com/icon.png",
        "banner_img": "https://example.com/banner.png",
        "created_utc": NEW_YEAR_2021_EPOCH,
    }
    item.update(overrides)
    return item


def make_post_item(**overrides: Any) -> Dict[str, Any]:
    item = {
        "title": "A sunset",
        "author": "photographer",
        "permalink": "/r/pics/comments/abc123/a_sunset/",
        "url": "https://i.redd.it/abc123.jpg",
        "thumbnail": "https://b.thumbs.redditmedia.com/abc123.jpg",
        "score": 1234,
        "created_utc": NEW_YEAR_2021_EPOCH,
        "is_video": False,
    }
    item.update(overrides)
    return item
