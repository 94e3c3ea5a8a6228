"""
Strictly-typed schemas for upstream listing responses.

These models back the strict parsing path of the normalizer. ``strict=True``
means any mistyped field fails validation so the caller can fall back to the
tolerant node-by-node traversal. Field names mirror the upstream JSON keys so
that ``model_dump()`` yields the same tree shape the tolerant path reads.
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict


class _UpstreamModel(BaseModel):
    model_config = ConfigDict(strict=True, extra="ignore")


class CategoryItemData(_UpstreamModel):
    name: Optional[str] = None
    display_name: Optional[str] = None
    title: Optional[str] = None
    public_description: Optional[str] = None
    url: Optional[str] = None
    subscribers: Optional[int] = None
    over18: Optional[bool] = None
    icon_img: Optional[str] = None
    banner_img: Optional[str] = None
    created_utc: Optional[float] = None


class RedditVideo(_UpstreamModel):
    fallback_url: Optional[str] = None


class PostMedia(_UpstreamModel):
    reddit_video: Optional[RedditVideo] = None


class GalleryItem(_UpstreamModel):
    media_id: Optional[str] = None


class GalleryData(_UpstreamModel):
    items: Optional[List[GalleryItem]] = None


class MediaMetadata(_UpstreamModel):
    m: Optional[str] = None


class PostData(_UpstreamModel):
    title: Optional[str] = None
    author: Optional[str] = None
    permalink: Optional[str] = None
    url: Optional[str] = None
    thumbnail: Optional[str] = None
    score: Optional[int] = None
    created_utc: Optional[float] = None
    is_video: Optional[bool] = None
    is_gallery: Optional[bool] = None
    gallery_data: Optional[GalleryData] = None
    media_metadata: Optional[Dict[str, MediaMetadata]] = None
    media: Optional[PostMedia] = None


class CategoryItem(_UpstreamModel):
    data: Optional[CategoryItemData] = None


class PostItem(_UpstreamModel):
    data: Optional[PostData] = None


class CategoryListingData(_UpstreamModel):
    children: Optional[List[CategoryItem]] = None
    after: Optional[str] = None
    before: Optional[str] = None


class PostListingData(_UpstreamModel):
    children: Optional[List[PostItem]] = None
    after: Optional[str] = None
    before: Optional[str] = None


class CategoryListing(_UpstreamModel):
    data: Optional[CategoryListingData] = None


class PostListing(_UpstreamModel):
    data: Optional[PostListingData] = None
