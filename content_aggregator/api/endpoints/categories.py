"""
Category API endpoints.

Popular categories, free-text category search and single category details.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, status

from content_aggregator.api.dependencies import get_category_service
from content_aggregator.api.errors import http_error_for_fetch_failure
from content_aggregator.core.category_service import RedditCategoryService
from content_aggregator.core.errors import ContentFetchError, InputValidationError
from content_aggregator.models.dtos import CategoryRecord

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/popular", response_model=List[CategoryRecord])
async def get_popular_categories(
    limit: int = Query(25, description="Number of categories; out-of-range values fall back to 25"),
    service: RedditCategoryService = Depends(get_category_service),
) -> List[CategoryRecord]:
    """
    Retrieve the currently popular categories.
    """
    logger.info(f"Processing request for popular categories, limit: {limit}")
    try:
        categories = await service.list_popular_categories(limit)
    except ContentFetchError as e:
        raise http_error_for_fetch_failure(e, "An error occurred while retrieving popular categories")

    if not categories:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No categories found")
    return categories


@router.get("/search", response_model=List[CategoryRecord])
async def search_categories(
    query: str = Query("", description="Free-text search query"),
    limit: int = Query(25, description="Number of categories; out-of-range values fall back to 25"),
    service: RedditCategoryService = Depends(get_category_service),
) -> List[CategoryRecord]:
    """
    Search categories by name or description.
    """
    if not query.strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Search query is required")

    logger.info(f"Processing search request for '{query}', limit: {limit}")
    try:
        categories = await service.search_categories(query, limit)
    except ContentFetchError as e:
        raise http_error_for_fetch_failure(e, f"An error occurred while searching for '{query}'")

    if not categories:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"No categories found matching '{query}'")
    return categories


@router.get("/{category_name}", response_model=CategoryRecord)
async def get_category_details(
    category_name: str,
    service: RedditCategoryService = Depends(get_category_service),
) -> CategoryRecord:
    """
    Retrieve details for a single category.
    """
    logger.info(f"Processing request for category details: {category_name}")
    try:
        return await service.get_category_detail(category_name)
    except InputValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except ContentFetchError as e:
        raise http_error_for_fetch_failure(
            e, f"An error occurred while retrieving details for '{category_name}'"
        )
