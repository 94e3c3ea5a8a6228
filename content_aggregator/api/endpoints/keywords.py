"""Moderation keyword endpoint."""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from content_aggregator.api.dependencies import get_keyword_service
from content_aggregator.core.keyword_service import KeywordService
from content_aggregator.utils.db_session import get_db_session

router = APIRouter()


@router.get("", response_model=List[str])
async def get_all_keywords(
    session: AsyncSession = Depends(get_db_session),
    service: KeywordService = Depends(get_keyword_service),
) -> List[str]:
    """Return every moderation keyword."""
    return await service.list_all_keywords(session)
