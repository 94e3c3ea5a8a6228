"""Read-only access to the moderation keyword list."""

import logging
from typing import List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from content_aggregator.models.keyword_orm import NsfwKeywordORM

logger = logging.getLogger(__name__)


class KeywordService:
    """Lists moderation keywords stored in the ``nsfw_keywords`` table."""

    async def list_all_keywords(self, session: AsyncSession) -> List[str]:
        """
        Return every keyword in insertion (id) order.

        Args:
            session: Active async database session
        """
        result = await session.scalars(
            select(NsfwKeywordORM.keyword).order_by(NsfwKeywordORM.id)
        )
        keywords = list(result.all())
        logger.debug(f"Loaded {len(keywords)} moderation keywords")
        return keywords
