"""Tests for the moderation keyword service."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import SQLAlchemyError

from content_aggregator.core.keyword_service import KeywordService


@pytest.fixture
def mock_session():
    return AsyncMock()


@pytest.mark.asyncio
async def test_list_all_keywords(mock_session):
    mock_result = MagicMock()
    mock_result.all.return_value = ["nsfw", "explicit"]
    mock_session.scalars.return_value = mock_result

    keywords = await KeywordService().list_all_keywords(mock_session)

    assert keywords == ["nsfw", "explicit"]
    mock_session.scalars.assert_awaited_once()
    statement = str(mock_session.scalars.await_args.args[0])
    assert "nsfw_keywords" in statement
    assert "ORDER BY" in statement


@pytest.mark.asyncio
async def test_list_all_keywords_empty(mock_session):
    mock_result = MagicMock()
    mock_result.all.return_value = []
    mock_session.scalars.return_value = mock_result

    assert await KeywordService().list_all_keywords(mock_session) == []


@pytest.mark.asyncio
async def test_database_error_propagates(mock_session):
    mock_session.scalars.side_effect = SQLAlchemyError("Database connection failed")

    with pytest.raises(SQLAlchemyError):
        await KeywordService().list_all_keywords(mock_session)
