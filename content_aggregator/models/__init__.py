"""
Models package for the content aggregator service.

This package contains the SQLAlchemy ORM model for the keyword table,
the normalized Pydantic DTOs and the strict upstream schemas.
"""

# Ensure the ORM model is registered with the Base metadata when this package is imported.
from . import base
from . import keyword_orm

from .base import Base
from .keyword_orm import NsfwKeywordORM

from .dtos import (
    DEFAULT_TIME_WINDOW,
    MEDIA_FILTER_ALL,
    MEDIA_FILTER_CHOICES,
    TIME_WINDOWS,
    CategoryRecord,
    HealthStatus,
    MediaPostRecord,
    MediaType,
)

__all__ = [
    # Base
    "Base",
    # ORMs
    "NsfwKeywordORM",
    # DTOs
    "CategoryRecord",
    "HealthStatus",
    "MediaPostRecord",
    "MediaType",
    # Constants
    "DEFAULT_TIME_WINDOW",
    "MEDIA_FILTER_ALL",
    "MEDIA_FILTER_CHOICES",
    "TIME_WINDOWS",
]
