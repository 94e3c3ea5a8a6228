"""ORM model for the moderation keyword lookup table."""

from sqlalchemy import Identity, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


class NsfwKeywordORM(Base):
    """
    SQLAlchemy ORM model for the read-only moderation keyword list.
    Schema (as defined by Alembic migration 3f1a9c2b7d10):
      id       INTEGER GENERATED BY DEFAULT AS IDENTITY PRIMARY KEY,
      keyword  TEXT NOT NULL
    """
    __tablename__ = "nsfw_keywords"
    __table_args__ = {"schema": "public"}

    id: Mapped[int] = mapped_column(Integer, Identity(always=False), primary_key=True)
    keyword: Mapped[str] = mapped_column(Text, nullable=False)

    def __repr__(self) -> str:
        return f"<NsfwKeywordORM(id={self.id}, keyword='{self.keyword}')>"
