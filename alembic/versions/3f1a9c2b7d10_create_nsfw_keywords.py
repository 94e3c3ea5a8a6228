"""create nsfw_keywords table

Revision ID: 3f1a9c2b7d10
Revises:
Create Date: 2026-10-19 10:00:00.000000

Moderation keyword list read by the /api/nsfwkeywords endpoint. Rows are
maintained out of band; the service only reads them.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "3f1a9c2b7d10"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

TABLE = "nsfw_keywords"
SCHEMA = "public"


def upgrade() -> None:
    op.create_table(
        TABLE,
        sa.Column("id", sa.Integer(), sa.Identity(always=False), nullable=False),
        sa.Column("keyword", sa.Text(), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_nsfw_keywords"),
        schema=SCHEMA,
    )


def downgrade() -> None:
    op.drop_table(TABLE, schema=SCHEMA)
