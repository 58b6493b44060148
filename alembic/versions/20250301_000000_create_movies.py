"""
Create the movies table.

Revision ID: 20250301_000000_create_movies
Revises:
Create Date: 2025-03-01 00:00:00
"""

import sqlalchemy as sa

from alembic import op  # type: ignore[reportMissingImports]

# revision identifiers, used by Alembic.
revision = "20250301_000000_create_movies"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "movies",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("release_year", sa.Integer(), nullable=True),
        sa.Column("duration", sa.Integer(), nullable=True),
        sa.Column("rating", sa.Double(), nullable=True),
        sa.Column("like_count", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.Column("dislike_count", sa.Integer(), server_default=sa.text("0"), nullable=False),
        sa.PrimaryKeyConstraint("id", name="movies_pkey"),
    )


def downgrade() -> None:
    op.drop_table("movies")
