"""Create movie, search query and search result tables.

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-19
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "0001_initial_schema"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "movies",
        sa.Column("imdb_id", sa.String(length=20), primary_key=True),
        sa.Column("title", sa.String(length=512), nullable=False),
        sa.Column("year", sa.String(length=32), nullable=False),
        sa.Column(
            "media_type",
            sa.Enum(
                "movie",
                "series",
                "episode",
                name="mediatype",
                native_enum=False,
                length=20,
            ),
            nullable=True,
        ),
        sa.Column("poster", sa.String(length=1024), nullable=False),
        sa.Column("plot", sa.Text(), nullable=True),
        sa.Column("director", sa.String(length=512), nullable=True),
        sa.Column("actors", sa.Text(), nullable=True),
        sa.Column("runtime", sa.String(length=64), nullable=True),
        sa.Column("genre", sa.String(length=255), nullable=True),
        sa.Column("imdb_rating", sa.String(length=16), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    )

    op.create_table(
        "search_queries",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("search_text", sa.String(length=255), nullable=False),
        sa.Column("total_results", sa.String(length=32), nullable=True),
        sa.Column("response", sa.Boolean(), nullable=False),
        sa.Column("error", sa.String(length=255), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    )
    op.create_index(
        "ix_search_queries_search_text",
        "search_queries",
        ["search_text"],
        unique=True,
    )

    op.create_table(
        "search_results",
        sa.Column(
            "search_query_id",
            sa.Integer(),
            sa.ForeignKey("search_queries.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column(
            "imdb_id",
            sa.String(length=20),
            sa.ForeignKey("movies.imdb_id"),
            primary_key=True,
        ),
        sa.Column("position", sa.Integer(), nullable=False),
    )


def downgrade() -> None:
    op.drop_table("search_results")
    op.drop_index("ix_search_queries_search_text", table_name="search_queries")
    op.drop_table("search_queries")
    op.drop_table("movies")
