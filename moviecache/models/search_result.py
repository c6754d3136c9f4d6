from __future__ import annotations

from sqlmodel import Field, SQLModel


class SearchResult(SQLModel, table=True):
    __tablename__ = "search_results"

    search_query_id: int = Field(
        foreign_key="search_queries.id", primary_key=True, ondelete="CASCADE"
    )
    imdb_id: str = Field(foreign_key="movies.imdb_id", primary_key=True, max_length=20)
    position: int = Field(default=0, nullable=False)
