from sqlmodel import Field, SQLModel

from moviecache.models.base import IdentifierMixin, TimestampMixin


class SearchQuery(IdentifierMixin, TimestampMixin, SQLModel, table=True):
    __tablename__ = "search_queries"

    search_text: str = Field(unique=True, index=True, nullable=False, max_length=255)
    total_results: str | None = Field(default=None, max_length=32)
    response: bool = Field(nullable=False)
    error: str | None = Field(default=None, max_length=255)


__all__ = ["SearchQuery"]
