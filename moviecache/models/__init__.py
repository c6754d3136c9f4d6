"""SQLModel table definitions with lazy imports to avoid circular issues."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlmodel import SQLModel

__all__ = [
    "SQLModel",
    "MediaType",
    "Movie",
    "SearchQuery",
    "SearchResult",
]


def __getattr__(name: str) -> object:
    if name == "Movie":
        from moviecache.models.movie import Movie as _Movie

        return _Movie
    if name == "MediaType":
        from moviecache.models.movie import MediaType as _MediaType

        return _MediaType
    if name == "SearchQuery":
        from moviecache.models.search_query import SearchQuery as _SearchQuery

        return _SearchQuery
    if name == "SearchResult":
        from moviecache.models.search_result import SearchResult as _SearchResult

        return _SearchResult
    raise AttributeError(f"module 'moviecache.models' has no attribute {name!r}")


if TYPE_CHECKING:
    from moviecache.models.movie import MediaType, Movie
    from moviecache.models.search_query import SearchQuery
    from moviecache.models.search_result import SearchResult


def ensure_model_mappings() -> None:
    """Import every table module so ``SQLModel.metadata`` is complete.

    The join table references both ``movies`` and ``search_queries`` by
    foreign key, so all three must be registered before ``create_all`` or
    Alembic autogeneration inspects the metadata.
    """
    import moviecache.models.movie as _movie
    import moviecache.models.search_query as _search_query
    import moviecache.models.search_result as _search_result

    _ = (_movie, _search_query, _search_result)


ensure_model_mappings()
