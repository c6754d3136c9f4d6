"""Persistence helpers for the movie cache tables.

None of these functions commit. Callers group them into a single
transaction and decide when to commit or roll back.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any, cast

from sqlmodel import Session, col, select

from moviecache.models import Movie, SearchQuery, SearchResult
from moviecache.models.movie import MediaType


@dataclass(slots=True)
class CachedSearch:
    query: SearchQuery
    movies: list[Movie]


def find_query_by_text(session: Session, text: str) -> CachedSearch | None:
    statement = select(SearchQuery).where(SearchQuery.search_text == text)
    query = session.exec(statement).first()
    if query is None:
        return None

    movie_join = cast(Any, SearchResult.imdb_id == Movie.imdb_id)
    movies_statement = (
        select(Movie)
        .join(SearchResult, movie_join)
        .where(SearchResult.search_query_id == query.id)
        .order_by(col(SearchResult.position))
    )
    movies = list(session.exec(movies_statement).all())
    return CachedSearch(query=query, movies=movies)


def find_movie_by_key(session: Session, imdb_id: str) -> Movie | None:
    return session.get(Movie, imdb_id)


def upsert_movie(
    session: Session,
    *,
    imdb_id: str,
    title: str,
    year: str,
    media_type: MediaType | None,
    poster: str,
    **details: str,
) -> Movie:
    """Create or overwrite the movie keyed by ``imdb_id``.

    Summary columns are always written. Detail columns are only written when
    passed in ``details``, so a search-path upsert leaves an existing detail
    bundle untouched.
    """

    movie = session.get(Movie, imdb_id)
    if movie is None:
        movie = Movie(imdb_id=imdb_id, title=title)
    movie.title = title
    movie.year = year
    movie.media_type = media_type
    movie.poster = poster
    for field_name, value in details.items():
        setattr(movie, field_name, value)
    movie.touch()
    session.add(movie)
    session.flush()
    return movie


def save_query(
    session: Session,
    query: SearchQuery,
    movies: Iterable[Movie] = (),
) -> SearchQuery:
    """Persist ``query`` together with one association per movie, in order."""

    session.add(query)
    session.flush()
    if query.id is None:  # pragma: no cover - flush always assigns the key
        raise RuntimeError("Search query was not assigned an identifier")

    for position, movie in enumerate(movies):
        session.add(
            SearchResult(
                search_query_id=query.id,
                imdb_id=movie.imdb_id,
                position=position,
            )
        )
    session.flush()
    return query


__all__ = [
    "CachedSearch",
    "find_movie_by_key",
    "find_query_by_text",
    "save_query",
    "upsert_movie",
]
