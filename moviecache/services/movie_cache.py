from __future__ import annotations

from collections.abc import Callable
from typing import Any

import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from moviecache.models import Movie, SearchQuery
from moviecache.models.movie import YEAR_UNKNOWN
from moviecache.schemas import (
    RESPONSE_FALSE,
    RESPONSE_TRUE,
    MovieDetail,
    MovieSearchItem,
    MovieSearchResponse,
)
from moviecache.services import movie_store
from moviecache.services.omdb import (
    OmdbClient,
    OmdbConfigurationError,
    OmdbRequestError,
)

_logger = structlog.get_logger(__name__)

_DETAIL_FIELDS = ("plot", "director", "actors", "runtime", "genre", "imdb_rating")


def _clean(value: str | None) -> str:
    return value.strip() if isinstance(value, str) else ""


def _has_identity(imdb_id: str | None, title: str | None) -> bool:
    return bool(_clean(imdb_id)) and bool(_clean(title))


def _year_or_unknown(value: str | None) -> str:
    return value.strip() if isinstance(value, str) else YEAR_UNKNOWN


class MovieCacheService:
    """Cache-aside lookups against OMDb backed by the relational store.

    Both entry points check the store first and only call OMDb on a miss.
    Upstream and storage errors never propagate: callers receive either a
    success-shaped payload, an empty failed search, or ``None`` for a
    detail lookup that could not be satisfied.
    """

    def __init__(self, *, omdb_client: OmdbClient | None = None) -> None:
        self._omdb = omdb_client or OmdbClient()

    def search(self, session: Session, *, query: str) -> MovieSearchResponse:
        cached = movie_store.find_query_by_text(session, query)
        if cached is not None:
            _logger.info(
                "movie_cache.search.hit",
                query=query,
                success=cached.query.response,
                items=len(cached.movies),
            )
            return self._response_from_cache(cached)

        try:
            fetched = self._omdb.search_movies(query)
        except (OmdbRequestError, OmdbConfigurationError) as exc:
            _logger.warning(
                "movie_cache.search.upstream_failed", query=query, error=str(exc)
            )
            return MovieSearchResponse.failed()

        _logger.info("movie_cache.search.miss", query=query, success=fetched.succeeded)
        if fetched.succeeded:
            self._write_search(session, query, fetched)
        else:
            self._write_negative_search(session, query, fetched)
        return fetched

    def get_by_id(self, session: Session, *, imdb_id: str) -> MovieDetail | None:
        cached = movie_store.find_movie_by_key(session, imdb_id)
        if cached is not None and cached.has_details:
            _logger.info("movie_cache.detail.hit", imdb_id=imdb_id)
            return self._detail_from_record(cached)

        try:
            fetched = self._omdb.get_movie(imdb_id)
        except (OmdbRequestError, OmdbConfigurationError) as exc:
            _logger.warning(
                "movie_cache.detail.upstream_failed", imdb_id=imdb_id, error=str(exc)
            )
            return None

        if not fetched.succeeded:
            _logger.info(
                "movie_cache.detail.not_found", imdb_id=imdb_id, error=fetched.error
            )
            return None

        _logger.info(
            "movie_cache.detail.miss", imdb_id=imdb_id, partial=cached is not None
        )
        self._write_detail(session, fetched)
        return fetched

    def _write_search(
        self, session: Session, query: str, fetched: MovieSearchResponse
    ) -> None:
        try:
            movies: list[Movie] = []
            seen: set[str] = set()
            for item in fetched.search or []:
                if not _has_identity(item.imdb_id, item.title):
                    _logger.info(
                        "movie_cache.search.item_skipped",
                        query=query,
                        imdb_id=item.imdb_id,
                        title=item.title,
                    )
                    continue
                movie = self._upsert_summary(session, item)
                if movie.imdb_id in seen:
                    continue
                seen.add(movie.imdb_id)
                movies.append(movie)

            record = SearchQuery(
                search_text=query,
                total_results=fetched.total_results,
                response=True,
            )
            movie_store.save_query(session, record, movies)
            session.commit()
        except SQLAlchemyError as exc:
            session.rollback()
            _logger.warning(
                "movie_cache.search.persist_failed", query=query, error=str(exc)
            )

    def _write_negative_search(
        self, session: Session, query: str, fetched: MovieSearchResponse
    ) -> None:
        try:
            record = SearchQuery(
                search_text=query,
                total_results=fetched.total_results,
                response=False,
                error=fetched.error,
            )
            movie_store.save_query(session, record)
            session.commit()
        except SQLAlchemyError as exc:
            session.rollback()
            _logger.warning(
                "movie_cache.search.persist_failed", query=query, error=str(exc)
            )

    def _write_detail(self, session: Session, fetched: MovieDetail) -> None:
        if not _has_identity(fetched.imdb_id, fetched.title):
            _logger.info(
                "movie_cache.detail.skipped_invalid",
                imdb_id=fetched.imdb_id,
                title=fetched.title,
            )
            return

        details = {name: _clean(getattr(fetched, name)) for name in _DETAIL_FIELDS}
        try:
            movie_store.upsert_movie(
                session,
                imdb_id=_clean(fetched.imdb_id),
                title=_clean(fetched.title),
                year=_year_or_unknown(fetched.year),
                media_type=fetched.media_type,
                poster=_clean(fetched.poster),
                **details,
            )
            session.commit()
        except SQLAlchemyError as exc:
            session.rollback()
            _logger.warning(
                "movie_cache.detail.persist_failed",
                imdb_id=fetched.imdb_id,
                error=str(exc),
            )

    def _upsert_summary(self, session: Session, item: MovieSearchItem) -> Movie:
        return movie_store.upsert_movie(
            session,
            imdb_id=_clean(item.imdb_id),
            title=_clean(item.title),
            year=_year_or_unknown(item.year),
            media_type=item.media_type,
            poster=_clean(item.poster),
        )

    def _response_from_cache(
        self, cached: movie_store.CachedSearch
    ) -> MovieSearchResponse:
        query = cached.query
        if not query.response:
            return MovieSearchResponse(
                total_results=query.total_results,
                response=RESPONSE_FALSE,
                error=query.error,
            )
        items = [
            MovieSearchItem(
                title=movie.title,
                year=movie.year,
                imdb_id=movie.imdb_id,
                media_type=movie.media_type,
                poster=movie.poster,
            )
            for movie in cached.movies
        ]
        return MovieSearchResponse(
            search=items,
            total_results=query.total_results,
            response=RESPONSE_TRUE,
        )

    def _detail_from_record(self, movie: Movie) -> MovieDetail:
        values: dict[str, Any] = {
            "title": movie.title,
            "year": movie.year,
            "imdb_id": movie.imdb_id,
            "media_type": movie.media_type,
            "poster": movie.poster,
        }
        for name in _DETAIL_FIELDS:
            values[name] = getattr(movie, name)
        return MovieDetail(response=RESPONSE_TRUE, **values)


_service_factory: Callable[[], MovieCacheService] | None = None


def set_movie_cache_service_factory(
    factory: Callable[[], MovieCacheService] | None,
) -> None:
    global _service_factory
    _service_factory = factory


def get_movie_cache_service() -> MovieCacheService:
    if _service_factory is not None:
        return _service_factory()
    return MovieCacheService()


__all__ = [
    "MovieCacheService",
    "get_movie_cache_service",
    "set_movie_cache_service_factory",
]
